# src/atlas_compute/core/datasets/__init__.py
"""
Datasets do Atlas Compute: contratos de capacidade e implementações em memória.
"""

from .graph import DuplicateEdgeError, DuplicateNodeError, MemoryGraphDataset
from .store import MemoryDataStore
from .tabular import ColumnLengthMismatchError, DuplicateColumnError, MemoryTabularDataset
from .types import (
    ColumnType,
    Dataset,
    DatasetKind,
    GraphDataset,
    TabularDataset,
    dataset_kind_of,
)

__all__ = [
    "ColumnLengthMismatchError",
    "ColumnType",
    "Dataset",
    "DatasetKind",
    "DuplicateColumnError",
    "DuplicateEdgeError",
    "DuplicateNodeError",
    "GraphDataset",
    "MemoryDataStore",
    "MemoryGraphDataset",
    "MemoryTabularDataset",
    "TabularDataset",
    "dataset_kind_of",
]
