# src/atlas_compute/algorithms/__init__.py
"""
Algoritmos built-in do Atlas Compute.

Cada algoritmo é uma instância sem estado: a mesma instância pode ser
executada várias vezes, inclusive em pipelines distintos.

Built-ins:
    - PageRank            (graph)
    - ConnectedComponents (graph)
    - MinMaxNormalize     (tabular)
"""

from __future__ import annotations

from typing import List

from atlas_compute.core.algorithm.base import AlgorithmBase
from .graph import ConnectedComponentsAlgorithm, PageRankAlgorithm
from .tabular import MinMaxNormalizeAlgorithm


def builtin_algorithms() -> List[AlgorithmBase]:
    """Instâncias novas dos algoritmos built-in, na ordem de registro."""
    return [
        PageRankAlgorithm(),
        ConnectedComponentsAlgorithm(),
        MinMaxNormalizeAlgorithm(),
    ]


__all__ = [
    "ConnectedComponentsAlgorithm",
    "MinMaxNormalizeAlgorithm",
    "PageRankAlgorithm",
    "builtin_algorithms",
]
