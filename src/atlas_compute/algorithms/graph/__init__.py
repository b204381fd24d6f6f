# src/atlas_compute/algorithms/graph/__init__.py
"""Algoritmos de grafo: PageRank e ConnectedComponents."""

from .connected_components import COMPONENT_PROPERTY, ConnectedComponentsAlgorithm
from .pagerank import PAGERANK_PROPERTY, PageRankAlgorithm

__all__ = [
    "COMPONENT_PROPERTY",
    "ConnectedComponentsAlgorithm",
    "PAGERANK_PROPERTY",
    "PageRankAlgorithm",
]
