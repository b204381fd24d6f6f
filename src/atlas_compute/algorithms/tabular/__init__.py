# src/atlas_compute/algorithms/tabular/__init__.py
"""Algoritmos tabulares: MinMaxNormalize."""

from .minmax_normalize import MinMaxNormalizeAlgorithm

__all__ = ["MinMaxNormalizeAlgorithm"]
