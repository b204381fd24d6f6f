# src/atlas_compute/core/algorithm/__init__.py
"""
Contrato de algoritmos do Atlas Compute.

Reúne o contexto de execução, o resultado imutável, o template base e o
registry. Algoritmos concretos vivem em `atlas_compute.algorithms`.
"""

from .base import Algorithm, AlgorithmBase, GraphAlgorithm, TabularAlgorithm, describe_parameters
from .context import (
    CancellationToken,
    ExecutionContext,
    ExecutionContextBuilder,
    ProgressCallback,
    coerce_value,
)
from .registry import AlgorithmRegistry, default_registry, reset_default_registry
from .types import AlgorithmKind, AlgorithmOutput, ExecutionResult, ParameterDescriptor

__all__ = [
    "Algorithm",
    "AlgorithmBase",
    "AlgorithmKind",
    "AlgorithmOutput",
    "AlgorithmRegistry",
    "CancellationToken",
    "ExecutionContext",
    "ExecutionContextBuilder",
    "ExecutionResult",
    "GraphAlgorithm",
    "ParameterDescriptor",
    "ProgressCallback",
    "TabularAlgorithm",
    "coerce_value",
    "default_registry",
    "describe_parameters",
    "reset_default_registry",
]
