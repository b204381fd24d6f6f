# src/atlas_compute/core/engine/__init__.py
"""
Engine do Atlas Compute: pipeline de algoritmos e construção via configuração.
"""

from .builder import build_pipeline
from .pipeline import (
    PIPELINE_CANCELLED,
    ContextConfigurator,
    Pipeline,
    PipelineResult,
    PipelineStep,
)

__all__ = [
    "PIPELINE_CANCELLED",
    "ContextConfigurator",
    "Pipeline",
    "PipelineResult",
    "PipelineStep",
    "build_pipeline",
]
