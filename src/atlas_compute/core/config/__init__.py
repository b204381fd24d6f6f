# src/atlas_compute/core/config/__init__.py
"""
Camada de configuração do Atlas Compute.

A configuração descreve, de forma declarativa, os defaults de parâmetros
por algoritmo e as definições de pipelines nomeados:

    algorithms:
      PageRank:
        parameters:
          dampingFactor: 0.85
    pipelines:
      graph_analysis:
        steps:
          - algorithm: PageRank
          - algorithm: ConnectedComponents
            parameters:
              directed: true

Responsabilidades do pacote:
    - Carregar arquivos YAML/JSON (defaults + override local opcional)
    - Resolver a configuração final via deep-merge determinístico
    - Calcular hash canônico para proveniência (Manifest)
    - Expressar falhas estruturais com exceções tipadas

Limites explícitos:
    - Não instancia algoritmos (ver `core.engine.builder`)
    - Não valida semântica de parâmetros (responsabilidade de cada algoritmo)
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    PipelineConfigurationError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import load_config, load_config_file
from .merge import deep_merge

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "PipelineConfigurationError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "deep_merge",
    "load_config",
    "load_config_file",
]
