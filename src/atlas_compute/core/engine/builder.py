# src/atlas_compute/core/engine/builder.py
"""
Construção de pipelines a partir de configuração declarativa.

Formato esperado (ver `core.config`):

    algorithms:
      <Nome>:
        parameters: {...}          # defaults por algoritmo (opcional)
    pipelines:
      <nome_do_pipeline>:
        steps:
          - algorithm: <Nome registrado>
            parameters: {...}      # opcional
            output_name: <nome>    # opcional

Regras:
    - Algoritmos são resolvidos no registry informado (ou no registry padrão)
    - Parâmetros do step = deep_merge(defaults do algoritmo, parâmetros do step)
    - Defaults são procurados pelo nome do step e pelo nome canônico do
      algoritmo registrado (case-insensitive no registry, exato no config)

Erros estruturais levantam `PipelineConfigurationError`; nada é executado
aqui.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from atlas_compute.core.algorithm.registry import AlgorithmRegistry, default_registry
from atlas_compute.core.config.errors import PipelineConfigurationError
from atlas_compute.core.config.merge import deep_merge
from .pipeline import Pipeline


def _mapping(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise PipelineConfigurationError(f"{where} must be a mapping, got {type(value).__name__}")
    return dict(value)


def _algorithm_defaults(config: Mapping[str, Any], *names: str) -> Dict[str, Any]:
    section = _mapping(config.get("algorithms"), "algorithms")
    for name in names:
        if name in section:
            entry = _mapping(section[name], f"algorithms.{name}")
            return _mapping(entry.get("parameters"), f"algorithms.{name}.parameters")
    return {}


def build_pipeline(
    config: Mapping[str, Any],
    name: str,
    registry: Optional[AlgorithmRegistry] = None,
) -> Pipeline:
    """
    Monta o `Pipeline` nomeado `name` descrito em `config`.

    Args:
        config: Configuração efetiva (ex.: retorno de `load_config`).
        name: Chave em `config["pipelines"]`.
        registry: Registry para resolver algoritmos; padrão `default_registry()`.

    Returns:
        Pipeline pronto para `execute`.

    Raises:
        PipelineConfigurationError: Pipeline inexistente, steps ausentes ou
            malformados, algoritmo não registrado, parâmetros que não são mapa.
        ConfigTypeConflictError: Conflito de tipo entre defaults e parâmetros do step.
    """
    registry = registry if registry is not None else default_registry()

    pipelines = _mapping(config.get("pipelines"), "pipelines")
    if name not in pipelines:
        raise PipelineConfigurationError(
            f"Pipeline '{name}' is not defined (available: {sorted(pipelines)})"
        )

    definition = _mapping(pipelines[name], f"pipelines.{name}")
    steps = definition.get("steps")
    if not isinstance(steps, list) or not steps:
        raise PipelineConfigurationError(f"pipelines.{name}.steps must be a non-empty list")

    pipeline = Pipeline(name)
    for i, raw in enumerate(steps):
        where = f"pipelines.{name}.steps[{i}]"
        step = _mapping(raw, where)

        algorithm_name = step.get("algorithm")
        if not isinstance(algorithm_name, str) or not algorithm_name.strip():
            raise PipelineConfigurationError(f"{where}.algorithm must be a non-empty string")

        algorithm = registry.try_get(algorithm_name)
        if algorithm is None:
            raise PipelineConfigurationError(
                f"{where}: algorithm '{algorithm_name}' is not registered "
                f"(available: {registry.names()})"
            )

        defaults = _algorithm_defaults(config, algorithm_name, algorithm.name)
        parameters = deep_merge(defaults, _mapping(step.get("parameters"), f"{where}.parameters"))

        output_name = step.get("output_name")
        if output_name is not None and not isinstance(output_name, str):
            raise PipelineConfigurationError(f"{where}.output_name must be a string")

        pipeline.add(algorithm, parameters=parameters, output_name=output_name)

    return pipeline
