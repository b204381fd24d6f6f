# src/atlas_compute/core/algorithm/types.py
"""
Tipos canônicos do contrato de algoritmos do Atlas Compute.

Este módulo define as estruturas que padronizam a comunicação entre
algoritmos, pipeline, registry e camadas de rastreabilidade:

    - AlgorithmKind       → tipo de dataset aceito (tabular | graph | any)
    - ParameterDescriptor → declaração estática de um parâmetro aceito
    - AlgorithmOutput     → payload de sucesso devolvido pela rotina do algoritmo
    - ExecutionResult     → resultado imutável de uma invocação

Decisões arquiteturais:
    - Falhas são dados: `ExecutionResult.failed` carrega `error` e `error_kind`,
      nunca uma exceção
    - `metrics` e `metadata` são snapshots somente-leitura em profundidade
      (`MappingProxyType` e tuplas); `to_dict` devolve cópias mutáveis
    - `duration` é `timedelta`; `to_dict` expõe `duration_ms` para persistência

Invariantes:
    - success=False ⇒ output_dataset is None, error não-vazio, error_kind definido
    - success=True  ⇒ error is None e error_kind is None

Limites explícitos:
    - Nenhuma lógica de execução vive neste módulo
    - Não conhece datasets concretos (apenas o atributo `name`)

Este módulo existe para garantir consistência e clareza semântica
no retorno de qualquer algoritmo.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from atlas_compute.core.datasets.types import DatasetKind
from atlas_compute.core.errors import ErrorKind


class AlgorithmKind(str, Enum):
    """
    Tipo de dataset que um algoritmo declara aceitar.

    `ANY` aceita qualquer `DatasetKind`; os demais exigem correspondência
    exata do valor textual.
    """

    TABULAR = "tabular"
    GRAPH = "graph"
    ANY = "any"

    def accepts(self, dataset_kind: Optional[DatasetKind]) -> bool:
        if self is AlgorithmKind.ANY:
            return dataset_kind is not None
        return dataset_kind is not None and dataset_kind.value == self.value


@dataclass(frozen=True)
class ParameterDescriptor:
    """
    Declaração de um parâmetro aceito por um algoritmo.

    Usada pelo template base para validação pré-execução (obrigatoriedade e
    conversibilidade de tipo) e por introspecção via registry. Não possui
    comportamento em runtime.
    """

    name: str
    description: str
    value_type: type
    required: bool = False
    default: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "type": self.value_type.__name__,
            "required": self.required,
            "default": self.default,
        }


@dataclass(frozen=True)
class AlgorithmOutput:
    """
    Payload de sucesso da rotina específica de um algoritmo.

    `output_dataset=None` representa um resultado apenas com métricas
    (ex.: grafo vazio); nesse caso o pipeline repassa o mesmo input ao
    próximo step.
    """

    output_dataset: Any = None
    metrics: Mapping[str, Any] = field(default_factory=dict)
    metadata: Mapping[str, Any] = field(default_factory=dict)


def _freeze_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze_value(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_value(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze_value(v) for v in value)
    return value


def _thaw_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw_value(v) for k, v in value.items()}
    if isinstance(value, (tuple, frozenset)):
        return [_thaw_value(v) for v in value]
    return value


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    # snapshot profundo: dicts aninhados viram MappingProxyType, listas viram tuplas
    return _freeze_value(mapping or {})


@dataclass(frozen=True)
class ExecutionResult:
    """
    Resultado imutável de exatamente uma invocação de algoritmo.

    Prefira os construtores `succeeded`, `metrics_only` e `failed`; o
    construtor direto valida as mesmas invariantes.
    """

    success: bool
    algorithm_name: str
    output_dataset: Any = None
    metrics: Mapping[str, Any] = field(default_factory=dict)
    metadata: Mapping[str, Any] = field(default_factory=dict)
    duration: timedelta = timedelta(0)
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def __post_init__(self) -> None:
        if self.success:
            if self.error is not None or self.error_kind is not None:
                raise ValueError("successful ExecutionResult cannot carry an error")
        else:
            if self.output_dataset is not None:
                raise ValueError("failed ExecutionResult cannot carry an output dataset")
            if not self.error:
                raise ValueError("failed ExecutionResult requires a non-empty error")
            if self.error_kind is None:
                object.__setattr__(self, "error_kind", ErrorKind.EXECUTION_FAILURE)

        object.__setattr__(self, "metrics", _freeze(self.metrics))
        object.__setattr__(self, "metadata", _freeze(self.metadata))

    # -----------------------------
    # Construtores
    # -----------------------------
    @classmethod
    def succeeded(
        cls,
        algorithm_name: str,
        output_dataset: Any,
        metrics: Optional[Mapping[str, Any]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
        duration: timedelta = timedelta(0),
    ) -> "ExecutionResult":
        return cls(
            success=True,
            algorithm_name=algorithm_name,
            output_dataset=output_dataset,
            metrics=metrics or {},
            metadata=metadata or {},
            duration=duration,
        )

    @classmethod
    def metrics_only(
        cls,
        algorithm_name: str,
        metrics: Mapping[str, Any],
        metadata: Optional[Mapping[str, Any]] = None,
        duration: timedelta = timedelta(0),
    ) -> "ExecutionResult":
        return cls.succeeded(algorithm_name, None, metrics, metadata, duration)

    @classmethod
    def failed(
        cls,
        algorithm_name: str,
        error: str,
        error_kind: ErrorKind = ErrorKind.EXECUTION_FAILURE,
        metadata: Optional[Mapping[str, Any]] = None,
        duration: timedelta = timedelta(0),
    ) -> "ExecutionResult":
        return cls(
            success=False,
            algorithm_name=algorithm_name,
            metadata=metadata or {},
            duration=duration,
            error=error,
            error_kind=error_kind,
        )

    # -----------------------------
    # Serialização
    # -----------------------------
    @property
    def duration_ms(self) -> float:
        return self.duration.total_seconds() * 1000.0

    def to_dict(self) -> Dict[str, Any]:
        """Representação serializável (o dataset é reduzido ao seu nome)."""
        return {
            "success": self.success,
            "algorithm_name": self.algorithm_name,
            "output_dataset": getattr(self.output_dataset, "name", None),
            "metrics": _thaw_value(self.metrics),
            "metadata": _thaw_value(self.metadata),
            "duration_ms": self.duration_ms,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }

    def __str__(self) -> str:
        if self.success:
            target = getattr(self.output_dataset, "name", None) or "metrics only"
            return f"{self.algorithm_name}: Success -> {target} ({self.duration_ms:.1f}ms)"
        return f"{self.algorithm_name}: Failed ({self.error_kind.value}) - {self.error}"
