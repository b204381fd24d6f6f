# src/atlas_compute/core/algorithm/base.py
"""
Contrato de algoritmo e template base de execução.

Todo algoritmo do Atlas Compute declara:
    - name / description
    - kind (`AlgorithmKind`: tabular | graph | any)
    - parameters (tupla de `ParameterDescriptor`)
    - can_execute(dataset) → bool
    - validate_parameters(context) → lista de violações
    - uma rotina específica de execução (tabular ou grafo)

O template `AlgorithmBase.execute` é o **único ponto de entrada** usado por
chamadores e impõe, nesta ordem:

    1. can_execute        → falha `incompatible_kind`
    2. validate_parameters → falha `parameter_validation` (todas as violações)
    3. cancelamento prévio → falha `cancelled`
    4. evento `algorithm_started`
    5. rotina específica (cancelamento e exceções capturados)
    6. metadata (algorithmName, inputDataset, durationMs) + `algorithm_completed`

Máquina de estados:
    Idle → Validating → Running → {Completed | Failed | Cancelled}

Decisões arquiteturais:
    - A rotina específica devolve `AlgorithmOutput` (Ok); qualquer exceção
      vira `ExecutionResult.failed` com `ErrorKind` (Err)
    - A duração cobre a execução inteira, inclusive validação
    - Algoritmos concretos não capturam exceções que não sabem tratar:
      a tradução de falhas pertence ao template

Invariantes:
    - `execute` nunca propaga exceções de validação, cancelamento ou da rotina
    - O dataset de entrada nunca é mutado por um algoritmo

Limites explícitos:
    - Não registra algoritmos (ver `registry`)
    - Não encadeia algoritmos (ver `core.engine.pipeline`)
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from atlas_compute.core.datasets.graph import MemoryGraphDataset
from atlas_compute.core.datasets.types import GraphDataset, TabularDataset, dataset_kind_of
from atlas_compute.core.errors import (
    ErrorKind,
    ErrorPayload,
    cancelled,
    exception_to_error,
    incompatible_kind,
    parameter_validation,
)
from atlas_compute.core.exceptions import OperationCancelled
from .context import ExecutionContext, coerce_value
from .types import AlgorithmKind, AlgorithmOutput, ExecutionResult, ParameterDescriptor


@runtime_checkable
class Algorithm(Protocol):
    """Contrato estrutural mínimo aceito por registry e pipeline."""

    name: str
    description: str
    kind: AlgorithmKind
    parameters: Tuple[ParameterDescriptor, ...]

    def can_execute(self, dataset: Any) -> bool: ...

    def validate_parameters(self, context: ExecutionContext) -> List[str]: ...

    def execute(self, dataset: Any, context: Optional[ExecutionContext] = None) -> ExecutionResult: ...


def _elapsed(started: float) -> timedelta:
    return timedelta(seconds=time.perf_counter() - started)


class AlgorithmBase(ABC):
    """
    Template base de todos os algoritmos.

    Subclasses definem os atributos de classe `name`, `description`, `kind`
    e `parameters`, e implementam `_execute_core`. Na prática, algoritmos
    concretos herdam de `TabularAlgorithm` ou `GraphAlgorithm`.
    """

    name: str = ""
    description: str = ""
    kind: AlgorithmKind = AlgorithmKind.ANY
    parameters: Tuple[ParameterDescriptor, ...] = ()

    # Sufixo do nome de saída quando o contexto não define `output_name`.
    output_suffix: Optional[str] = None

    # -----------------------------
    # Pré-flight
    # -----------------------------
    def can_execute(self, dataset: Any) -> bool:
        if dataset is None:
            return False
        return self.kind.accepts(dataset_kind_of(dataset))

    def validate_parameters(self, context: ExecutionContext) -> List[str]:
        """
        Validação padrão a partir de `parameters`.

        Reporta, por descriptor:
            - parâmetro obrigatório ausente (ou None)
            - parâmetro presente cujo valor não converte para `value_type`

        Subclasses estendem chamando `super().validate_parameters(context)`.
        """
        violations: List[str] = []
        for descriptor in self.parameters:
            value = context.parameters.get(descriptor.name)
            if value is None:
                if descriptor.required:
                    violations.append(f"Required parameter '{descriptor.name}' is missing.")
                continue
            try:
                coerce_value(value, descriptor.value_type)
            except (TypeError, ValueError):
                violations.append(
                    f"Parameter '{descriptor.name}' is {type(value).__name__}, "
                    f"expected {descriptor.value_type.__name__}."
                )
        return violations

    # -----------------------------
    # Template
    # -----------------------------
    def execute(self, dataset: Any, context: Optional[ExecutionContext] = None) -> ExecutionResult:
        context = context or ExecutionContext.empty()
        events = context.events
        started = time.perf_counter()

        try:
            if not self.can_execute(dataset):
                kind = dataset_kind_of(dataset)
                payload = incompatible_kind(
                    dataset=getattr(dataset, "name", None),
                    dataset_kind=kind.value if kind else None,
                    algorithm=self.name,
                    expected_kind=self.kind.value,
                )
                return self._failed(payload, ErrorKind.INCOMPATIBLE_KIND, started)

            violations = list(self.validate_parameters(context))
            if violations:
                payload = parameter_validation(algorithm=self.name, violations=violations)
                return self._failed(payload, ErrorKind.PARAMETER_VALIDATION, started)

            context.raise_if_cancelled()

            if events is not None:
                events.algorithm_started(self.name, dataset)

            output = self._execute_core(dataset, context)
            if not isinstance(output, AlgorithmOutput):
                raise TypeError(
                    f"{self.name} returned {type(output).__name__}, expected AlgorithmOutput"
                )

        except OperationCancelled:
            payload = cancelled(algorithm=self.name)
            result = self._failed(payload, ErrorKind.CANCELLED, started)
            if events is not None:
                events.algorithm_completed(self.name, dataset, None, False, result.duration, "Cancelled")
            return result

        except Exception as exc:
            payload = exception_to_error(exc, algorithm=self.name)
            result = self._failed(payload, ErrorKind.EXECUTION_FAILURE, started)
            if events is not None:
                events.algorithm_completed(self.name, dataset, None, False, result.duration, payload.message)
            return result

        duration = _elapsed(started)
        metadata: Dict[str, Any] = dict(output.metadata)
        metadata["algorithmName"] = self.name
        metadata["inputDataset"] = getattr(dataset, "name", None)
        metadata["durationMs"] = duration.total_seconds() * 1000.0

        if events is not None:
            events.algorithm_completed(self.name, dataset, output.output_dataset, True, duration)

        return ExecutionResult.succeeded(
            self.name,
            output.output_dataset,
            metrics=output.metrics,
            metadata=metadata,
            duration=duration,
        )

    @abstractmethod
    def _execute_core(self, dataset: Any, context: ExecutionContext) -> AlgorithmOutput:
        """Rotina específica; levanta exceção em caso de falha."""

    # -----------------------------
    # Helpers
    # -----------------------------
    def _resolve_output_name(self, dataset: Any, context: ExecutionContext) -> str:
        if context.output_name:
            return context.output_name
        suffix = self.output_suffix or self.name.replace(" ", "")
        return f"{dataset.name}_{suffix}"

    def _failed(self, payload: ErrorPayload, kind: ErrorKind, started: float) -> ExecutionResult:
        duration = _elapsed(started)
        return ExecutionResult.failed(
            self.name,
            payload.message,
            error_kind=kind,
            metadata={
                "algorithmName": self.name,
                "durationMs": duration.total_seconds() * 1000.0,
                "error": payload.to_dict(),
            },
            duration=duration,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} kind={self.kind.value}>"


class TabularAlgorithm(AlgorithmBase):
    """Base de algoritmos tabulares; subclasses implementam `_execute_tabular`."""

    kind = AlgorithmKind.TABULAR

    def _execute_core(self, dataset: Any, context: ExecutionContext) -> AlgorithmOutput:
        return self._execute_tabular(dataset, context)

    @abstractmethod
    def _execute_tabular(self, dataset: TabularDataset, context: ExecutionContext) -> AlgorithmOutput:
        ...


class GraphAlgorithm(AlgorithmBase):
    """Base de algoritmos de grafo; subclasses implementam `_execute_graph`."""

    kind = AlgorithmKind.GRAPH

    def _execute_core(self, dataset: Any, context: ExecutionContext) -> AlgorithmOutput:
        return self._execute_graph(dataset, context)

    @abstractmethod
    def _execute_graph(self, dataset: GraphDataset, context: ExecutionContext) -> AlgorithmOutput:
        ...

    @staticmethod
    def _copy_with_node_property(
        source: GraphDataset,
        name: str,
        prop: str,
        values: Mapping[str, Any],
    ) -> MemoryGraphDataset:
        """
        Copia nós e arestas de `source` para um grafo novo, acrescentando
        `prop` a cada nó. Arestas para nós fora do grafo são descartadas.
        """
        output = MemoryGraphDataset(name)
        for node_id in source.node_ids():
            props = dict(source.get_node_properties(node_id))
            props[prop] = values[node_id]
            output.add_node(node_id, props)
        for from_id, to_id, props in source.edges():
            if output.has_node(from_id) and output.has_node(to_id):
                output.add_edge(from_id, to_id, props)
        return output


def describe_parameters(algorithm: Algorithm) -> Sequence[Dict[str, Any]]:
    """Lista serializável dos parâmetros declarados por `algorithm`."""
    return [descriptor.to_dict() for descriptor in algorithm.parameters]
