# src/atlas_compute/core/engine/pipeline.py
"""
Pipeline de algoritmos do Atlas Compute.

Um `Pipeline` encadeia algoritmos: o dataset de saída do step N vira o
input do step N+1. Steps que produzem apenas métricas (sem dataset)
repassam o mesmo input adiante.

Execução (`Pipeline.execute`):
    Para cada step i de N, em ordem de declaração:
        1. Checa o cancelamento do contexto base (falha imediata)
        2. Monta o contexto do step herdando do base: cancelamento, store e
           sink de eventos (parâmetros do base **não** são herdados)
        3. Aplica a configuração do step (parâmetros, output_name, callback)
        4. Se o base tem callback de progresso, o step reporta na faixa
           [i/N, (i+1)/N) da escala global
        5. Executa; em falha, para e devolve `PipelineResult` FAILED com
           todos os resultados até o step que falhou (inclusive)

Decisões arquiteturais:
    - Nenhuma compensação/rollback de steps anteriores
    - Nenhum retry automático
    - `pipeline_completed` é emitido no sink do contexto base ao final,
      com sucesso ou falha

Invariantes:
    - `step_results` preserva a ordem de execução
    - failed_step_index == -1 ⇔ success
    - FAILED ⇒ final_output is None

Limites explícitos:
    - Execução síncrona e sequencial (sem paralelismo entre steps)
    - Não resolve algoritmos por nome (ver `builder.build_pipeline`)
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from atlas_compute.core.algorithm.base import Algorithm
from atlas_compute.core.algorithm.context import ExecutionContext, ExecutionContextBuilder, ProgressCallback
from atlas_compute.core.algorithm.types import ExecutionResult
from atlas_compute.core.errors import ErrorKind

ContextConfigurator = Callable[[ExecutionContextBuilder], None]

PIPELINE_CANCELLED = "Pipeline execution was cancelled."


@dataclass(frozen=True)
class PipelineStep:
    """
    Um algoritmo e a configuração do seu contexto dentro do pipeline.

    `parameters` e `output_name` são aplicados antes de `configure`, que
    tem a palavra final sobre o builder do step.
    """

    algorithm: Algorithm
    configure: Optional[ContextConfigurator] = None
    parameters: Mapping[str, Any] = field(default_factory=dict)
    output_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.algorithm is None:
            raise ValueError("PipelineStep requires an algorithm")

    def build_context(
        self,
        base: ExecutionContext,
        progress: Optional[ProgressCallback],
    ) -> ExecutionContext:
        builder = (
            ExecutionContext.builder()
            .with_cancellation(base.cancellation)
            .with_store(base.store)
            .with_events(base.events)
            .with_parameters(self.parameters)
        )
        if self.output_name:
            builder.with_output_name(self.output_name)
        if self.configure is not None:
            self.configure(builder)
        if progress is not None:
            builder.with_progress(progress)
        return builder.build()


@dataclass(frozen=True)
class PipelineResult:
    """Resultado agregado de uma execução de pipeline (somente leitura)."""

    success: bool
    pipeline_name: str
    final_output: Any = None
    step_results: Tuple[ExecutionResult, ...] = ()
    failed_step_index: int = -1
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    duration: timedelta = timedelta(0)

    @classmethod
    def succeeded(
        cls,
        name: str,
        final_output: Any,
        step_results: List[ExecutionResult],
        duration: timedelta,
    ) -> "PipelineResult":
        return cls(True, name, final_output, tuple(step_results), -1, None, None, duration)

    @classmethod
    def failed(
        cls,
        name: str,
        step_results: List[ExecutionResult],
        failed_step_index: int,
        error: str,
        duration: timedelta,
        error_kind: ErrorKind = ErrorKind.EXECUTION_FAILURE,
    ) -> "PipelineResult":
        return cls(False, name, None, tuple(step_results), failed_step_index, error, error_kind, duration)

    @property
    def duration_ms(self) -> float:
        return self.duration.total_seconds() * 1000.0

    def all_metrics(self) -> Dict[str, Any]:
        """Métricas de todos os steps, achatadas em `"<índice>.<algoritmo>.<métrica>"`."""
        merged: Dict[str, Any] = {}
        for i, result in enumerate(self.step_results):
            for key, value in result.metrics.items():
                merged[f"{i}.{result.algorithm_name}.{key}"] = value
        return merged

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "pipeline_name": self.pipeline_name,
            "final_output": getattr(self.final_output, "name", None),
            "steps": [r.to_dict() for r in self.step_results],
            "failed_step_index": self.failed_step_index,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "duration_ms": self.duration_ms,
        }

    def __str__(self) -> str:
        if self.success:
            return (
                f"[{self.pipeline_name}] Completed {len(self.step_results)} steps "
                f"in {self.duration_ms:.1f}ms"
            )
        return f"[{self.pipeline_name}] Failed at step {self.failed_step_index}: {self.error}"


def _partitioned(callback: ProgressCallback, index: int, total: int) -> ProgressCallback:
    start = index / total
    width = 1.0 / total

    def report(fraction: float) -> None:
        callback(start + fraction * width)

    return report


class Pipeline:
    """
    Sequência ordenada de steps executados sobre um dataset inicial.

    Exemplo:
        >>> pipeline = (
        ...     Pipeline("graph_analysis")
        ...     .add(PageRankAlgorithm(), parameters={"dampingFactor": 0.9})
        ...     .add(ConnectedComponentsAlgorithm())
        ... )
        >>> result = pipeline.execute(graph)
        >>> result.final_output.get_node_properties("A")
        {'pagerank': ..., 'componentId': 0}
    """

    def __init__(self, name: str = "Pipeline") -> None:
        self.name = name or "Pipeline"
        self._steps: List[PipelineStep] = []

    @property
    def steps(self) -> Tuple[PipelineStep, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def add(
        self,
        algorithm: Algorithm,
        configure: Optional[ContextConfigurator] = None,
        *,
        parameters: Optional[Mapping[str, Any]] = None,
        output_name: Optional[str] = None,
    ) -> "Pipeline":
        self._steps.append(
            PipelineStep(
                algorithm=algorithm,
                configure=configure,
                parameters=dict(parameters or {}),
                output_name=output_name,
            )
        )
        return self

    def execute(self, dataset: Any, base_context: Optional[ExecutionContext] = None) -> PipelineResult:
        base = base_context or ExecutionContext.empty()
        total = len(self._steps)
        results: List[ExecutionResult] = []
        current = dataset
        started = time.perf_counter()

        for i, step in enumerate(self._steps):
            if base.is_cancelled:
                return self._finish(
                    base,
                    PipelineResult.failed(
                        self.name, results, i, PIPELINE_CANCELLED, self._elapsed(started), ErrorKind.CANCELLED
                    ),
                )

            progress = _partitioned(base.progress, i, total) if base.progress is not None else None
            result = step.algorithm.execute(current, step.build_context(base, progress))
            results.append(result)

            if not result.success:
                return self._finish(
                    base,
                    PipelineResult.failed(
                        self.name,
                        results,
                        i,
                        result.error or "",
                        self._elapsed(started),
                        result.error_kind or ErrorKind.EXECUTION_FAILURE,
                    ),
                )

            if result.output_dataset is not None:
                current = result.output_dataset

        return self._finish(base, PipelineResult.succeeded(self.name, current, results, self._elapsed(started)))

    def _finish(self, base: ExecutionContext, result: PipelineResult) -> PipelineResult:
        if base.events is not None:
            base.events.pipeline_completed(
                self.name,
                len(self._steps),
                result.success,
                result.duration,
                result.failed_step_index,
            )
        return result

    @staticmethod
    def _elapsed(started: float) -> timedelta:
        return timedelta(seconds=time.perf_counter() - started)

    def __repr__(self) -> str:
        names = ", ".join(s.algorithm.name for s in self._steps)
        return f"<Pipeline name={self.name!r} steps=[{names}]>"
