# src/atlas_compute/core/traceability/recorder.py
"""
ManifestRecorder — ponte entre o Event Log e o Run Manifest.

O recorder é um subscriber de `EventLog`: cada notificação do core vira uma
entrada de step ou um evento do Manifest, sem que algoritmos ou pipeline
conheçam o Manifest.

Mapeamento:
    - algorithm_started   → step_started("<índice>.<algoritmo>")
    - algorithm_completed → step_finished / step_failed do mesmo step
                            (um completed sem started abre um step novo)
    - pipeline_completed  → evento `pipeline_completed` + finish_run

Os índices seguem a ordem das notificações, começando em 0, o que coincide
com os índices dos steps de um pipeline enquanto nenhum step falha no
pré-flight (falhas de pré-flight não emitem notificações).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from .events import ALGORITHM_COMPLETED, ALGORITHM_STARTED, PIPELINE_COMPLETED, EventLog, EventRecord
from .manifest import RunManifest, add_event, finish_run, step_failed, step_finished, step_started


class ManifestRecorder:
    """
    Grava notificações de um `EventLog` em um `RunManifest`.

    Exemplo:
        >>> log = EventLog()
        >>> recorder = ManifestRecorder(manifest).attach(log)
        >>> pipeline.execute(graph, ExecutionContext.builder().with_events(log).build())
        >>> sorted(manifest.steps)
        ['0.PageRank', '1.ConnectedComponents']
    """

    def __init__(self, manifest: RunManifest) -> None:
        self.manifest = manifest
        self._next_index = 0
        self._open: Dict[str, List[str]] = {}
        self._log: Optional[EventLog] = None

    def attach(self, log: EventLog) -> "ManifestRecorder":
        log.subscribe(self)
        self._log = log
        return self

    def detach(self) -> None:
        if self._log is not None:
            self._log.unsubscribe(self)
            self._log = None

    def __call__(self, event: EventRecord) -> None:
        event_type = event.get("event_type")
        ts = datetime.fromisoformat(event["timestamp"])

        if event_type == ALGORITHM_STARTED:
            algorithm = event["algorithm"]
            step_id = self._new_step_id(algorithm)
            self._open.setdefault(algorithm, []).append(step_id)
            step_started(self.manifest, step_id=step_id, algorithm=algorithm, ts=ts)

        elif event_type == ALGORITHM_COMPLETED:
            algorithm = event["algorithm"]
            pending = self._open.get(algorithm)
            step_id = pending.pop(0) if pending else self._new_step_id(algorithm)
            if event.get("success"):
                step_finished(
                    self.manifest,
                    step_id=step_id,
                    ts=ts,
                    result={
                        "output_dataset": event.get("output_dataset"),
                        "duration_ms": event.get("duration_ms"),
                    },
                )
            else:
                step_failed(self.manifest, step_id=step_id, ts=ts, error=event.get("error") or "")

        elif event_type == PIPELINE_COMPLETED:
            payload = {k: v for k, v in event.items() if k not in ("event_type", "timestamp")}
            add_event(self.manifest, event_type=PIPELINE_COMPLETED, ts=ts, payload=payload)
            finish_run(
                self.manifest,
                ts=ts,
                success=bool(event.get("success")),
                failed_step_index=int(event.get("failed_step_index", -1)),
            )

    def attach_result(self, step_id: str, result: Any) -> None:
        """
        Completa o step com métricas de um `ExecutionResult`.

        Notificações não carregam métricas; o chamador que tem o resultado
        em mãos pode anexá-las depois (ex.: a partir de `PipelineResult`).
        """
        step = self.manifest.steps.setdefault(step_id, {"step_id": step_id})
        step["metrics"] = result.to_dict()["metrics"]
        if result.error_kind is not None:
            step["error_kind"] = result.error_kind.value

    def _new_step_id(self, algorithm: str) -> str:
        step_id = f"{self._next_index}.{algorithm}"
        self._next_index += 1
        return step_id
