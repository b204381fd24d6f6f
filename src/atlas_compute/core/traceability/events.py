# src/atlas_compute/core/traceability/events.py
"""
Event Log estruturado do Atlas Compute.

O core não usa logging textual: todo evento observável de execução é um
dict estruturado com `event_type` e `timestamp` (UTC, ISO-8601), acumulado
em ordem no `EventLog` e repassado síncronamente aos subscribers.

Eventos emitidos pelo core:
    - algorithm_started   → algorithm, input_dataset, input_kind
    - algorithm_completed → algorithm, input_dataset, output_dataset,
                            success, duration_ms, error
    - pipeline_completed  → pipeline, step_count, success, duration_ms,
                            failed_step_index

Decisões arquiteturais:
    - O core depende apenas do Protocol `EventSink` (capacidade de disparar)
    - Nenhum sink configurado ⇒ nenhuma notificação
    - Subscribers executam na thread chamadora; exceções de um subscriber
      propagam (nenhuma falha é silenciada)

Limites explícitos:
    - Não persiste eventos (ver `RunManifest` / `save_manifest`)
    - Não filtra nem agrega eventos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

EventRecord = Dict[str, Any]
Subscriber = Callable[[EventRecord], None]

ALGORITHM_STARTED = "algorithm_started"
ALGORITHM_COMPLETED = "algorithm_completed"
PIPELINE_COMPLETED = "pipeline_completed"


@runtime_checkable
class EventSink(Protocol):
    """Ganchos de observabilidade disparados pelo template base e pelo pipeline."""

    def algorithm_started(self, name: str, input_dataset: Any) -> None: ...

    def algorithm_completed(
        self,
        name: str,
        input_dataset: Any,
        output_dataset: Any,
        success: bool,
        duration: timedelta,
        error: Optional[str] = None,
    ) -> None: ...

    def pipeline_completed(
        self,
        name: str,
        step_count: int,
        success: bool,
        duration: timedelta,
        failed_step_index: int = -1,
    ) -> None: ...


def _name_of(dataset: Any) -> Optional[str]:
    return getattr(dataset, "name", None)


def _kind_of(dataset: Any) -> Optional[str]:
    kind = getattr(dataset, "kind", None)
    return getattr(kind, "value", kind)


def _ms(duration: timedelta) -> float:
    return duration.total_seconds() * 1000.0


@dataclass
class EventLog:
    """
    Implementação canônica de `EventSink`.

    Exemplo:
        >>> log = EventLog()
        >>> seen = []
        >>> log.subscribe(seen.append)
        >>> algorithm.execute(dataset, ExecutionContext.builder().with_events(log).build())
        >>> [e["event_type"] for e in log.events]
        ['algorithm_started', 'algorithm_completed']
    """

    events: List[EventRecord] = field(default_factory=list)
    _subscribers: List[Subscriber] = field(default_factory=list, init=False, repr=False)

    # -----------------------------
    # Subscrições
    # -----------------------------
    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> bool:
        if callback in self._subscribers:
            self._subscribers.remove(callback)
            return True
        return False

    def clear_subscriptions(self) -> None:
        self._subscribers.clear()

    def of_type(self, event_type: str) -> List[EventRecord]:
        return [e for e in self.events if e["event_type"] == event_type]

    # -----------------------------
    # EventSink
    # -----------------------------
    def algorithm_started(self, name: str, input_dataset: Any) -> None:
        self._emit(
            ALGORITHM_STARTED,
            algorithm=name,
            input_dataset=_name_of(input_dataset),
            input_kind=_kind_of(input_dataset),
        )

    def algorithm_completed(
        self,
        name: str,
        input_dataset: Any,
        output_dataset: Any,
        success: bool,
        duration: timedelta,
        error: Optional[str] = None,
    ) -> None:
        self._emit(
            ALGORITHM_COMPLETED,
            algorithm=name,
            input_dataset=_name_of(input_dataset),
            output_dataset=_name_of(output_dataset),
            success=success,
            duration_ms=_ms(duration),
            error=error,
        )

    def pipeline_completed(
        self,
        name: str,
        step_count: int,
        success: bool,
        duration: timedelta,
        failed_step_index: int = -1,
    ) -> None:
        self._emit(
            PIPELINE_COMPLETED,
            pipeline=name,
            step_count=step_count,
            success=success,
            duration_ms=_ms(duration),
            failed_step_index=failed_step_index,
        )

    def _emit(self, event_type: str, **payload: Any) -> None:
        event: EventRecord = {
            "event_type": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(payload)
        self.events.append(event)
        for callback in list(self._subscribers):
            callback(event)
