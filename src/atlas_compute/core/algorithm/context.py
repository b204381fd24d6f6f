# src/atlas_compute/core/algorithm/context.py
"""
ExecutionContext — contexto imutável de uma invocação de algoritmo.

O contexto é o **único meio** pelo qual um algoritmo recebe:
    - parâmetros (nome → valor de tipo arbitrário)
    - sinal de cancelamento cooperativo (`CancellationToken`)
    - callback de progresso `float → None` no intervalo [0, 1]
    - referência opcional a um store de datasets
    - override opcional do nome do dataset de saída
    - sink opcional de eventos de observabilidade

Decisões arquiteturais:
    - Construído uma vez via builder fluente; imutável depois de `build()`
    - `get` nunca levanta exceção (valor ausente ou inconversível → default)
    - `get_required` levanta `MissingParameter` / `InvalidParameter`
    - Conversão numérica rejeita `bool` (True não é o número 1 aqui)

Invariantes:
    - O mapa de parâmetros é um snapshot somente-leitura
    - O token de cancelamento pode ser compartilhado entre contextos
      (pipeline → steps); o contexto em si nunca muda

Limites explícitos:
    - Não executa algoritmos
    - Não valida semântica de parâmetros (ver `validate_parameters`)
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from atlas_compute.core.exceptions import InvalidParameter, MissingParameter, OperationCancelled
from atlas_compute.core.traceability.events import EventSink

ProgressCallback = Callable[[float], None]

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


@dataclass
class CancellationToken:
    """
    Sinal de cancelamento cooperativo.

    O chamador invoca `cancel()` (possivelmente de outra thread); o algoritmo
    observa o sinal apenas nos pontos de checagem que ele mesmo define.
    """

    _event: threading.Event = field(default_factory=threading.Event, repr=False)

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled(message="Algorithm execution was cancelled.")


def coerce_value(value: Any, value_type: type) -> Any:
    """
    Converte `value` para `value_type` seguindo regras explícitas.

    Regras:
        - float: int/float (não bool) e strings numéricas
        - int:   int (não bool), float integral e strings inteiras
        - bool:  bool e strings "true"/"false" (e equivalentes)
        - str:   str, ou escalares numéricos/bool via `str()`
        - list:  list/tuple (cópia em lista)
        - demais tipos: apenas `isinstance`

    Raises:
        TypeError / ValueError: Se a conversão não for possível.
    """
    if value is None:
        raise TypeError("None is not convertible")

    if value_type is bool:
        if isinstance(value, bool):
            return value
        if getattr(getattr(value, "dtype", None), "kind", None) == "b":
            return bool(value)
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise ValueError(f"{value!r} is not a boolean")

    if value_type in (int, float):
        if isinstance(value, bool) or getattr(getattr(value, "dtype", None), "kind", None) == "b":
            raise TypeError("bool is not accepted as a number")
        if isinstance(value, str):
            value = value.strip()
        if value_type is float:
            return float(value)
        if isinstance(value, int):
            return value
        number = float(value)
        if not number.is_integer():
            raise ValueError(f"{value!r} is not an integer")
        return int(number)

    if value_type is str:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float, bool)):
            return str(value)
        raise TypeError(f"{type(value).__name__} is not a string")

    if value_type is list:
        if isinstance(value, (list, tuple)):
            return list(value)
        raise TypeError(f"{type(value).__name__} is not a list")

    if isinstance(value, value_type):
        return value
    raise TypeError(f"{type(value).__name__} is not {value_type.__name__}")


@dataclass(frozen=True)
class ExecutionContext:
    """
    Contexto imutável de execução.

    Use `ExecutionContext.builder()` para construir e `ExecutionContext.empty()`
    quando nenhum parâmetro é necessário.
    """

    parameters: Mapping[str, Any] = field(default_factory=dict)
    cancellation: CancellationToken = field(default_factory=CancellationToken)
    progress: Optional[ProgressCallback] = None
    store: Any = None
    output_name: Optional[str] = None
    events: Optional[EventSink] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @classmethod
    def empty(cls) -> "ExecutionContext":
        return cls()

    @classmethod
    def builder(cls) -> "ExecutionContextBuilder":
        return ExecutionContextBuilder()

    # -----------------------------
    # Parâmetros
    # -----------------------------
    def has(self, name: str) -> bool:
        return name in self.parameters

    def get(self, name: str, default: Any = None, type_: Optional[type] = None) -> Any:
        """
        Retorna o parâmetro convertido, ou `default` se ausente/inconversível.

        Quando `type_` não é informado, o tipo é inferido de `default`
        (se houver); sem ambos, o valor cru é retornado.
        """
        if name not in self.parameters:
            return default
        value = self.parameters[name]
        target = type_ if type_ is not None else (type(default) if default is not None else None)
        if target is None:
            return value
        try:
            return coerce_value(value, target)
        except (TypeError, ValueError):
            return default

    def get_required(self, name: str, type_: Optional[type] = None) -> Any:
        if name not in self.parameters:
            raise MissingParameter(
                message=f"Required parameter '{name}' not found.",
                details={"parameter": name},
            )
        value = self.parameters[name]
        if type_ is None:
            return value
        try:
            return coerce_value(value, type_)
        except (TypeError, ValueError) as e:
            raise InvalidParameter(
                message=f"Parameter '{name}' is {type(value).__name__}, expected {type_.__name__}.",
                details={"parameter": name, "expected": type_.__name__, "reason": str(e)},
            ) from e

    # -----------------------------
    # Progresso / cancelamento
    # -----------------------------
    @property
    def is_cancelled(self) -> bool:
        return self.cancellation.is_cancelled

    def raise_if_cancelled(self) -> None:
        self.cancellation.raise_if_cancelled()

    def report_progress(self, fraction: float) -> None:
        """Repassa `fraction` (limitado a [0, 1]) ao callback, se houver."""
        if self.progress is None:
            return
        self.progress(min(1.0, max(0.0, float(fraction))))


class ExecutionContextBuilder:
    """Builder fluente de `ExecutionContext`; todo `with_*` retorna o builder."""

    def __init__(self) -> None:
        self._parameters: Dict[str, Any] = {}
        self._cancellation: Optional[CancellationToken] = None
        self._progress: Optional[ProgressCallback] = None
        self._store: Any = None
        self._output_name: Optional[str] = None
        self._events: Optional[EventSink] = None

    def with_parameter(self, name: str, value: Any) -> "ExecutionContextBuilder":
        self._parameters[name] = value
        return self

    def with_parameters(self, parameters: Optional[Mapping[str, Any]]) -> "ExecutionContextBuilder":
        if parameters:
            self._parameters.update(parameters)
        return self

    def with_cancellation(self, token: CancellationToken) -> "ExecutionContextBuilder":
        self._cancellation = token
        return self

    def with_progress(self, callback: Optional[ProgressCallback]) -> "ExecutionContextBuilder":
        self._progress = callback
        return self

    def with_store(self, store: Any) -> "ExecutionContextBuilder":
        self._store = store
        return self

    def with_output_name(self, name: Optional[str]) -> "ExecutionContextBuilder":
        self._output_name = name
        return self

    def with_events(self, sink: Optional[EventSink]) -> "ExecutionContextBuilder":
        self._events = sink
        return self

    def build(self) -> ExecutionContext:
        return ExecutionContext(
            parameters=dict(self._parameters),
            cancellation=self._cancellation or CancellationToken(),
            progress=self._progress,
            store=self._store,
            output_name=self._output_name,
            events=self._events,
        )
