"""
Atlas Compute — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do Atlas Compute.
Falhas de execução de algoritmos são tratadas como dados: todo resultado
com falha carrega um `ErrorKind` estável e uma mensagem humana, e pode ser
convertido em `ErrorPayload` para persistência em Manifest.

Taxonomia (v1):
- incompatible_kind     → dataset de tipo incompatível com o algoritmo (pré-flight)
- parameter_validation  → parâmetro obrigatório ausente ou restrição violada
- cancelled             → cancelamento cooperativo observado
- execution_failure     → qualquer outra exceção na rotina do algoritmo

Nenhuma dessas falhas propaga como exceção para o chamador de `execute`.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Dict, Optional

from .exceptions import AtlasComputeException, OperationCancelled


class ErrorKind(str, Enum):
    """Categorias estáveis de falha de uma execução."""

    INCOMPATIBLE_KIND = "incompatible_kind"
    PARAMETER_VALIDATION = "parameter_validation"
    CANCELLED = "cancelled"
    EXECUTION_FAILURE = "execution_failure"


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do Atlas Compute.

    Campos:
    - type: código estável do erro (valor de `ErrorKind`, não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def incompatible_kind(
    *,
    dataset: Optional[str],
    dataset_kind: Optional[str],
    algorithm: str,
    expected_kind: str,
    hint: str = "Selecione um algoritmo compatível com o tipo do dataset ou converta o dataset antes da execução.",
) -> ErrorPayload:
    return ErrorPayload(
        type=ErrorKind.INCOMPATIBLE_KIND.value,
        message=(
            f"Dataset '{dataset}' (kind={dataset_kind}) is not compatible with "
            f"{algorithm} (expects {expected_kind})."
        ),
        details={
            "dataset": dataset,
            "dataset_kind": dataset_kind,
            "algorithm": algorithm,
            "expected_kind": expected_kind,
        },
        hint=hint,
    )


def parameter_validation(
    *,
    algorithm: str,
    violations: list,
    hint: str = "Corrija os parâmetros indicados no contexto de execução antes de reexecutar.",
) -> ErrorPayload:
    return ErrorPayload(
        type=ErrorKind.PARAMETER_VALIDATION.value,
        message=f"Parameter validation failed: {'; '.join(violations)}",
        details={"algorithm": algorithm, "violations": list(violations)},
        hint=hint,
    )


def cancelled(*, algorithm: str) -> ErrorPayload:
    return ErrorPayload(
        type=ErrorKind.CANCELLED.value,
        message="Algorithm execution was cancelled.",
        details={"algorithm": algorithm},
        hint=None,
    )


def exception_to_error(exc: BaseException, *, algorithm: Optional[str] = None) -> ErrorPayload:
    """Converte exceções em ErrorPayload (serializável, sem stack trace).

    Regras:
    - AtlasComputeException: reaproveita message/details/hint.
    - Outras exceções: encapsula como execution_failure com a classe da exceção em details.
    """
    if isinstance(exc, OperationCancelled):
        return cancelled(algorithm=algorithm or "")

    if isinstance(exc, AtlasComputeException):
        details = dict(exc.details or {})
        details.setdefault("exception_class", exc.__class__.__name__)
        return ErrorPayload(
            type=ErrorKind.EXECUTION_FAILURE.value,
            message=exc.message or "Execution failed",
            details=details,
            hint=exc.hint,
        )

    # KeyError embrulha a mensagem em aspas; preferimos o texto cru.
    if isinstance(exc, KeyError) and exc.args:
        message = str(exc.args[0])
    else:
        message = str(exc)

    return ErrorPayload(
        type=ErrorKind.EXECUTION_FAILURE.value,
        message=message or f"Unexpected {exc.__class__.__name__} during execution",
        details={"exception_class": exc.__class__.__name__, "algorithm": algorithm},
        hint="Verifique os parâmetros e o dataset de entrada. Nenhum retry é aplicado automaticamente.",
    )
