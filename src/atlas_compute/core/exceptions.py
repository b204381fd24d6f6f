"""
Atlas Compute — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do Atlas Compute.

Objetivo:
- Permitir que algoritmos levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para ErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Algoritmos levantam; o template base (`AlgorithmBase.execute`) traduz em resultado FAILED.
- Exceções carregam apenas dados estruturados (serializáveis).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class AtlasComputeException(Exception):
    """Base class para exceções internas do Atlas Compute.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Parâmetros / Execução
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class MissingParameter(AtlasComputeException):
    """Parâmetro obrigatório não foi fornecido no contexto."""


@dataclass(eq=False)
class InvalidParameter(AtlasComputeException):
    """Parâmetro presente, mas não conversível para o tipo esperado."""


@dataclass(eq=False)
class OperationCancelled(AtlasComputeException):
    """Cancelamento cooperativo observado durante a execução."""


# ---------------------------------------------------------------------------
# Colunas (algoritmos tabulares)
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class ColumnNotFound(AtlasComputeException):
    """Coluna requisitada não existe no dataset."""


@dataclass(eq=False)
class ColumnNotNumeric(AtlasComputeException):
    """Coluna requisitada existe, mas não é numérica."""


@dataclass(eq=False)
class NoNumericColumns(AtlasComputeException):
    """Dataset não possui nenhuma coluna numérica elegível."""


# ---------------------------------------------------------------------------
# Registry / Store
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class AlgorithmNotRegistered(AtlasComputeException):
    """Nenhum algoritmo registrado com o nome solicitado."""


@dataclass(eq=False)
class DatasetNotFound(AtlasComputeException):
    """Dataset solicitado não existe no store."""
