# src/atlas_compute/core/config/merge.py
"""
Deep-merge de configuração (defaults + overrides).

Política (v1):
    - dict + dict      → merge recursivo por chave
    - list             → sobrescrita total
    - escalar          → sobrescrita direta
    - int/float        → compatíveis entre si (parâmetros numéricos como
                         `dampingFactor: 1` sobrescrevendo `0.85`)
    - None no override → sobrescreve (desliga explicitamente um default)
    - demais conflitos → `ConfigTypeConflictError`

Invariantes:
    - Nenhum input é mutado
    - Chaves ausentes no override são preservadas da base

O mesmo merge é reutilizado pelo builder de pipelines para combinar os
defaults de `algorithms.<nome>.parameters` com os parâmetros do step.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _compatible(base_value: Any, override_value: Any) -> bool:
    if override_value is None or base_value is None:
        return True
    if _is_number(base_value) and _is_number(override_value):
        return True
    return type(base_value) is type(override_value)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combina `base` e `override` em um novo dicionário.

    Args:
        base: Configuração base (ex.: defaults do arquivo versionado).
        override: Overrides explícitos (ex.: arquivo local, parâmetros do step).

    Returns:
        Novo dicionário resultante; inputs permanecem intactos.

    Raises:
        ConfigTypeConflictError: Se a raiz não for dict ou se uma chave
            mudar de tipo de forma incompatível.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    merged: Dict[str, Any] = deepcopy(base)

    for key, value in override.items():
        if key not in merged:
            merged[key] = deepcopy(value)
            continue

        current = merged[key]

        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        elif isinstance(value, list) and (current is None or isinstance(current, list)):
            merged[key] = deepcopy(value)
        elif _compatible(current, value):
            merged[key] = deepcopy(value)
        else:
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(current).__name__} vs {type(value).__name__}"
            )

    return merged
