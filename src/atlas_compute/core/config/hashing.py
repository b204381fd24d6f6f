# src/atlas_compute/core/config/hashing.py
"""
Hash canônico de configuração.

O hash identifica estruturalmente a configuração efetiva de uma execução e
é gravado no `RunManifest` (`inputs.config_hash`). Também é usado para
identificar o conjunto de parâmetros de um step de pipeline.

Política (v1):
    - JSON canônico: `sort_keys=True`, separadores compactos, UTF-8
    - SHA-256 em hexadecimal (64 caracteres)
    - Tuplas são serializadas como listas; Enums pelo `value`

Limites explícitos:
    - Não inclui informação de runtime (timestamps, host, versão)
    - Valores não serializáveis geram `TypeError` (nenhum fallback silencioso)
"""

from __future__ import annotations

import hashlib
import json
from enum import Enum
from typing import Any, Dict, Mapping


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Valor não serializável para hashing: {type(value).__name__}")


def canonical_json(payload: Mapping[str, Any]) -> str:
    """Serializa `payload` em JSON canônico (ordem de chaves estável)."""
    return json.dumps(
        dict(payload),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_json_default,
    )


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera o hash SHA-256 da configuração efetiva.

    Configurações estruturalmente equivalentes (mesmas chaves e valores,
    em qualquer ordem de inserção) produzem o mesmo hash.

    Args:
        config: Configuração resolvida ou mapa de parâmetros.

    Returns:
        Hash hexadecimal de 64 caracteres.

    Raises:
        TypeError: Se `config` não for um mapa ou contiver valor não serializável.
    """
    if not isinstance(config, Mapping):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    return hashlib.sha256(canonical_json(config).encode("utf-8")).hexdigest()
