# src/atlas_compute/core/config/loader.py
"""
Loader de configuração do Atlas Compute.

Resolve a configuração efetiva a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional; ausência é ignorada)

Seções reconhecidas na raiz (ambas opcionais):
    - `algorithms`: mapa nome → {"parameters": {...}} com defaults por algoritmo
    - `pipelines`:  mapa nome → {"steps": [...]} com pipelines nomeados

Decisões arquiteturais:
    - YAML é lido via `yaml.safe_load` (nenhum objeto Python arbitrário)
    - Arquivo vazio equivale a `{}`
    - Seções reconhecidas com tipo errado são erro estrutural imediato,
      antes que o builder tente interpretá-las

Limites explícitos:
    - Não instancia pipelines (ver `core.engine.builder`)
    - Não valida valores de parâmetros
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge

PathLike = Union[str, Path]

_SECTIONS = ("algorithms", "pipelines")


def load_config_file(path: PathLike) -> Dict[str, Any]:
    """
    Carrega um único arquivo de configuração (YAML ou JSON).

    Args:
        path: Caminho do arquivo.

    Returns:
        Conteúdo do arquivo como dicionário.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for `.yaml`, `.yml` ou `.json`.
        InvalidConfigRootTypeError: Se a raiz ou uma seção reconhecida não for dict.
    """
    file = Path(path)
    if not file.exists():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {file}")

    suffix = file.suffix.lower()
    with file.open("r", encoding="utf-8") as fh:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(fh)
        elif suffix == ".json":
            data = json.load(fh)
        else:
            raise UnsupportedConfigFormatError(f"Formato não suportado: {file.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    for section in _SECTIONS:
        value = data.get(section)
        if value is not None and not isinstance(value, dict):
            raise InvalidConfigRootTypeError(
                f"Seção '{section}' deve ser dict, recebido: {type(value).__name__} ({file})"
            )

    return data


def load_config(
    *,
    defaults_path: PathLike,
    local_path: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Carrega defaults e aplica o override local quando ele existir.

    Args:
        defaults_path: Arquivo base obrigatório.
        local_path: Arquivo de overrides opcional.

    Returns:
        Configuração efetiva resolvida (novo dict).

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Formato de arquivo não suportado.
        InvalidConfigRootTypeError: Raiz ou seção com tipo inválido.
        ConfigTypeConflictError: Conflito de tipos durante o merge.
    """
    effective = load_config_file(defaults_path)

    if local_path is not None and Path(local_path).exists():
        effective = deep_merge(effective, load_config_file(local_path))

    return effective
