# src/atlas_compute/core/algorithm/registry.py
"""
Registry de algoritmos do Atlas Compute.

O `AlgorithmRegistry` é o serviço de descoberta por nome usado pelo builder
de pipelines e por qualquer camada que precise listar algoritmos
disponíveis. É um valor explícito: a aplicação cria o seu (vazio ou com os
built-ins via `with_builtins()`) e o repassa a quem precisa.

Para ergonomia existe também um registry padrão de processo
(`default_registry()`), criado na primeira chamada já populado com os
built-ins, e `reset_default_registry()` para isolamento em testes.

Decisões arquiteturais:
    - Chaves case-insensitive (`casefold`); o nome original é preservado
    - Registrar o mesmo nome de novo sobrescreve (idempotente por nome)
    - Mutações serializadas por `threading.RLock`
    - Ordem de registro preservada em listagens

Invariantes:
    - `get(name)` retorna sempre o último algoritmo registrado sob `name`
    - Nenhum algoritmo sem nome é aceito

Limites explícitos:
    - Não executa algoritmos
    - Não valida parâmetros
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from atlas_compute.core.exceptions import AlgorithmNotRegistered
from .base import Algorithm, describe_parameters
from .types import AlgorithmKind


def _key(name: str) -> str:
    return name.casefold()


@dataclass
class AlgorithmRegistry:
    """
    Registro nome → algoritmo.

    Exemplo:
        >>> registry = AlgorithmRegistry.with_builtins()
        >>> registry.get("pagerank").name
        'PageRank'
    """

    _algorithms: "OrderedDict[str, Algorithm]" = field(default_factory=OrderedDict, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    @classmethod
    def with_builtins(cls) -> "AlgorithmRegistry":
        """Registry novo contendo PageRank, ConnectedComponents e MinMaxNormalize."""
        from atlas_compute.algorithms import builtin_algorithms

        registry = cls()
        for algorithm in builtin_algorithms():
            registry.register(algorithm)
        return registry

    # -----------------------------
    # Mutação
    # -----------------------------
    def register(self, algorithm: Algorithm) -> None:
        name = getattr(algorithm, "name", None)
        if not isinstance(name, str) or not name.strip():
            raise ValueError("algorithm.name must be a non-empty string")
        with self._lock:
            key = _key(name)
            # a chave nunca some durante a sobrescrita; só a posição muda
            self._algorithms[key] = algorithm
            self._algorithms.move_to_end(key)

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._algorithms.pop(_key(name), None) is not None

    def clear(self) -> None:
        with self._lock:
            self._algorithms.clear()

    # -----------------------------
    # Consulta
    # -----------------------------
    def get(self, name: str) -> Algorithm:
        algorithm = self.try_get(name)
        if algorithm is None:
            raise AlgorithmNotRegistered(
                message=f"Algorithm '{name}' is not registered.",
                details={"name": name, "available": self.names()},
                hint="Registre o algoritmo ou use AlgorithmRegistry.with_builtins().",
            )
        return algorithm

    def try_get(self, name: str) -> Optional[Algorithm]:
        if not isinstance(name, str):
            return None
        return self._algorithms.get(_key(name))

    def all(self) -> List[Algorithm]:
        return list(self._algorithms.values())

    def by_kind(self, kind: AlgorithmKind) -> List[Algorithm]:
        return [a for a in self._algorithms.values() if a.kind is kind]

    def names(self) -> List[str]:
        return [a.name for a in self._algorithms.values()]

    def describe(self) -> List[Dict[str, Any]]:
        """Inventário serializável (nome, descrição, kind, parâmetros)."""
        return [
            {
                "name": a.name,
                "description": a.description,
                "kind": a.kind.value,
                "parameters": list(describe_parameters(a)),
            }
            for a in self._algorithms.values()
        ]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _key(name) in self._algorithms

    def __len__(self) -> int:
        return len(self._algorithms)


_default: Optional[AlgorithmRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> AlgorithmRegistry:
    """Registry padrão de processo, criado sob demanda com os built-ins."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = AlgorithmRegistry.with_builtins()
    return _default


def reset_default_registry() -> None:
    """Descarta o registry padrão; a próxima chamada recria com os built-ins."""
    global _default
    with _default_lock:
        _default = None
