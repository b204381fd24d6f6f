# src/atlas_compute/core/datasets/store.py
"""
Store de datasets em memória.

O `MemoryDataStore` é o colaborador opcional que o `ExecutionContext`
carrega para algoritmos que precisam de buscas secundárias por nome.
Tabelas e grafos vivem em namespaces separados, como no backend de
persistência que este store substitui nos testes e em execuções locais.

Limites explícitos:
    - Sem transações, checkpoints ou persistência em disco
    - Nenhuma sincronização: o modelo de execução é single-threaded
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from atlas_compute.core.exceptions import DatasetNotFound
from .graph import MemoryGraphDataset
from .tabular import MemoryTabularDataset
from .types import DatasetKind, dataset_kind_of

AnyDataset = Union[MemoryTabularDataset, MemoryGraphDataset]


@dataclass
class MemoryDataStore:
    """Registro nome → dataset, separado por tipo (tabular / graph)."""

    _tabulars: Dict[str, MemoryTabularDataset] = field(default_factory=dict, init=False, repr=False)
    _graphs: Dict[str, MemoryGraphDataset] = field(default_factory=dict, init=False, repr=False)

    # -----------------------------
    # Inventário
    # -----------------------------
    @property
    def tabular_names(self) -> List[str]:
        return list(self._tabulars)

    @property
    def graph_names(self) -> List[str]:
        return list(self._graphs)

    @property
    def dataset_names(self) -> List[str]:
        return self.tabular_names + self.graph_names

    def add(self, dataset: AnyDataset) -> None:
        """Registra um dataset existente (substitui um homônimo do mesmo tipo)."""
        kind = dataset_kind_of(dataset)
        if kind is DatasetKind.TABULAR:
            self._tabulars[dataset.name] = dataset
        elif kind is DatasetKind.GRAPH:
            self._graphs[dataset.name] = dataset
        else:
            raise TypeError(f"Unsupported dataset kind: {getattr(dataset, 'kind', None)!r}")

    def clear_all(self) -> None:
        self._tabulars.clear()
        self._graphs.clear()

    # -----------------------------
    # Tabular
    # -----------------------------
    def create_tabular(self, name: str) -> MemoryTabularDataset:
        if name in self._tabulars:
            raise ValueError(f"Tabular dataset '{name}' already exists")
        dataset = MemoryTabularDataset(name)
        self._tabulars[name] = dataset
        return dataset

    def get_tabular(self, name: str) -> MemoryTabularDataset:
        if name not in self._tabulars:
            raise DatasetNotFound(
                message=f"Tabular dataset '{name}' not found",
                details={"name": name, "kind": DatasetKind.TABULAR.value},
            )
        return self._tabulars[name]

    def try_get_tabular(self, name: str) -> Optional[MemoryTabularDataset]:
        return self._tabulars.get(name)

    def tabular_exists(self, name: str) -> bool:
        return name in self._tabulars

    def delete_tabular(self, name: str) -> bool:
        return self._tabulars.pop(name, None) is not None

    # -----------------------------
    # Graph
    # -----------------------------
    def create_graph(self, name: str) -> MemoryGraphDataset:
        if name in self._graphs:
            raise ValueError(f"Graph dataset '{name}' already exists")
        dataset = MemoryGraphDataset(name)
        self._graphs[name] = dataset
        return dataset

    def get_graph(self, name: str) -> MemoryGraphDataset:
        if name not in self._graphs:
            raise DatasetNotFound(
                message=f"Graph dataset '{name}' not found",
                details={"name": name, "kind": DatasetKind.GRAPH.value},
            )
        return self._graphs[name]

    def try_get_graph(self, name: str) -> Optional[MemoryGraphDataset]:
        return self._graphs.get(name)

    def graph_exists(self, name: str) -> bool:
        return name in self._graphs

    def delete_graph(self, name: str) -> bool:
        return self._graphs.pop(name, None) is not None
