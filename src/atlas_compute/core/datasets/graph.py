# src/atlas_compute/core/datasets/graph.py
"""
Dataset de grafo dirigido em memória.

`MemoryGraphDataset` mantém nós (id → propriedades) e arestas dirigidas
((from, to) → propriedades), além de índices de adjacência de saída e de
entrada atualizados a cada mutação. Com isso `out_neighbors`,
`in_neighbors`, `out_degree` e `in_degree` custam O(1) amortizado, o que os
algoritmos de grafo assumem ao construir seus índices densos.

Decisões arquiteturais:
    - Adjacência guardada como dict ordenado (conjunto com ordem de inserção),
      para que a iteração seja determinística
    - Propriedades são copiadas na entrada e na saída; o chamador nunca
      recebe referência ao estado interno
    - Arestas exigem que ambos os nós existam

Invariantes:
    - Ids de nó únicos; no máximo uma aresta por par (from, to)
    - `remove_node` remove também todas as arestas incidentes
    - `_out[a]` contém `b` se e somente se `_in[b]` contém `a`

Limites explícitos:
    - Sem multigrafos nem arestas não-dirigidas (tratadas pelos algoritmos)
    - Sem consultas declarativas ou importação de GraphML
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
import uuid

from .types import DatasetKind


class DuplicateNodeError(ValueError):
    """Nó com o mesmo id já existe no grafo."""


class DuplicateEdgeError(ValueError):
    """Aresta com o mesmo par (from, to) já existe no grafo."""


EdgeKey = Tuple[str, str]


@dataclass(eq=False)
class MemoryGraphDataset:
    """
    Grafo dirigido nomeado com propriedades em nós e arestas.

    Exemplo:
        >>> g = MemoryGraphDataset("social")
        >>> g.add_node("A", {"label": "alice"})
        >>> g.add_node("B")
        >>> g.add_edge("A", "B", {"weight": 1.0})
        >>> g.out_neighbors("A")
        ['B']
    """

    name: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    _nodes: Dict[str, Dict[str, Any]] = field(default_factory=dict, init=False, repr=False)
    _edges: Dict[EdgeKey, Dict[str, Any]] = field(default_factory=dict, init=False, repr=False)
    _out: Dict[str, Dict[str, None]] = field(default_factory=dict, init=False, repr=False)
    _in: Dict[str, Dict[str, None]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("dataset name must be a non-empty string")

    @property
    def kind(self) -> DatasetKind:
        return DatasetKind.GRAPH

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    # -----------------------------
    # Nós
    # -----------------------------
    def node_ids(self) -> List[str]:
        return list(self._nodes)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def add_node(self, node_id: str, properties: Optional[Mapping[str, Any]] = None) -> None:
        if not isinstance(node_id, str) or not node_id.strip():
            raise ValueError("node id must be a non-empty string")
        if node_id in self._nodes:
            raise DuplicateNodeError(f"Node '{node_id}' already exists")
        self._nodes[node_id] = dict(properties or {})
        self._out[node_id] = {}
        self._in[node_id] = {}

    def remove_node(self, node_id: str) -> bool:
        if node_id not in self._nodes:
            return False
        for target in list(self._out[node_id]):
            self.remove_edge(node_id, target)
        for source in list(self._in[node_id]):
            self.remove_edge(source, node_id)
        del self._nodes[node_id]
        del self._out[node_id]
        del self._in[node_id]
        return True

    def get_node_properties(self, node_id: str) -> Dict[str, Any]:
        return dict(self._node(node_id))

    def update_node_properties(self, node_id: str, properties: Mapping[str, Any]) -> None:
        """Mescla `properties` nas propriedades existentes do nó."""
        self._node(node_id).update(properties)

    # -----------------------------
    # Arestas
    # -----------------------------
    def add_edge(
        self,
        from_id: str,
        to_id: str,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._node(from_id)
        self._node(to_id)
        key = (from_id, to_id)
        if key in self._edges:
            raise DuplicateEdgeError(f"Edge '{from_id}' -> '{to_id}' already exists")
        self._edges[key] = dict(properties or {})
        self._out[from_id][to_id] = None
        self._in[to_id][from_id] = None

    def remove_edge(self, from_id: str, to_id: str) -> bool:
        if self._edges.pop((from_id, to_id), None) is None:
            return False
        del self._out[from_id][to_id]
        del self._in[to_id][from_id]
        return True

    def has_edge(self, from_id: str, to_id: str) -> bool:
        return (from_id, to_id) in self._edges

    def get_edge_properties(self, from_id: str, to_id: str) -> Dict[str, Any]:
        key = (from_id, to_id)
        if key not in self._edges:
            raise KeyError(f"Edge '{from_id}' -> '{to_id}' not found")
        return dict(self._edges[key])

    def edges(self) -> Iterator[Tuple[str, str, Dict[str, Any]]]:
        """Itera `(from, to, propriedades)` na ordem de inserção."""
        for (source, target), props in self._edges.items():
            yield source, target, dict(props)

    # -----------------------------
    # Adjacência
    # -----------------------------
    def out_neighbors(self, node_id: str) -> List[str]:
        return list(self._out.get(node_id, ()))

    def in_neighbors(self, node_id: str) -> List[str]:
        return list(self._in.get(node_id, ()))

    def neighbors(self, node_id: str) -> List[str]:
        merged = dict(self._out.get(node_id, {}))
        merged.update(self._in.get(node_id, {}))
        return list(merged)

    def out_degree(self, node_id: str) -> int:
        return len(self._out.get(node_id, ()))

    def in_degree(self, node_id: str) -> int:
        return len(self._in.get(node_id, ()))

    # -----------------------------
    # Cópia
    # -----------------------------
    def with_name(self, name: str) -> "MemoryGraphDataset":
        """Cópia estrutural (nós, arestas e propriedades) sob um novo nome."""
        clone = MemoryGraphDataset(name)
        for node_id, props in self._nodes.items():
            clone.add_node(node_id, props)
        for (source, target), props in self._edges.items():
            clone.add_edge(source, target, props)
        return clone

    def _node(self, node_id: str) -> Dict[str, Any]:
        if node_id not in self._nodes:
            raise KeyError(f"Node '{node_id}' not found")
        return self._nodes[node_id]
