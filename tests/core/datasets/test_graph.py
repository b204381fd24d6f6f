# tests/core/datasets/test_graph.py
"""
Testes do grafo dirigido em memória (MemoryGraphDataset).

Este módulo valida:
- nós e arestas com propriedades
- vizinhança de saída, de entrada e combinada
- remoção de nós com limpeza das arestas incidentes
- cópia estrutural via `with_name`

Invariantes:
    - Toda aresta conecta dois nós existentes
    - A ordem de inserção é preservada em `node_ids` e `edges`
"""

import pytest

try:
    from atlas_compute.core.datasets.graph import (
        DuplicateEdgeError,
        DuplicateNodeError,
        MemoryGraphDataset,
    )
    from atlas_compute.core.datasets.types import DatasetKind, GraphDataset, dataset_kind_of
except Exception as e:  # noqa: BLE001
    DuplicateEdgeError = None
    DuplicateNodeError = None
    MemoryGraphDataset = None
    DatasetKind = None
    GraphDataset = None
    dataset_kind_of = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o grafo em memória esteja disponível.

    Usado para garantir:
        - Falha explícita quando o módulo de grafo não pode ser importado
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing graph dataset. Implement:\n"
            "- src/atlas_compute/core/datasets/graph.py (MemoryGraphDataset)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_structure(cycle_graph):
    """
    Verifica contagens, kind e conformidade com o protocolo de grafo.

    Usado para garantir:
        - Algoritmos de grafo reconhecem o dataset pelo `kind`
    """
    _require_imports()
    assert cycle_graph.kind is DatasetKind.GRAPH
    assert dataset_kind_of(cycle_graph) is DatasetKind.GRAPH
    assert isinstance(cycle_graph, GraphDataset)
    assert cycle_graph.node_count == 3
    assert cycle_graph.edge_count == 3
    assert cycle_graph.node_ids() == ["A", "B", "C"]
    assert list(cycle_graph.edges()) == [("A", "B", {}), ("B", "C", {}), ("C", "A", {})]


def test_neighbors(cycle_graph):
    _require_imports()
    assert cycle_graph.out_neighbors("A") == ["B"]
    assert cycle_graph.in_neighbors("A") == ["C"]
    assert cycle_graph.neighbors("A") == ["B", "C"]
    assert cycle_graph.out_degree("A") == 1
    assert cycle_graph.in_degree("A") == 1


def test_neighbors_are_deduplicated():
    _require_imports()
    g = MemoryGraphDataset("mutual")
    g.add_node("A")
    g.add_node("B")
    g.add_edge("A", "B")
    g.add_edge("B", "A")

    assert g.neighbors("A") == ["B"]


def test_duplicates_are_rejected(cycle_graph):
    _require_imports()
    with pytest.raises(DuplicateNodeError):
        cycle_graph.add_node("A")
    with pytest.raises(DuplicateEdgeError):
        cycle_graph.add_edge("A", "B")


def test_edge_requires_existing_nodes(cycle_graph):
    _require_imports()
    with pytest.raises(KeyError):
        cycle_graph.add_edge("A", "Z")


def test_node_and_edge_properties():
    """
    Verifica leitura, atualização e isolamento de propriedades.

    Usado para garantir:
        - Propriedades retornadas são cópias (mutá-las não altera o grafo)
    """
    _require_imports()
    g = MemoryGraphDataset("props")
    g.add_node("A", {"label": "alice"})
    g.add_node("B")
    g.add_edge("A", "B", {"weight": 2.0})

    props = g.get_node_properties("A")
    props["label"] = "changed"
    g.update_node_properties("B", {"score": 1})

    assert g.get_node_properties("A") == {"label": "alice"}
    assert g.get_node_properties("B") == {"score": 1}
    assert g.get_edge_properties("A", "B") == {"weight": 2.0}
    with pytest.raises(KeyError):
        g.get_edge_properties("B", "A")


def test_remove_node_drops_incident_edges(cycle_graph):
    _require_imports()
    assert cycle_graph.remove_node("B") is True

    assert cycle_graph.node_ids() == ["A", "C"]
    assert cycle_graph.edge_count == 1
    assert cycle_graph.has_edge("C", "A")
    assert cycle_graph.out_neighbors("A") == []
    assert cycle_graph.remove_node("B") is False


def test_remove_edge(cycle_graph):
    _require_imports()
    assert cycle_graph.remove_edge("A", "B") is True
    assert cycle_graph.remove_edge("A", "B") is False
    assert not cycle_graph.has_edge("A", "B")
    assert cycle_graph.in_neighbors("B") == []


def test_with_name_copies_structure(cycle_graph):
    _require_imports()
    clone = cycle_graph.with_name("copy")
    clone.update_node_properties("A", {"label": "x"})

    assert clone.name == "copy"
    assert clone.edge_count == 3
    assert cycle_graph.get_node_properties("A") == {"label": "a"}
