# tests/core/datasets/test_store.py
"""
Testes do store de datasets em memória (MemoryDataStore).

Valida namespaces separados para tabelas e grafos, criação, busca,
remoção e o erro tipado `DatasetNotFound`.
"""

import pytest

try:
    from atlas_compute.core.datasets.store import MemoryDataStore
    from atlas_compute.core.exceptions import DatasetNotFound
except Exception as e:  # noqa: BLE001
    MemoryDataStore = None
    DatasetNotFound = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o store em memória esteja disponível.

    Usado para garantir:
        - Falha explícita quando o módulo de store não pode ser importado
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing data store. Implement:\n"
            "- src/atlas_compute/core/datasets/store.py (MemoryDataStore)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_create_and_get():
    _require_imports()
    store = MemoryDataStore()
    table = store.create_tabular("sales")
    graph = store.create_graph("social")

    assert store.get_tabular("sales") is table
    assert store.get_graph("social") is graph
    assert store.dataset_names == ["sales", "social"]


def test_namespaces_are_separate():
    """
    Verifica que uma tabela e um grafo podem compartilhar o mesmo nome.

    Usado para garantir:
        - Buscas por nome sempre consideram o tipo do dataset
    """
    _require_imports()
    store = MemoryDataStore()
    store.create_tabular("data")
    store.create_graph("data")

    assert store.tabular_exists("data")
    assert store.graph_exists("data")
    assert store.try_get_graph("missing") is None


def test_duplicate_create_raises():
    _require_imports()
    store = MemoryDataStore()
    store.create_tabular("t")
    with pytest.raises(ValueError):
        store.create_tabular("t")


def test_missing_dataset_raises_typed_error():
    _require_imports()
    store = MemoryDataStore()
    with pytest.raises(DatasetNotFound) as exc:
        store.get_graph("nope")
    assert exc.value.details["kind"] == "graph"


def test_add_delete_and_clear(sample_table, cycle_graph):
    _require_imports()
    store = MemoryDataStore()
    store.add(sample_table)
    store.add(cycle_graph)

    assert store.tabular_names == ["sample"]
    assert store.graph_names == ["cycle"]
    assert store.delete_tabular("sample") is True
    assert store.delete_tabular("sample") is False

    store.clear_all()
    assert store.dataset_names == []


def test_add_rejects_unknown_kind():
    _require_imports()
    with pytest.raises(TypeError):
        MemoryDataStore().add(object())
