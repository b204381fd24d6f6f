# tests/algorithms/graph/test_pagerank.py
"""
Testes do algoritmo PageRank.

Este módulo valida:
- convergência e simetria em um ciclo
- conservação da massa total com nós dangling
- ranking (`topNodes`) em grafo estrela
- grafo vazio (apenas métricas)
- validação de parâmetros e incompatibilidade de kind
- progresso, cancelamento e não mutação do input

Invariantes:
    - Σ pagerank == 1 (massa dangling redistribuída uniformemente)
    - O grafo de entrada nunca recebe a propriedade `pagerank`
"""

import pytest

try:
    from atlas_compute.algorithms.graph.pagerank import PAGERANK_PROPERTY, PageRankAlgorithm
    from atlas_compute.core.algorithm.context import CancellationToken, ExecutionContext
    from atlas_compute.core.datasets.graph import MemoryGraphDataset
    from atlas_compute.core.errors import ErrorKind
except Exception as e:  # noqa: BLE001
    PAGERANK_PROPERTY = None
    PageRankAlgorithm = None
    CancellationToken = None
    ExecutionContext = None
    MemoryGraphDataset = None
    ErrorKind = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o PageRank esteja disponível.

    Usado para garantir:
        - Falha explícita quando o algoritmo não pode ser importado
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing PageRank. Implement:\n"
            "- src/atlas_compute/algorithms/graph/pagerank.py (PageRankAlgorithm)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _graph(name, nodes, edges):
    g = MemoryGraphDataset(name)
    for node_id in nodes:
        g.add_node(node_id)
    for source, target in edges:
        g.add_edge(source, target)
    return g


def _ranks(dataset):
    return {n: dataset.get_node_properties(n)[PAGERANK_PROPERTY] for n in dataset.node_ids()}


def test_cycle_converges_to_uniform_scores(cycle_graph):
    """
    Verifica que o ciclo A → B → C → A converge para scores iguais.

    Usado para garantir:
        - Convergência reportada em métricas
        - Scores simétricos somando 1
    """
    _require_imports()
    result = PageRankAlgorithm().execute(cycle_graph)

    assert result.success
    assert result.metrics["converged"] is True
    assert result.metrics["nodeCount"] == 3
    ranks = _ranks(result.output_dataset)
    assert abs(ranks["A"] - ranks["B"]) < 0.01
    assert sum(ranks.values()) == pytest.approx(1.0)
    assert ranks["A"] == pytest.approx(1 / 3)


def test_dangling_mass_is_redistributed():
    """
    Verifica a conservação da massa com um nó sem arestas de saída.

    Usado para garantir:
        - Σ pagerank == 1 mesmo com nós dangling
        - O nó que recebe a aresta supera o que só aponta
    """
    _require_imports()
    g = _graph("dangling", ["A", "B", "C"], [("A", "B"), ("C", "B")])

    ranks = _ranks(PageRankAlgorithm().execute(g).output_dataset)

    assert sum(ranks.values()) == pytest.approx(1.0)
    assert ranks["B"] > ranks["A"]
    assert ranks["A"] == pytest.approx(ranks["C"])


def test_top_nodes_in_star_graph():
    _require_imports()
    g = _graph("star", ["A", "B", "C", "D"], [("B", "A"), ("C", "A"), ("D", "A")])

    result = PageRankAlgorithm().execute(g)
    top = result.metrics["topNodes"]

    assert len(top) == 4
    assert top[0][0] == "A"
    assert [score for _, score in top] == sorted((score for _, score in top), reverse=True)
    assert [node for node, _ in top[1:]] == ["B", "C", "D"]


def test_output_copies_structure_and_properties():
    _require_imports()
    g = MemoryGraphDataset("labelled")
    g.add_node("A", {"label": "alice"})
    g.add_node("B")
    g.add_edge("A", "B", {"weight": 2.0})

    output = PageRankAlgorithm().execute(g).output_dataset

    assert output.name == "labelled_PageRank"
    assert output.get_node_properties("A")["label"] == "alice"
    assert output.get_edge_properties("A", "B") == {"weight": 2.0}


def test_input_is_not_mutated(cycle_graph):
    _require_imports()
    PageRankAlgorithm().execute(cycle_graph)
    assert all(PAGERANK_PROPERTY not in cycle_graph.get_node_properties(n) for n in cycle_graph.node_ids())


def test_empty_graph_returns_metrics_only():
    _require_imports()
    result = PageRankAlgorithm().execute(MemoryGraphDataset("empty"))

    assert result.success
    assert result.output_dataset is None
    assert dict(result.metrics) == {"iterations": 0, "converged": True, "maxDelta": 0.0, "nodeCount": 0}


def test_tabular_input_is_incompatible(sample_table):
    _require_imports()
    result = PageRankAlgorithm().execute(sample_table)

    assert result.error_kind is ErrorKind.INCOMPATIBLE_KIND
    assert "not compatible" in result.error


@pytest.mark.parametrize(
    "parameters, fragment",
    [
        ({"dampingFactor": 1.5}, "dampingFactor (1.5) must be between 0 and 1."),
        ({"maxIterations": 0}, "maxIterations (0) must be at least 1."),
        ({"tolerance": -1}, "tolerance (-1.0) must be non-negative."),
        ({"dampingFactor": "high"}, "Parameter 'dampingFactor' is str, expected float."),
    ],
)
def test_parameter_validation(cycle_graph, parameters, fragment):
    """
    Verifica as restrições de parâmetros do PageRank.

    Usado para garantir:
        - Falha `parameter_validation` antes de qualquer iteração
    """
    _require_imports()
    ctx = ExecutionContext.builder().with_parameters(parameters).build()

    result = PageRankAlgorithm().execute(cycle_graph, ctx)

    assert result.error_kind is ErrorKind.PARAMETER_VALIDATION
    assert fragment in result.error


def test_max_iterations_without_convergence():
    _require_imports()
    g = _graph("chain", ["A", "B", "C"], [("A", "B"), ("B", "C")])
    seen = []
    ctx = (
        ExecutionContext.builder()
        .with_parameters({"maxIterations": 4, "tolerance": 0.0})
        .with_progress(seen.append)
        .build()
    )

    result = PageRankAlgorithm().execute(g, ctx)

    assert result.metrics["iterations"] == 4
    assert result.metrics["converged"] is False
    assert seen == pytest.approx([0.25, 0.5, 0.75, 1.0])


def test_cancellation_during_iterations(cycle_graph):
    """
    Verifica que o cancelamento é observado entre iterações.

    Usado para garantir:
        - Resultado `cancelled` sem dataset de saída
    """
    _require_imports()
    token = CancellationToken()
    ctx = (
        ExecutionContext.builder()
        .with_parameters({"tolerance": 0.0})
        .with_cancellation(token)
        .with_progress(lambda _: token.cancel())
        .build()
    )

    result = PageRankAlgorithm().execute(cycle_graph, ctx)

    assert result.error_kind is ErrorKind.CANCELLED
    assert result.output_dataset is None
