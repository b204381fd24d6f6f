# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas Compute.

Este módulo define fixtures reutilizáveis que fornecem:
- grafos pequenos e determinísticos (ciclo, duas componentes)
- tabelas em memória com colunas numéricas e textuais
- Event Log isolado por teste
- configurações YAML mínimas (defaults e override local)

O objetivo destas fixtures é permitir testes do core e dos algoritmos
built-in sem depender de:
- filesystem (exceto via `tmp_path` nos próprios testes)
- estado global entre testes (o registry padrão é descartado)
- datasets externos

Decisões arquiteturais:
    - Fixtures retornam objetos novos a cada teste
    - Datasets são construídos pela API pública (`add_node`, `add_edge`,
      `add_numeric_column`), nunca por atributos internos
    - Imports do core são realizados de forma lazy dentro dos fixtures

Invariantes:
    - Nenhuma fixture executa algoritmos
    - Nenhuma fixture realiza I/O
    - Todas as fixtures são determinísticas

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica condicional complexa

Este módulo existe como infraestrutura de teste e não
como validação funcional da biblioteca.
"""

import pytest


# =====================================================
# Registry padrão
# =====================================================

@pytest.fixture(autouse=True)
def _fresh_default_registry():
    """
    Descarta o registry padrão de processo antes e depois de cada teste.

    Testes que registram algoritmos dummy em `default_registry()` não
    podem vazar esse estado para os demais.
    """
    from atlas_compute.core.algorithm.registry import reset_default_registry

    reset_default_registry()
    yield
    reset_default_registry()


# =====================================================
# Grafos
# =====================================================

@pytest.fixture
def cycle_graph():
    """
    Fixture que fornece o ciclo dirigido A → B → C → A.

    Em um ciclo simétrico todos os nós têm o mesmo PageRank (1/3) e
    formam um único componente, fraco ou forte.

    Usado por:
        - Testes de PageRank (convergência e simetria)
        - Testes de ConnectedComponents (modo dirigido)
        - Testes de pipeline
    """
    from atlas_compute.core.datasets.graph import MemoryGraphDataset

    g = MemoryGraphDataset("cycle")
    for node_id in ("A", "B", "C"):
        g.add_node(node_id, {"label": node_id.lower()})
    g.add_edge("A", "B")
    g.add_edge("B", "C")
    g.add_edge("C", "A")
    return g


@pytest.fixture
def two_component_graph():
    """
    Fixture que fornece um grafo com duas componentes fracamente conexas.

    Estrutura:
        - A → B → C
        - X → Y

    Usado por:
        - Testes de ConnectedComponents (partição)
        - Testes de pipeline encadeando PageRank e componentes
    """
    from atlas_compute.core.datasets.graph import MemoryGraphDataset

    g = MemoryGraphDataset("two_components")
    for node_id in ("A", "B", "C", "X", "Y"):
        g.add_node(node_id)
    g.add_edge("A", "B")
    g.add_edge("B", "C")
    g.add_edge("X", "Y")
    return g


# =====================================================
# Tabelas
# =====================================================

@pytest.fixture
def sample_table():
    """
    Fixture que fornece uma tabela com uma coluna numérica e uma textual.

    Colunas:
        - values: [10, 20, 30, 40, 50]
        - label:  ["a", "b", "c", "d", "e"]
    """
    from atlas_compute.core.datasets.tabular import MemoryTabularDataset

    ds = MemoryTabularDataset("sample")
    ds.add_numeric_column("values", [10, 20, 30, 40, 50])
    ds.add_string_column("label", ["a", "b", "c", "d", "e"])
    return ds


# =====================================================
# Traceability
# =====================================================

@pytest.fixture
def event_log():
    """Event Log novo, sem subscribers."""
    from atlas_compute.core.traceability.events import EventLog

    return EventLog()


# =====================================================
# Config
# =====================================================

@pytest.fixture
def config_defaults_yaml() -> str:
    """
    Fixture que fornece um YAML de defaults semelhante ao uso real.

    Contém defaults de parâmetros para PageRank e MinMaxNormalize e dois
    pipelines nomeados.

    Usado por:
        - Testes do loader de config
        - Testes do builder de pipelines
    """
    return """
algorithms:
  PageRank:
    parameters:
      dampingFactor: 0.85
      maxIterations: 100
      tolerance: 0.000001
  MinMaxNormalize:
    parameters:
      rangeMin: 0.0
      rangeMax: 1.0

pipelines:
  graph_analysis:
    steps:
      - algorithm: PageRank
        parameters:
          maxIterations: 50
      - algorithm: ConnectedComponents
        output_name: analysis_result
  normalize:
    steps:
      - algorithm: minmaxnormalize
        parameters:
          rangeMax: 100
"""


@pytest.fixture
def config_local_yaml() -> str:
    """Override local: altera apenas o `dampingFactor` do PageRank."""
    return """
algorithms:
  PageRank:
    parameters:
      dampingFactor: 0.9
"""
