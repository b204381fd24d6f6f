# src/atlas_compute/__init__.py
"""
Atlas Compute — engine extensível de execução de algoritmos analíticos.

Este pacote raiz define o namespace público do Atlas Compute, um engine
projetado para executar algoritmos sobre dois formatos de dataset
(tabular e grafo) e compô-los em pipelines rastreáveis.

Princípios centrais:
    - Algoritmos declaram explicitamente o tipo de dataset e os parâmetros que aceitam
    - O dataset de entrada nunca é mutado; toda saída é um dataset novo
    - Falhas são dados (ExecutionResult), nunca exceções vazando ao chamador
    - Rastreabilidade (eventos e manifest) é um requisito de primeira classe

Arquitetura em alto nível:
    - core.datasets     → contratos de dataset e implementações em memória
    - core.algorithm    → contexto, resultado, template base e registry
    - core.engine       → pipeline sequencial e construção via configuração
    - core.config       → carregamento, merge e hashing de configuração
    - core.traceability → Event Log e Manifest de proveniência
    - algorithms        → algoritmos embutidos (PageRank, ConnectedComponents, MinMaxNormalize)

Limites explícitos:
    - Não renderiza UI
    - Não faz parsing de formatos de arquivo (CSV, GraphML)
    - Não implementa persistência transacional nem sessões multiusuário
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
