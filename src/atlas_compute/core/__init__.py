# src/atlas_compute/core/__init__.py
"""
Core do Atlas Compute.

Este pacote contém a implementação canônica do engine de algoritmos,
reunindo as responsabilidades essenciais para execução, composição e
rastreabilidade de computações analíticas.

O core é projetado para ser:
    - determinístico
    - testável de forma isolada
    - livre de dependências de UI ou de camadas de persistência
    - orientado a contratos explícitos

Componentes principais:
    - datasets     → contratos de capacidade (tabular/grafo) e datasets em memória
    - algorithm    → contexto de execução, resultado imutável, template base e registry
    - engine       → pipeline de algoritmos e construção a partir de configuração
    - config       → resolução de configuração (merge, validação estrutural, hashing)
    - traceability → Event Log e Manifest para auditoria e proveniência

Princípios fundamentais:
    - Nenhuma decisão silenciosa: todo comportamento é explícito e testado
    - Separação estrita entre contrato de algoritmo e orquestração
    - Estado compartilhado mutável apenas no registry (protegido por lock)

Este pacote existe como a fonte de verdade operacional do Atlas Compute.
"""
