# src/atlas_compute/core/datasets/types.py
"""
Contratos de capacidade dos datasets consumidos pelo Atlas Compute.

O core nunca depende de uma implementação concreta de dataset: algoritmos
leem o input apenas através dos Protocols definidos aqui e escrevem sempre
em um dataset novo. As implementações em memória (`MemoryTabularDataset`,
`MemoryGraphDataset`) satisfazem estes contratos e servem como formato de
troca entre steps de um pipeline.

Componentes principais:
    - DatasetKind     → enum do formato do dataset (tabular | graph)
    - ColumnType      → enum do tipo de coluna tabular
    - Dataset         → contrato mínimo (name, kind)
    - TabularDataset  → colunas nomeadas, contagem fixa de linhas
    - GraphDataset    → nós/arestas com propriedades e adjacência O(1)

Invariantes:
    - Valores textuais dos enums são estáveis (usados em mensagens e Manifest)
    - Contratos são `runtime_checkable` para inspeção estrutural

Limites explícitos:
    - Nenhuma persistência ou parsing de arquivos vive aqui
    - Nenhum algoritmo depende de detalhes de armazenamento
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np


class DatasetKind(str, Enum):
    """Formato estrutural de um dataset."""

    TABULAR = "tabular"
    GRAPH = "graph"


class ColumnType(str, Enum):
    """
    Tipo lógico de uma coluna tabular.

    - NUMERIC: float64 (NaN representa ausência)
    - STRING: texto (None representa ausência)
    - BOOLEAN: bool
    """

    NUMERIC = "numeric"
    STRING = "string"
    BOOLEAN = "boolean"


@runtime_checkable
class Dataset(Protocol):
    """Contrato mínimo compartilhado por todos os datasets."""

    @property
    def name(self) -> str: ...

    @property
    def kind(self) -> DatasetKind: ...


@runtime_checkable
class TabularDataset(Dataset, Protocol):
    """
    Dataset colunar.

    Invariantes esperadas de qualquer implementação:
        - nomes de coluna únicos
        - todas as colunas com exatamente `row_count` valores
        - `column_names` preserva a ordem de inserção
    """

    @property
    def row_count(self) -> int: ...

    @property
    def column_names(self) -> List[str]: ...

    def has_column(self, name: str) -> bool: ...

    def column_type(self, name: str) -> ColumnType: ...

    def get_numeric_column(self, name: str) -> np.ndarray: ...

    def get_string_column(self, name: str) -> List[Optional[str]]: ...

    def get_boolean_column(self, name: str) -> np.ndarray: ...


@runtime_checkable
class GraphDataset(Dataset, Protocol):
    """
    Dataset de grafo dirigido com propriedades.

    Invariantes esperadas de qualquer implementação:
        - ids de nó únicos; arestas identificadas pelo par `(from, to)`
        - `out_neighbors` / `in_neighbors` em O(1) amortizado
        - `neighbors` é a união (out primeiro, sem repetição)
    """

    @property
    def node_count(self) -> int: ...

    @property
    def edge_count(self) -> int: ...

    def node_ids(self) -> List[str]: ...

    def has_node(self, node_id: str) -> bool: ...

    def get_node_properties(self, node_id: str) -> Dict[str, Any]: ...

    def out_neighbors(self, node_id: str) -> Sequence[str]: ...

    def in_neighbors(self, node_id: str) -> Sequence[str]: ...

    def neighbors(self, node_id: str) -> Sequence[str]: ...

    def edges(self) -> Iterable[Tuple[str, str, Dict[str, Any]]]: ...


def dataset_kind_of(dataset: Any) -> Optional[DatasetKind]:
    """
    Retorna o `DatasetKind` declarado por `dataset`, ou None se ausente/inválido.

    Aceita tanto o enum quanto o valor textual equivalente.
    """
    kind = getattr(dataset, "kind", None)
    if isinstance(kind, DatasetKind):
        return kind
    try:
        return DatasetKind(kind)
    except ValueError:
        return None
