# src/atlas_compute/core/datasets/tabular.py
"""
Dataset tabular em memória.

`MemoryTabularDataset` é a implementação canônica de `TabularDataset` usada
pelos algoritmos tabulares para produzir outputs e pelos testes para montar
inputs. As colunas são armazenadas por tipo lógico:

    - NUMERIC → `np.ndarray` float64 (NaN representa ausência)
    - STRING  → `list` de `str | None`
    - BOOLEAN → `np.ndarray` bool

Decisões arquiteturais:
    - Acessores retornam cópias; o armazenamento interno nunca vaza
    - A primeira coluna adicionada fixa `row_count`; as demais devem ter
      exatamente o mesmo comprimento
    - Interop com pandas (`from_dataframe` / `to_dataframe`) usa a inferência
      de dtype do próprio pandas

Invariantes:
    - Nomes de coluna únicos e com ordem de inserção preservada
    - Todas as colunas têm `row_count` valores

Limites explícitos:
    - Sem consultas/filtros (o core só precisa de acesso colunar)
    - Sem parsing de CSV ou serialização em disco
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple
import uuid

import numpy as np
import pandas as pd

from .types import ColumnType, DatasetKind


def _as_array(values: Iterable[Any], dtype: Any) -> np.ndarray:
    if not isinstance(values, np.ndarray):
        values = list(values)
    return np.asarray(values, dtype=dtype)


class DuplicateColumnError(ValueError):
    """Já existe uma coluna com o mesmo nome no dataset."""


class ColumnLengthMismatchError(ValueError):
    """O comprimento da coluna difere do `row_count` do dataset."""


@dataclass(eq=False)
class MemoryTabularDataset:
    """
    Tabela colunar nomeada mantida em memória.

    Exemplo:
        >>> ds = MemoryTabularDataset("sales")
        >>> ds.add_numeric_column("amount", [10, 20, 30])
        >>> ds.add_string_column("region", ["n", "s", "n"])
        >>> ds.row_count
        3
    """

    name: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    _columns: Dict[str, Tuple[ColumnType, Any]] = field(default_factory=dict, init=False, repr=False)
    _row_count: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("dataset name must be a non-empty string")

    # -----------------------------
    # Identidade / forma
    # -----------------------------
    @property
    def kind(self) -> DatasetKind:
        return DatasetKind.TABULAR

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def column_count(self) -> int:
        return len(self._columns)

    @property
    def column_names(self) -> List[str]:
        return list(self._columns)

    def has_column(self, name: str) -> bool:
        return name in self._columns

    def column_type(self, name: str) -> ColumnType:
        return self._entry(name)[0]

    # -----------------------------
    # Leitura
    # -----------------------------
    def get_numeric_column(self, name: str) -> np.ndarray:
        return self._typed(name, ColumnType.NUMERIC).copy()

    def get_string_column(self, name: str) -> List[Optional[str]]:
        return list(self._typed(name, ColumnType.STRING))

    def get_boolean_column(self, name: str) -> np.ndarray:
        return self._typed(name, ColumnType.BOOLEAN).copy()

    def get_row(self, index: int) -> Dict[str, Any]:
        """Retorna a linha `index` como dict coluna → valor Python nativo."""
        if index < 0 or index >= self._row_count:
            raise IndexError(f"Row index {index} out of range (row_count={self._row_count})")
        row: Dict[str, Any] = {}
        for col, (ctype, data) in self._columns.items():
            value = data[index]
            if ctype is ColumnType.NUMERIC:
                value = float(value)
            elif ctype is ColumnType.BOOLEAN:
                value = bool(value)
            row[col] = value
        return row

    # -----------------------------
    # Escrita
    # -----------------------------
    def add_numeric_column(self, name: str, values: Iterable[Any]) -> None:
        data = _as_array(values, np.float64)
        if data.ndim != 1:
            raise ValueError(f"Column '{name}' must be one-dimensional")
        self._insert(name, ColumnType.NUMERIC, data.copy())

    def add_string_column(self, name: str, values: Iterable[Any]) -> None:
        data = [None if v is None else str(v) for v in values]
        self._insert(name, ColumnType.STRING, data)

    def add_boolean_column(self, name: str, values: Iterable[Any]) -> None:
        data = _as_array(values, bool)
        if data.ndim != 1:
            raise ValueError(f"Column '{name}' must be one-dimensional")
        self._insert(name, ColumnType.BOOLEAN, data.copy())

    def remove_column(self, name: str) -> bool:
        """Remove a coluna; retorna False se ela não existir."""
        if name not in self._columns:
            return False
        del self._columns[name]
        if not self._columns:
            self._row_count = 0
        return True

    def with_name(self, name: str) -> "MemoryTabularDataset":
        """Cópia profunda do dataset sob um novo nome (novo id)."""
        clone = MemoryTabularDataset(name)
        for col, (ctype, data) in self._columns.items():
            clone._columns[col] = (ctype, list(data) if ctype is ColumnType.STRING else data.copy())
        clone._row_count = self._row_count
        return clone

    # -----------------------------
    # pandas interop
    # -----------------------------
    @classmethod
    def from_dataframe(cls, name: str, df: pd.DataFrame) -> "MemoryTabularDataset":
        """
        Constrói um dataset a partir de um DataFrame.

        Mapeamento de dtypes:
            - bool            → BOOLEAN
            - numérico        → NUMERIC (float64)
            - qualquer outro  → STRING (NaN/None viram None)
        """
        ds = cls(name)
        for col in df.columns:
            series = df[col]
            key = str(col)
            if pd.api.types.is_bool_dtype(series.dtype):
                ds.add_boolean_column(key, series.to_numpy(dtype=bool))
            elif pd.api.types.is_numeric_dtype(series.dtype):
                ds.add_numeric_column(key, series.to_numpy(dtype=np.float64, na_value=np.nan))
            else:
                ds.add_string_column(key, [None if pd.isna(v) else v for v in series.tolist()])
        return ds

    def to_dataframe(self) -> pd.DataFrame:
        """Exporta as colunas (na ordem de inserção) como DataFrame."""
        data: Dict[str, Any] = {}
        for col, (ctype, values) in self._columns.items():
            if ctype is ColumnType.STRING:
                data[col] = pd.Series(values, dtype=object)
            else:
                data[col] = pd.Series(values.copy())
        return pd.DataFrame(data, columns=list(self._columns))

    # -----------------------------
    # Internos
    # -----------------------------
    def _entry(self, name: str) -> Tuple[ColumnType, Any]:
        if name not in self._columns:
            raise KeyError(f"Column '{name}' not found")
        return self._columns[name]

    def _typed(self, name: str, expected: ColumnType) -> Any:
        ctype, data = self._entry(name)
        if ctype is not expected:
            raise TypeError(f"Column '{name}' is {ctype.value}, not {expected.value}")
        return data

    def _insert(self, name: str, ctype: ColumnType, data: Any) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("column name must be a non-empty string")
        if name in self._columns:
            raise DuplicateColumnError(f"Column '{name}' already exists in dataset '{self.name}'")
        if self._columns and len(data) != self._row_count:
            raise ColumnLengthMismatchError(
                f"Column length {len(data)} does not match existing row count {self._row_count}"
            )
        self._columns[name] = (ctype, data)
        self._row_count = len(data)
