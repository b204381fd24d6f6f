# src/atlas_compute/algorithms/tabular/minmax_normalize.py
"""
MinMaxNormalize — reescala colunas numéricas para [rangeMin, rangeMax].

Para cada coluna selecionada:
    x ↦ (x - min) / (max - min) * (rangeMax - rangeMin) + rangeMin

Política de coluna degenerada: se max == min, todos os valores viram
`rangeMin` (documentado, não é erro). Colunas sem nenhum valor finito são
copiadas como estão e reportadas com min/max None.

Parâmetros:
    - columns (list, opcional): subconjunto explícito; padrão = todas as numéricas
    - rangeMin (float, 0.0)
    - rangeMax (float, 1.0): estritamente maior que rangeMin (validado antes)

Erros (antes de qualquer escrita no output):
    - coluna inexistente          → ColumnNotFound
    - coluna não numérica         → ColumnNotNumeric
    - nenhuma coluna numérica     → NoNumericColumns

Colunas não selecionadas (numéricas, texto ou booleanas) são copiadas sem
alteração; o output tem o mesmo conjunto de colunas e o mesmo row_count.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np

from atlas_compute.core.algorithm.base import TabularAlgorithm
from atlas_compute.core.algorithm.context import ExecutionContext
from atlas_compute.core.algorithm.types import AlgorithmOutput, ParameterDescriptor
from atlas_compute.core.datasets.tabular import MemoryTabularDataset
from atlas_compute.core.datasets.types import ColumnType, TabularDataset
from atlas_compute.core.exceptions import ColumnNotFound, ColumnNotNumeric, NoNumericColumns


class MinMaxNormalizeAlgorithm(TabularAlgorithm):
    name = "MinMaxNormalize"
    description = "Scales numeric columns to a target range using min-max normalization."
    output_suffix = "Normalized"
    parameters = (
        ParameterDescriptor("columns", "Column names to normalize (None = all numeric columns)", list, False, None),
        ParameterDescriptor("rangeMin", "Target range minimum", float, False, 0.0),
        ParameterDescriptor("rangeMax", "Target range maximum", float, False, 1.0),
    )

    def validate_parameters(self, context: ExecutionContext) -> List[str]:
        violations = super().validate_parameters(context)
        range_min = context.get("rangeMin", 0.0)
        range_max = context.get("rangeMax", 1.0)
        if not range_min < range_max:
            violations.append(f"rangeMin ({range_min}) must be less than rangeMax ({range_max}).")
        return violations

    def _execute_tabular(self, dataset: TabularDataset, context: ExecutionContext) -> AlgorithmOutput:
        range_min = context.get("rangeMin", 0.0)
        range_max = context.get("rangeMax", 1.0)
        target_range = range_max - range_min

        all_columns = list(dataset.column_names)
        selected = self._select_columns(dataset, context.get("columns", None, type_=list))

        output = MemoryTabularDataset(self._resolve_output_name(dataset, context))
        details: Dict[str, Dict[str, Optional[float]]] = {}

        for position, column in enumerate(all_columns, start=1):
            context.raise_if_cancelled()
            ctype = dataset.column_type(column)

            if ctype is ColumnType.NUMERIC:
                values = dataset.get_numeric_column(column)
                if column in selected:
                    values, details[column] = self._normalize(values, range_min, target_range)
                output.add_numeric_column(column, values)
            elif ctype is ColumnType.BOOLEAN:
                output.add_boolean_column(column, dataset.get_boolean_column(column))
            else:
                output.add_string_column(column, dataset.get_string_column(column))

            context.report_progress(position / len(all_columns))

        metrics: Dict[str, Any] = {
            "columnsNormalized": sum(1 for d in details.values() if d["originalMin"] is not None),
            "totalColumns": len(all_columns),
            "rangeMin": range_min,
            "rangeMax": range_max,
            "columnDetails": details,
        }
        return AlgorithmOutput(output_dataset=output, metrics=metrics)

    @staticmethod
    def _select_columns(dataset: TabularDataset, requested: Optional[List[Any]]) -> List[str]:
        if requested:
            for column in requested:
                if not dataset.has_column(column):
                    raise ColumnNotFound(
                        message=f"Column '{column}' does not exist in dataset '{dataset.name}'.",
                        details={"column": column, "dataset": dataset.name},
                    )
                if dataset.column_type(column) is not ColumnType.NUMERIC:
                    raise ColumnNotNumeric(
                        message=f"Column '{column}' is not numeric and cannot be normalized.",
                        details={"column": column, "type": dataset.column_type(column).value},
                    )
            selected = list(dict.fromkeys(requested))
        else:
            selected = [c for c in dataset.column_names if dataset.column_type(c) is ColumnType.NUMERIC]

        if not selected:
            raise NoNumericColumns(
                message="No numeric columns found to normalize.",
                details={"dataset": dataset.name},
            )
        return selected

    @staticmethod
    def _normalize(values: np.ndarray, range_min: float, target_range: float):
        finite = values[np.isfinite(values)]
        if finite.size == 0:
            return values, {"originalMin": None, "originalMax": None, "originalRange": None}

        col_min = float(finite.min())
        col_max = float(finite.max())
        col_range = col_max - col_min

        if col_range > 0:
            normalized = (values - col_min) / col_range * target_range + range_min
        else:
            # NaN permanece NaN; demais valores colapsam em rangeMin
            normalized = np.where(np.isnan(values), np.nan, range_min)

        return normalized, {"originalMin": col_min, "originalMax": col_max, "originalRange": col_range}
