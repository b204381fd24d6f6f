# tests/core/config/test_merge.py
"""
Testes do deep-merge de configuração.

Este módulo valida a política de combinação entre uma configuração base
e seus overrides, usada tanto pelo loader (defaults + local) quanto pelo
builder de pipelines (defaults do algoritmo + parâmetros do step).

Política validada:
    - dicts são combinados recursivamente
    - listas são sobrescritas por inteiro
    - int e float são intercambiáveis (bool não é número)
    - None no override sobrescreve o valor base
    - demais mudanças de tipo levantam `ConfigTypeConflictError`

Invariantes:
    - Nenhum input é mutado
"""

import pytest

try:
    from atlas_compute.core.config.merge import deep_merge
    from atlas_compute.core.config.errors import ConfigTypeConflictError
except Exception as e:  # noqa: BLE001
    deep_merge = None
    ConfigTypeConflictError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que `deep_merge` e `ConfigTypeConflictError` estejam disponíveis.

    Usado para garantir:
        - Falha explícita quando o módulo de merge não existe
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing merge module. Implement:\n"
            "- src/atlas_compute/core/config/merge.py (deep_merge)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_nested_dicts_are_merged():
    """
    Verifica que chaves aninhadas ausentes no override são preservadas.

    Usado para garantir:
        - Override parcial de parâmetros de um algoritmo
    """
    _require_imports()
    base = {"algorithms": {"PageRank": {"parameters": {"dampingFactor": 0.85, "maxIterations": 100}}}}
    override = {"algorithms": {"PageRank": {"parameters": {"maxIterations": 20}}}}

    merged = deep_merge(base, override)

    assert merged["algorithms"]["PageRank"]["parameters"] == {"dampingFactor": 0.85, "maxIterations": 20}


def test_lists_are_replaced():
    _require_imports()
    merged = deep_merge({"columns": ["a", "b"]}, {"columns": ["c"]})
    assert merged["columns"] == ["c"]


def test_list_replaces_none():
    """Um default `None` (ex.: `columns`) aceita uma lista no override."""
    _require_imports()
    merged = deep_merge({"columns": None}, {"columns": ["x"]})
    assert merged["columns"] == ["x"]


def test_int_and_float_are_compatible():
    """
    Verifica que parâmetros numéricos podem trocar entre int e float.

    Usado para garantir:
        - `rangeMax: 100` sobrescrevendo `rangeMax: 1.0` não é conflito
    """
    _require_imports()
    assert deep_merge({"rangeMax": 1.0}, {"rangeMax": 100}) == {"rangeMax": 100}
    assert deep_merge({"maxIterations": 100}, {"maxIterations": 50.0}) == {"maxIterations": 50.0}


def test_bool_is_not_a_number():
    _require_imports()
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"tolerance": 1e-6}, {"tolerance": True})


def test_none_override_replaces_value():
    _require_imports()
    assert deep_merge({"columns": ["a"]}, {"columns": None}) == {"columns": None}


def test_type_conflict_raises():
    """
    Verifica que uma troca de tipo incompatível é rejeitada.

    Usado para garantir:
        - Erros de digitação em overrides não passam silenciosamente
    """
    _require_imports()
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"dampingFactor": 0.85}, {"dampingFactor": "high"})
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"parameters": {"a": 1}}, {"parameters": [1]})


def test_non_dict_root_raises():
    _require_imports()
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"a": 1}, ["a"])


def test_inputs_are_not_mutated():
    """
    Verifica que base e override permanecem intactos após o merge.

    Usado para garantir:
        - Defaults compartilhados entre vários steps não são contaminados
    """
    _require_imports()
    base = {"p": {"x": 1, "nested": {"y": [1, 2]}}}
    override = {"p": {"nested": {"y": [3]}, "z": 2}}

    merged = deep_merge(base, override)
    merged["p"]["nested"]["y"].append(99)

    assert base == {"p": {"x": 1, "nested": {"y": [1, 2]}}}
    assert override == {"p": {"nested": {"y": [3]}, "z": 2}}
