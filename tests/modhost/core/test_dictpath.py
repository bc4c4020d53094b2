# tests/modhost/core/test_dictpath.py
from __future__ import annotations
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import pytest

from modhost.core.dictpath import deleteByPath, getByPath, setByPath, splitPath

# ----------------------------------------
# splitPath
# ----------------------------------------

def test_splitPath_plainAndEscaped() -> None:
    assert splitPath("mods.root") == ["mods", "root"]
    assert splitPath("mods.sourceSuffixes\\.py") == ["mods", "sourceSuffixes.py"]
    assert splitPath("a\\\\b") == ["a\\b"]


@pytest.mark.parametrize("bad", ["", "a..b", ".a", "a.", "a\\"])
def test_splitPath_invalid(bad: str) -> None:
    with pytest.raises(ValueError):
        splitPath(bad)


# ----------------------------------------
# getByPath
# ----------------------------------------

def test_getByPath_nestedAndDefaults() -> None:
    data: dict[str, Any] = {"mods": {"root": "Mods", "flags": {"a.b": 1}, "none": None}}

    assert getByPath(data, "mods.root") == "Mods"
    assert getByPath(data, "mods.flags.a\\.b") == 1
    assert getByPath(data, "mods.missing", "dflt") == "dflt"
    assert getByPath(data, "mods.root.deeper", "dflt") == "dflt"
    assert getByPath(data, "", "dflt") == "dflt"
    assert getByPath(data, "mods.none", "dflt") is None


def test_getByPath_readOnlyMapping() -> None:
    data: Mapping[str, Any] = MappingProxyType({"a": MappingProxyType({"b": 2})})

    assert getByPath(data, "a.b") == 2


# ----------------------------------------
# setByPath
# ----------------------------------------

def test_setByPath_createIfMissing() -> None:
    data: dict[str, Any] = {}

    setByPath(data, "logging.suppressRecurring.enabled", True, createIfMissing=True)

    assert data == {"logging": {"suppressRecurring": {"enabled": True}}}


def test_setByPath_missingHopWithoutCreate_raises() -> None:
    with pytest.raises(KeyError):
        setByPath({}, "a.b", 1)


def test_setByPath_throughScalarOrReadOnly_raises() -> None:
    with pytest.raises(TypeError):
        setByPath({"a": 1}, "a.b", 2, createIfMissing=True)
    with pytest.raises(TypeError):
        setByPath({"a": MappingProxyType({})}, "a.b", 2)


# ----------------------------------------
# deleteByPath
# ----------------------------------------

def test_deleteByPath_prunesEmptyParents() -> None:
    data: dict[str, Any] = {"a": {"b": {"c": 1}}, "keep": 1}

    assert deleteByPath(data, "a.b.c") is True
    assert data == {"keep": 1}


def test_deleteByPath_withoutPrune_keepsParents() -> None:
    data: dict[str, Any] = {"a": {"b": {"c": 1}}}

    assert deleteByPath(data, "a.b.c", pruneEmptyParents=False) is True
    assert data == {"a": {"b": {}}}


def test_deleteByPath_missing_returnsFalse() -> None:
    data: dict[str, Any] = {"a": {"x": 1}}

    assert deleteByPath(data, "a.b") is False
    assert deleteByPath(data, "nope.b") is False
    assert data == {"a": {"x": 1}}
