# modhost/config/providers.py
from __future__ import annotations
import copy
import logging
from typing import Any
from collections.abc import Mapping
from pathlib import Path

import json5

from modhost.core.dictpath import getByPath, setByPath, deleteByPath
from .types import ConfigProvider

logger = logging.getLogger(__name__)

__all__ = ["OverrideProvider", "DefaultsProvider", "FileProvider"]



def _readDocument(path: Path, owner: str) -> Mapping[str, Any] | None:
    """
    Parses a json/json5 file. Returns None when the file cannot be parsed,
    raises TypeError when it parses to something other than an object.
    """
    try:
        parsed = json5.loads(path.read_text(encoding="utf-8"))
    except ValueError as err:
        logger.warning("%s: parse failed for '%s': %s", owner, path, err)
        return None

    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise TypeError(f"{owner}: '{path}' must hold a JSON object, not '{type(parsed).__name__}'")
    return parsed



class _MappingLayer(ConfigProvider):
    """Read side shared by every provider: dotted-path lookups over nested mappings."""
    _data: Mapping[str, Any]

    def get(self, key: str) -> Any | None:
        return getByPath(self._data, key, None)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(dict(self._data))


# ----------------------------------------------
#          OverrideProvider (in-memory)
# ----------------------------------------------

class OverrideProvider(_MappingLayer):
    """
    Volatile topmost layer, never saved. The CLI puts its flags here,
    e.g. OverrideProvider({"mods": {"allowHostApi": False}}).

    Writing None deletes the key and prunes empty parents.
    """
    _data: dict[str, Any]

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data = copy.deepcopy(dict(data or {}))

    def set(self, key: str, value: Any) -> None:
        if value is None:
            deleteByPath(self._data, key, pruneEmptyParents=True)
        else:
            setByPath(self._data, key, copy.deepcopy(value), createIfMissing=True)


# ----------------------------------------------
#          DefaultsProvider (read-only)
# ----------------------------------------------

class DefaultsProvider(_MappingLayer):
    """
    Shipped defaults, from an in-memory mapping (`data`) or a json/json5 file
    (`path`), never both.

    A missing file raises FileNotFoundError unless strict=False, in which
    case the layer is empty. A file that does not hold an object, or cannot
    be parsed, raises TypeError: broken defaults are a packaging bug.
    """
    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        path: Path | str | None = None,
        strict: bool = True
    ) -> None:
        owner = type(self).__name__
        if (data is None) == (path is None):
            raise ValueError(f"{owner}: provide exactly one of 'data' or 'path'")

        if data is not None:
            if not isinstance(data, Mapping):
                raise TypeError(f"{owner}: 'data' must be a Mapping, not '{type(data).__name__}'")
            self._data = data
            return

        path = Path(path)
        if not path.is_file():
            if strict:
                raise FileNotFoundError(f"{owner}: defaults file '{path}' not found")
            self._data = {}
            return

        parsed = _readDocument(path, owner)
        if parsed is None:
            raise TypeError(f"{owner}: defaults file '{path}' is not valid json5")
        self._data = parsed


# ----------------------------------------------
#        FileProvider (json/json5 on disk)
# ----------------------------------------------

class FileProvider(_MappingLayer):
    """
    User configuration read from a .json or .json5 file.

    A missing or unparseable file gives an empty layer (the latter with a
    warning). A file holding anything but an object raises TypeError.
    """
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

        if not self.path.exists():
            logger.debug("%s: '%s' does not exist, layer is empty", type(self).__name__, self.path)
            self._data = {}
            return
        if not self.path.is_file():
            raise IsADirectoryError(f"{type(self).__name__}: '{self.path}' exists but is not a file")

        self._data = dict(_readDocument(self.path, type(self).__name__) or {})
