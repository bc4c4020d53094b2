# modhost/core/dictpath.py
from __future__ import annotations
from typing import Any
from collections.abc import Mapping, MutableMapping

__all__ = ["splitPath", "getByPath", "setByPath", "deleteByPath"]



def splitPath(path: str) -> list[str]:
    """
    Splits a dotted config path where '.' separates segments and a backslash
    escapes the next character (including '.').

    Examples:
      - mods.root        -> ["mods", "root"]
      - suffixes\\.py.on -> ["suffixes.py", "on"]

    Raises ValueError for empty paths, empty segments or a dangling escape.
    """
    if not isinstance(path, str) or not path:
        raise ValueError("Path must be a non-empty string")

    parts: list[str] = []
    curr: list[str] = []
    esc = False
    for ch in path:
        if esc:
            curr.append(ch)
            esc = False
            continue
        if ch == "\\":
            esc = True
            continue
        if ch == ".":
            parts.append("".join(curr))
            curr = []
            continue
        curr.append(ch)
    if esc:
        raise ValueError("Path ends with a dangling escape (trailing backslash)")
    parts.append("".join(curr))

    if any(part == "" for part in parts):
        raise ValueError(f"Path '{path}' contains empty segment(s)")
    return parts



def getByPath(obj: Any, path: str, default: Any | None = None) -> Any:
    """
    Returns the value at `path` inside nested mappings, or `default` when any
    hop is missing or the path is invalid.
    """
    try:
        parts = splitPath(path)
    except ValueError:
        return default

    current: Any = obj
    for part in parts:
        if isinstance(current, Mapping) and part in current:
            current = current[part]
            continue
        return default
    return current



def setByPath(obj: MutableMapping[str, Any], path: str, value: Any, *, createIfMissing: bool = False) -> None:
    """
    Sets the value at `path`. Intermediate mappings are created only when
    `createIfMissing` is True, otherwise a missing hop raises KeyError.
    Writing through a non-mutable mapping raises TypeError.
    """
    parts = splitPath(path)

    current: Any = obj
    for part in parts[:-1]:
        if not isinstance(current, Mapping):
            raise TypeError(f"path segment '{part}' crosses a non-mapping value ({type(current).__name__})")
        if part in current:
            current = current[part]
            continue
        if createIfMissing and isinstance(current, MutableMapping):
            child: dict[str, Any] = {}
            current[part] = child
            current = child
            continue
        raise KeyError(f"path segment '{part}' not found in mapping")

    if not isinstance(current, MutableMapping):
        raise TypeError(f"Cannot write '{parts[-1]}' into read-only value ({type(current).__name__})")
    current[parts[-1]] = value



def deleteByPath(obj: MutableMapping[str, Any], path: str, *, pruneEmptyParents: bool = True) -> bool:
    """
    Deletes the value at `path`. Returns True if something was removed.

    With pruneEmptyParents=True, mappings left empty by the removal are removed
    from their parents as well (the root mapping itself is never removed).
    """
    parts = splitPath(path)

    stack: list[tuple[MutableMapping[str, Any], str]] = []
    current: Any = obj
    for part in parts[:-1]:
        if isinstance(current, MutableMapping) and part in current:
            stack.append((current, part))
            current = current[part]
            continue
        return False

    last = parts[-1]
    if not isinstance(current, MutableMapping) or last not in current:
        return False
    del current[last]

    if pruneEmptyParents:
        for parent, key in reversed(stack):
            child = parent.get(key)
            if isinstance(child, MutableMapping) and len(child) == 0:
                del parent[key]
            else:
                break

    return True
