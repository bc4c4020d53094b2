# modhost/config/types.py
from __future__ import annotations
from typing import Any, Protocol, runtime_checkable

__all__ = ["ConfigProvider"]



@runtime_checkable
class ConfigProvider(Protocol):
    """One layer of configuration. Reads return None when the key is absent."""

    def get(self, key: str) -> Any | None: ...

    def to_dict(self) -> dict[str, Any]: ...
