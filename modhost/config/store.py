# modhost/config/store.py
from __future__ import annotations

import logging
from typing import Any

from .types import ConfigProvider

logger = logging.getLogger(__name__)

__all__ = ["ConfigStore"]



class ConfigStore:
    """
    Read-only view over stacked providers, bottom to top. A lookup returns the
    first non-None value starting from the topmost provider.
    """

    def __init__(self, providers: list[ConfigProvider], *, namespace: str = "modhost"):
        self.namespace = namespace
        self._providers = list(providers)
        logger.debug(
            "Config store '%s' layers: %s",
            namespace,
            ", ".join(type(provider).__name__ for provider in self._providers),
        )

    def get(self, key: str, default: Any = None) -> Any:
        for provider in reversed(self._providers): # Topmost first precedence
            value = provider.get(key)
            if value is not None:
                return value
        return default

    def getBool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if isinstance(value, bool):
            return value
        if value is None:
            return default
        return bool(value)
