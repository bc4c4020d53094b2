from __future__ import annotations

from .context import setLogContext, clearLogContext, getLogContext, logContext
from .setup import configureLogging
from .util import ModLogger, getModLogger

__all__ = [
    "configureLogging",
    "getModLogger",
    "ModLogger",
    "setLogContext",
    "clearLogContext",
    "getLogContext",
    "logContext",
]
