# modhost/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers
from pathlib import Path

from modhost.config.store import ConfigStore
from .formatters import DevFormatter, JsonFormatter
from .filters import RecurringSuppressFilter

__all__ = ["configureLogging"]



def _levelOf(name: object, default: int) -> int:
    level = getattr(logging, str(name).upper(), None)
    return level if isinstance(level, int) else default



def configureLogging(store: ConfigStore, *, level: str | None = None) -> None:
    """
    Initiate the global logging configuration from the config store.

      - Console logs at `logging.level`, pretty (DevFormatter) or JSON when `logging.json` is set
      - Optional JSON file log with rotation when `logging.file` is set
      - Optional recurring suppression (`logging.suppressRecurring.enabled`)

    `level` overrides `logging.level` (the CLI passes --log-level here).
    """
    rootLevel = _levelOf(level if level is not None else store.get("logging.level", "INFO"), logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    handlers: list[logging.Handler] = []

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(JsonFormatter() if store.getBool("logging.json", False) else DevFormatter())
    handlers.append(consoleHandler)

    logFile = store.get("logging.file")
    if logFile:
        logPath = Path(str(logFile))
        logPath.parent.mkdir(parents=True, exist_ok=True)
        fileHandler = logging.handlers.RotatingFileHandler(
            logPath,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        handlers.append(fileHandler)

    if store.getBool("logging.suppressRecurring.enabled", False):
        suppressFilter = RecurringSuppressFilter(
            windowSeconds=int(store.get("logging.suppressRecurring.windowSeconds", 60)),
            maxPerWindow=int(store.get("logging.suppressRecurring.maxPerWindow", 5)),
            summaryLevel=_levelOf(store.get("logging.suppressRecurring.summaryLevel", "INFO"), logging.INFO),
        )
        for handler in handlers:
            handler.addFilter(suppressFilter)

    for handler in handlers:
        root.addHandler(handler)
