# modhost/core/logging/util.py
from __future__ import annotations

import logging
from typing import Any

__all__ = ["ModLogger", "getModLogger"]



class ModLogger:
    """
    Logger handed to package scripts as `package.logger`.

    Writes to "mods.<modId>" and tags every record with `modId`, so the
    formatters can show which package spoke even outside an engine phase.
    trace() is silent unless tracing was enabled for the package.
    """
    def __init__(self, modId: str, logger: logging.Logger, *, traceEnabled: bool = False) -> None:
        self.modId = modId
        self._log = logger
        self._traceEnabled = traceEnabled

    @property
    def name(self) -> str:
        return self._log.name

    def _emit(self, level: int, msg: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        if not self._log.isEnabledFor(level):
            return
        extra = dict(kwargs.pop("extra", None) or {})
        extra.setdefault("modId", self.modId)
        kwargs.setdefault("stacklevel", 3)
        self._log.log(level, msg, *args, extra=extra, **kwargs)

    def debug(self, msg: str, *args, **kwargs): self._emit(logging.DEBUG, msg, args, kwargs)
    def info(self, msg: str, *args, **kwargs): self._emit(logging.INFO, msg, args, kwargs)
    def warning(self, msg: str, *args, **kwargs): self._emit(logging.WARNING, msg, args, kwargs)
    def error(self, msg: str, *args, **kwargs): self._emit(logging.ERROR, msg, args, kwargs)

    # Aliases scripts tend to reach for
    log = info
    warn = warning

    def exception(self, msg: str, *args, **kwargs):
        kwargs.setdefault("exc_info", True)
        self._emit(logging.ERROR, msg, args, kwargs)

    def trace(self, msg: str, *args, **kwargs):
        if self._traceEnabled:
            self._emit(logging.DEBUG, "[TRACE] " + msg, args, kwargs)



def getModLogger(modId: str, *, traceEnabled: bool = False) -> ModLogger:
    modId = str(modId).strip()
    return ModLogger(modId, logging.getLogger(f"mods.{modId}"), traceEnabled=traceEnabled)
