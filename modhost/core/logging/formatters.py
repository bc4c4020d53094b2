# modhost/core/logging/formatters.py
from __future__ import annotations

import json
import logging

from .context import getLogContext

__all__ = ["JsonFormatter", "DevFormatter"]



def _modTag(record: logging.LogRecord) -> tuple[str | None, str | None]:
    """(modId, phase) for a record: ModLogger extras first, then the active log context."""
    ctx = getLogContext() or {}
    modId = getattr(record, "modId", None) or ctx.get("modId")
    phase = ctx.get("phase")
    return (str(modId) if modId else None, str(phase) if phase else None)



class JsonFormatter(logging.Formatter):
    """One JSON object per line; used for the rotating log file."""
    def format(self, record: logging.LogRecord) -> str:
        modId, phase = _modTag(record)
        payload: dict[str, object] = {
            "ts": int(record.created * 1000),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if modId:
            payload["mod"] = modId
        if phase:
            payload["phase"] = phase
        extraCtx = {key: value for key, value in (getLogContext() or {}).items() if key not in ("modId", "phase")}
        if extraCtx:
            payload["ctx"] = extraCtx
        payload["thread"] = record.threadName

        if record.exc_info:
            excType, excValue, _tb = record.exc_info
            try:
                payload["exc"] = {
                    "type": getattr(excType, "__name__", "Error"),
                    "message": str(excValue),
                    "stack": self.formatException(record.exc_info),
                }
            except Exception:
                payload["exc"] = {"type": "Error", "message": "format failed", "stack": None}

        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str)



class DevFormatter(logging.Formatter):
    """
    Console formatter:
        WARNING modhost.mods.lifecycle: Mod 'Foo' is missing a dependency 'Bar' [Foo/init]
    """
    def format(self, record: logging.LogRecord) -> str:
        text = f"{record.levelname:<7} {record.name}: {record.getMessage()}"
        tag = "/".join(part for part in _modTag(record) if part)
        if tag:
            text += f" [{tag}]"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        if record.stack_info:
            text += "\n" + self.formatStack(record.stack_info)
        return text
