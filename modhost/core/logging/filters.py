# modhost/core/logging/filters.py
from __future__ import annotations
import logging
import threading
import time
from collections import deque

from .context import getLogContext

__all__ = ["RecurringSuppressFilter"]

# Upper bound for normalized message keys
MAX_KEY_LEN = 512

_SuppressKey = tuple[str, int, str, str]



class RecurringSuppressFilter(logging.Filter):
    """
    Lets at most `maxPerWindow` identical records through per sliding window of
    `windowSeconds`; the rest are dropped and counted. When the same record is
    allowed again, a "Suppressed N repeated logs" summary goes out first.

    Records are identical when logger, level, mod and whitespace-squashed
    message match. The mod is part of the key, so the same failure in two
    packages is never folded into one.
    """
    def __init__(
            self,
            *,
            windowSeconds: int = 60,
            maxPerWindow: int = 5,
            summaryLevel: int = logging.INFO,
    ):
        super().__init__()
        self.windowSeconds = max(1, int(windowSeconds))
        self.maxPerWindow = max(1, int(maxPerWindow))
        self.summaryLevel = int(summaryLevel)

        self._seen: dict[_SuppressKey, deque[float]] = {}
        self._dropped: dict[_SuppressKey, int] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _keyOf(record: logging.LogRecord) -> _SuppressKey:
        try:
            msg = record.getMessage()
        except Exception:
            msg = str(record.msg)
        text = " ".join(str(msg).split())[:MAX_KEY_LEN]
        modId = getattr(record, "modId", None) or (getLogContext() or {}).get("modId") or ""
        return (record.name, record.levelno, str(modId), text)

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "_noRecurringSuppress", False):
            return True

        key = self._keyOf(record)
        now = time.monotonic()
        with self._lock:
            stamps = self._seen.setdefault(key, deque())
            while stamps and stamps[0] < now - self.windowSeconds:
                stamps.popleft()
            stamps.append(now)
            if len(stamps) > self.maxPerWindow:
                self._dropped[key] = self._dropped.get(key, 0) + 1
                return False
            dropped = self._dropped.pop(key, 0)

        if dropped:
            loggerName, _levelno, modId, text = key
            # Marked so this filter lets it through
            logging.getLogger(loggerName).log(
                self.summaryLevel,
                "Suppressed %d repeated logs: %s",
                dropped,
                text,
                extra={"_noRecurringSuppress": True, "modId": modId or None},
            )
        return True
