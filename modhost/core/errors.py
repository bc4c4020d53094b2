# modhost/core/errors.py
from __future__ import annotations

__all__ = ["ReactorScramError"]



class ReactorScramError(Exception):
    """Raised when modhost violates a core invariant and hits the shutdown button."""
    pass
