# modhost/mods/overlay.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from threading import RLock
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

__all__ = ["AssetOverlay", "VirtualFileSystem"]



@runtime_checkable
class AssetOverlay(Protocol):
    """
    Prioritized virtual file-resolution search order shared by the host.

    Both operations must be idempotent: adding a registered path again must
    not duplicate it, removing an unknown path must be a no-op.
    """

    def addSearchPath(self, path: Path | str) -> None: ...

    def removeSearchPath(self, path: Path | str) -> None: ...



def _normalize(path: Path | str) -> Path:
    return Path(path).resolve(strict=False)



class VirtualFileSystem(AssetOverlay):
    """
    Resolves relative asset paths against overlay paths first (most recently
    added wins), then against the base roots in the order given.
    """

    def __init__(self, baseRoots: Iterable[Path | str] = ()) -> None:
        self._baseRoots: list[Path] = []
        for root in baseRoots:
            norm = _normalize(root)
            if norm not in self._baseRoots:
                self._baseRoots.append(norm)
        # Registration order, oldest first
        self._overlays: list[Path] = []
        self._lock = RLock()

    def addSearchPath(self, path: Path | str) -> None:
        norm = _normalize(path)
        with self._lock:
            if norm in self._overlays:
                logger.debug("Search path '%s' already registered", norm)
                return
            self._overlays.append(norm)
        logger.debug("Added search path '%s'", norm)

    def removeSearchPath(self, path: Path | str) -> None:
        norm = _normalize(path)
        with self._lock:
            if norm not in self._overlays:
                return
            self._overlays.remove(norm)
        logger.debug("Removed search path '%s'", norm)

    def hasSearchPath(self, path: Path | str) -> bool:
        with self._lock:
            return _normalize(path) in self._overlays

    def overlayPaths(self) -> list[Path]:
        """Overlay paths in registration order."""
        with self._lock:
            return list(self._overlays)

    def searchPaths(self) -> list[Path]:
        """Full lookup order: newest overlay first, then base roots."""
        with self._lock:
            return list(reversed(self._overlays)) + list(self._baseRoots)

    def resolve(self, relPath: Path | str) -> Path | None:
        rel = Path(relPath)
        if rel.is_absolute() or ".." in rel.parts:
            raise ValueError(f"Asset path must be relative and stay inside its root: '{relPath}'")
        for root in self.searchPaths():
            candidate = root / rel
            if candidate.exists():
                return candidate
        return None

    def exists(self, relPath: Path | str) -> bool:
        return self.resolve(relPath) is not None
