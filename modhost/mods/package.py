# modhost/mods/package.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from modhost.core.logging import ModLogger, getModLogger
from modhost.mods.assets import ArchiveHandle, ArchiveRequest, AssetStore
from modhost.mods.constants import BUNDLES_DIR, SCRIPTS_DIR
from modhost.mods.descriptor import ModDescriptor

logger = logging.getLogger(__name__)

__all__ = ["ModPackage", "ModScript"]



class ModPackage:
    """
    Handle a package's entry point receives in start().

    Gives scripts their own paths, a logger and archive loading scoped to
    the package's Bundles directory.
    """

    def __init__(self, descriptor: ModDescriptor, assetStore: AssetStore) -> None:
        self.descriptor = descriptor
        self._assetStore = assetStore
        self.logger: ModLogger = getModLogger(descriptor.name)

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def installPath(self) -> Path:
        return self.descriptor.installPath

    @property
    def scriptsPath(self) -> Path:
        return self.installPath / SCRIPTS_DIR

    @property
    def bundlesPath(self) -> Path:
        return self.installPath / BUNDLES_DIR

    def getModPath(self) -> Path:
        """Returns the path to the mod."""
        return self.installPath

    def _bundlePath(self, relPath: Path | str) -> Path | None:
        bundles = self.bundlesPath
        if not bundles.is_dir():
            logger.debug("Mod '%s' has no %s directory; skipping load of '%s'", self.name, BUNDLES_DIR, relPath)
            return None
        rel = Path(relPath)
        if rel.is_absolute() or ".." in rel.parts:
            raise ValueError(f"Bundle path must be relative to '{bundles}': '{relPath}'")
        return bundles / rel

    def loadBundle(self, relPath: Path | str, crc: int = 0, offset: int = 0) -> ArchiveHandle | None:
        """
        Loads `<installPath>/Bundles/<relPath>` through the asset store.
        Returns None without touching the store when the package has no Bundles directory.
        """
        path = self._bundlePath(relPath)
        if path is None:
            return None
        return self._assetStore.loadArchive(path, crc, offset)

    def loadBundleAsync(self, relPath: Path | str, crc: int = 0, offset: int = 0) -> ArchiveRequest | None:
        """Async variant of loadBundle(); returns the store's request handle."""
        path = self._bundlePath(relPath)
        if path is None:
            return None
        return self._assetStore.loadArchiveAsync(path, crc, offset)

    def __repr__(self) -> str:
        return f"ModPackage(name={self.name!r}, installPath={str(self.installPath)!r})"



@runtime_checkable
class ModScript(Protocol):
    """Contract of a package's entry-point type."""

    def start(self, package: ModPackage) -> None: ...
