# modhost/mods/catalog.py
from __future__ import annotations
import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from threading import RLock

import json5
from pydantic import ValidationError

from modhost.mods.constants import MANIFEST_NAMES
from modhost.mods.descriptor import ModDescriptor, ModEntry, ModEntryStatus, validateEntryStatus
from modhost.mods.errors import DuplicateModError, ManifestError, ModNotFoundError
from modhost.mods.manifest import ModManifest

logger = logging.getLogger(__name__)

__all__ = ["ModCatalog", "findManifestPath", "loadManifest"]



def findManifestPath(modDir: Path) -> Path | None:
    for manifestName in MANIFEST_NAMES:
        candidate = modDir / manifestName
        if candidate.is_file():
            return candidate
    return None



def loadManifest(modDir: Path) -> ModManifest | None:
    """
    Returns the validated manifest of a package directory, or None when the
    directory has no manifest file.

    Raises ManifestError for unparseable or invalid manifests and for a
    declared name that differs from the directory name.
    """
    manifestPath = findManifestPath(modDir)
    if manifestPath is None:
        return None

    try:
        raw = json5.loads(manifestPath.read_text(encoding="utf-8"))
    except (OSError, ValueError) as err:
        raise ManifestError(f"Cannot parse '{manifestPath}': {err}", modName=modDir.name, manifestPath=manifestPath) from err

    if raw is None:
        raw = {}
    try:
        manifest = ModManifest.model_validate(raw)
    except ValidationError as err:
        raise ManifestError(f"Invalid manifest '{manifestPath}': {err}", modName=modDir.name, manifestPath=manifestPath) from err

    if manifest.name is not None and manifest.name != modDir.name:
        raise ManifestError(
            f"Manifest name '{manifest.name}' does not match directory '{modDir.name}'",
            modName=modDir.name,
            manifestPath=manifestPath,
        )
    return manifest



class ModCatalog:
    """
    Authoritative `name -> ModEntry` mapping for every known package.

    Iteration follows registration order, and discover() registers packages
    in case-insensitive directory-name order, so load order is reproducible.
    Writers are serialized by an RLock; reads of single entries may run
    concurrently.
    """

    def __init__(self, modsRoot: Path | str) -> None:
        self.modsRoot = Path(modsRoot)
        self._entries: dict[str, ModEntry] = {}
        self._lock = RLock()

    # ----- Discovery -----

    def _packageDirs(self) -> list[Path]:
        if not self.modsRoot.is_dir():
            logger.warning("Mods root '%s' does not exist; no packages discovered", self.modsRoot)
            return []
        dirs = [
            item for item in self.modsRoot.iterdir()
            if item.is_dir() and not item.name.startswith(".")
        ]
        dirs.sort(key=lambda item: (item.name.lower(), item.name))
        return dirs

    def discover(self) -> list[ModEntry]:
        """
        Scans the mods root and registers one INACTIVE entry per package
        directory. Directories with a broken manifest are skipped with a
        warning. Already known packages keep their entry and status.
        """
        found: list[ModEntry] = []
        with self._lock:
            for modDir in self._packageDirs():
                if modDir.name in self._entries:
                    found.append(self._entries[modDir.name])
                    continue
                try:
                    manifest = loadManifest(modDir)
                except ManifestError as err:
                    logger.warning("Skipping mod directory '%s': %s", modDir, err)
                    continue

                descriptor = ModDescriptor.fromManifest(modDir.name, self.modsRoot, manifest)
                found.append(self.register(descriptor))

        logger.info("Mods discovered: %d (root='%s')", len(found), self.modsRoot)
        return found

    # ----- Registration -----

    def register(
        self,
        descriptor: ModDescriptor,
        *,
        status: ModEntryStatus = ModEntryStatus.INACTIVE,
        missing: Iterable[str] = (),
        overwrite: bool = False,
    ) -> ModEntry:
        """
        Adds a package. A duplicate name raises DuplicateModError unless
        overwrite=True, in which case the entry is replaced in place and keeps
        its registration position.
        """
        entry = ModEntry(
            name=descriptor.name,
            descriptor=descriptor,
            status=status,
            missingDependencies=frozenset(missing),
        )
        with self._lock:
            if descriptor.name in self._entries and not overwrite:
                raise DuplicateModError(f"Mod '{descriptor.name}' is already registered", modName=descriptor.name)
            self._entries[descriptor.name] = entry
        logger.debug("Registered mod '%s' (status=%s)", descriptor.name, status.value)
        return entry

    # ----- Queries -----

    def get(self, name: str) -> ModEntry | None:
        return self._entries.get(name)

    def lookup(self, name: str) -> ModEntry:
        entry = self._entries.get(name)
        if entry is None:
            raise ModNotFoundError(f"Mod '{name}' is not in the catalog", modName=name)
        return entry

    def allEntries(self) -> list[ModEntry]:
        with self._lock:
            return list(self._entries.values())

    def activeNames(self) -> list[str]:
        return [entry.name for entry in self.allEntries() if entry.status is ModEntryStatus.ACTIVE]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ModEntry]:
        return iter(self.allEntries())

    # ----- Status -----

    def setStatus(self, name: str, status: ModEntryStatus, missing: Iterable[str] = ()) -> ModEntry:
        missingSet = validateEntryStatus(status, missing)
        with self._lock:
            entry = self.lookup(name)
            entry.status = status
            entry.missingDependencies = missingSet
        return entry

    def activate(self, names: Iterable[str]) -> None:
        for name in names:
            self.setStatus(name, ModEntryStatus.ACTIVE)

    # ----- Activation persistence -----

    def loadActivation(self, path: Path | str) -> list[str]:
        """
        Marks the packages listed in an activation file ({"active": [...]}) ACTIVE.
        Unknown names are logged and ignored. A missing file activates nothing.
        Returns the names that were activated.
        """
        path = Path(path)
        if not path.is_file():
            logger.debug("No activation file at '%s'", path)
            return []

        try:
            raw = json5.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as err:
            logger.warning("Ignoring unreadable activation file '%s': %s", path, err)
            return []

        names = raw.get("active", []) if isinstance(raw, dict) else []
        if not isinstance(names, list):
            logger.warning("Ignoring activation file '%s': 'active' must be a list", path)
            return []

        activated: list[str] = []
        with self._lock:
            for name in names:
                if not isinstance(name, str) or name not in self._entries:
                    logger.warning("Activation file lists unknown mod %r", name)
                    continue
                self.setStatus(name, ModEntryStatus.ACTIVE)
                activated.append(name)
        return activated

    def saveActivation(self, path: Path | str) -> None:
        """Writes the ACTIVE package names in registration order (atomic replace)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        out = json5.dumps({"active": self.activeNames()}, indent=2, quote_keys=True)

        tmpPath = path.with_suffix(path.suffix + ".tmp")
        with open(tmpPath, "w", encoding="utf-8") as fl:
            fl.write(out)
            fl.write("\n")
        os.replace(tmpPath, path)
        logger.debug("Saved activation of %d mod(s) to '%s'", len(self.activeNames()), path)
