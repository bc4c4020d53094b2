# modhost/mods/errors.py
from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

__all__ = [
    "ModError",
    "ModNotFoundError",
    "DuplicateModError",
    "ManifestError",
    "MissingDependencyError",
    "CompileError",
    "InstantiationError",
    "ArchiveLoadError",
]



class ModError(RuntimeError):
    """Base class for mod loading errors."""

    def __init__(self, message: str, *, modName: str | None = None) -> None:
        super().__init__(message)
        self.modName: str | None = modName



class ModNotFoundError(ModError, KeyError):
    """Raised when the catalog has no package with the requested name."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""



class DuplicateModError(ModError):
    """Raised when a package name is registered twice without overwrite."""



class ManifestError(ModError):
    """Raised when a package manifest cannot be parsed or does not match its directory."""

    def __init__(self, message: str, *, modName: str | None = None, manifestPath: Path | None = None) -> None:
        super().__init__(message, modName=modName)
        self.manifestPath: Path | None = manifestPath



class MissingDependencyError(ModError):
    """One or more declared dependencies are not active."""

    def __init__(self, modName: str, missing: Iterable[str]) -> None:
        self.missing: tuple[str, ...] = tuple(missing)
        super().__init__(
            f"Mod '{modName}' is missing dependencies: {', '.join(self.missing)}",
            modName=modName,
        )



class CompileError(ModError):
    """A package's source batch failed to produce a code unit."""

    def __init__(self, unitName: str, diagnostics: Iterable[str]) -> None:
        self.diagnostics: tuple[str, ...] = tuple(diagnostics)
        detail = "; ".join(self.diagnostics) if self.diagnostics else "no diagnostics"
        super().__init__(f"Code unit for '{unitName}' couldn't be compiled: {detail}", modName=unitName)



class InstantiationError(ModError):
    """A type exported by a code unit could not be constructed."""

    def __init__(self, typeName: str, reason: str, *, modName: str | None = None) -> None:
        self.typeName = typeName
        super().__init__(f"Cannot instantiate '{typeName}': {reason}", modName=modName)



class ArchiveLoadError(ModError):
    """An archive could not be read by the asset store."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Failed to load archive '{path}': {reason}")
