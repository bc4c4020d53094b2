# modhost/mods/descriptor.py
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from modhost.mods.manifest import ModManifest

if TYPE_CHECKING:
    from modhost.mods.compiler import CodeUnit

__all__ = [
    "ModDescriptor",
    "ModEntryStatus",
    "ModEntry",
    "validateEntryStatus",
]



@dataclass(eq=False, slots=True)
class ModDescriptor:
    """
    Static identity and metadata of one package.

    `installPath` is derived from `modsRoot` and `name` on every access and is
    never stored. `codeUnit` stays None until the lifecycle engine compiles the
    package's sources; the engine is the only writer.
    """
    name: str
    modsRoot: Path
    author: str = ""
    version: str = ""
    gameVersion: str = ""
    description: str | None = None
    # Declaration order is kept, duplicates are dropped
    dependencies: tuple[str, ...] = ()
    codeUnit: CodeUnit | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.name or self.name != self.name.strip() or any(sep in self.name for sep in ("/", "\\")):
            raise ValueError(f"Invalid package name {self.name!r}")
        self.modsRoot = Path(self.modsRoot)
        self.dependencies = tuple(dict.fromkeys(self.dependencies))

    @property
    def installPath(self) -> Path:
        return self.modsRoot / self.name

    @classmethod
    def fromManifest(cls, name: str, modsRoot: Path, manifest: ModManifest | None) -> ModDescriptor:
        if manifest is None:
            return cls(name=name, modsRoot=modsRoot)
        return cls(
            name=name,
            modsRoot=modsRoot,
            author=manifest.author,
            version=manifest.version,
            gameVersion=manifest.gameVersion,
            description=manifest.description,
            dependencies=tuple(manifest.dependencies),
        )



class ModEntryStatus(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    INCOMPLETE = "incomplete"   # Activated by the user, but dependencies are not met



def validateEntryStatus(status: ModEntryStatus, missing: Iterable[str]) -> frozenset[str]:
    """
    Returns the missing set as a frozenset after checking it against the status:
    INCOMPLETE needs at least one missing dependency, every other status needs none.
    """
    missingSet = frozenset(missing)
    if status is ModEntryStatus.INCOMPLETE and not missingSet:
        raise ValueError("INCOMPLETE status requires at least one missing dependency")
    if status is not ModEntryStatus.INCOMPLETE and missingSet:
        raise ValueError(f"{status.name} status cannot carry missing dependencies: {sorted(missingSet)}")
    return missingSet



@dataclass(slots=True)
class ModEntry:
    """Catalog record binding a descriptor to its activation status."""
    name: str
    descriptor: ModDescriptor
    status: ModEntryStatus = ModEntryStatus.INACTIVE
    missingDependencies: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if self.name != self.descriptor.name:
            raise ValueError(f"Entry name {self.name!r} does not match descriptor {self.descriptor.name!r}")
        self.missingDependencies = validateEntryStatus(self.status, self.missingDependencies)

    @property
    def isActive(self) -> bool:
        return self.status is ModEntryStatus.ACTIVE
