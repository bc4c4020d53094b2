from .assets import ArchiveHandle, ArchiveRequest, AssetStore, FileAssetStore
from .catalog import ModCatalog
from .compiler import CodeCompiler, CodeUnit, PythonSourceCompiler, SourceText, TypeDescriptor
from .constants import BUNDLES_DIR, ENTRY_POINT_NAME, SCRIPTS_DIR
from .descriptor import ModDescriptor, ModEntry, ModEntryStatus
from .errors import (
    ArchiveLoadError,
    CompileError,
    DuplicateModError,
    InstantiationError,
    ManifestError,
    MissingDependencyError,
    ModError,
    ModNotFoundError,
)
from .lifecycle import InitResult, ModLifecycleEngine, ModState
from .listener import ModLifecycleListener
from .manager import ModManager
from .overlay import AssetOverlay, VirtualFileSystem
from .package import ModPackage, ModScript
from .resolver import DependencyResolver, dependencyOrder, findDependencyCycles

__all__ = [
    "ArchiveHandle",
    "ArchiveRequest",
    "AssetStore",
    "FileAssetStore",
    "ModCatalog",
    "CodeCompiler",
    "CodeUnit",
    "PythonSourceCompiler",
    "SourceText",
    "TypeDescriptor",
    "BUNDLES_DIR",
    "ENTRY_POINT_NAME",
    "SCRIPTS_DIR",
    "ModDescriptor",
    "ModEntry",
    "ModEntryStatus",
    "ArchiveLoadError",
    "CompileError",
    "DuplicateModError",
    "InstantiationError",
    "ManifestError",
    "MissingDependencyError",
    "ModError",
    "ModNotFoundError",
    "InitResult",
    "ModLifecycleEngine",
    "ModState",
    "ModLifecycleListener",
    "ModManager",
    "AssetOverlay",
    "VirtualFileSystem",
    "ModPackage",
    "ModScript",
    "DependencyResolver",
    "dependencyOrder",
    "findDependencyCycles",
]
