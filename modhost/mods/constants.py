# modhost/mods/constants.py
from __future__ import annotations

__all__ = [
    "MANIFEST_NAMES", "SCRIPTS_DIR", "BUNDLES_DIR",
    "DEFAULT_SOURCE_SUFFIXES", "ENTRY_POINT_NAME", "ENTRY_POINT_ATTR",
    "COMPILED_MODULE_PREFIX",
]



# Package metadata file, first match wins.
MANIFEST_NAMES: tuple[str, ...] = ("mod.json5", "mod.json")

# Subdirectories of a package's install path.
SCRIPTS_DIR = "Scripts"
BUNDLES_DIR = "Bundles"

DEFAULT_SOURCE_SUFFIXES: tuple[str, ...] = (".py",)

# Reserved entry-point class name, used when the unit does not designate one.
ENTRY_POINT_NAME = "ScriptMain"
# Module-level attribute a unit may set (class or class name) to designate its entry point.
ENTRY_POINT_ATTR = "__entrypoint__"

COMPILED_MODULE_PREFIX = "modhost.mods.compiled"
