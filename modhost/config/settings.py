# modhost/config/settings.py
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .providers import DefaultsProvider, FileProvider, OverrideProvider
from .store import ConfigStore

logger = logging.getLogger(__name__)

__all__ = [
    "SETTINGS_DEFAULTS", "USER_CONFIG_PATH", "ModHostSettings",
    "buildConfigStore", "loadSettings",
]



SETTINGS_DEFAULTS: dict[str, Any] = {
    "mods": {
        "root": "Mods",
        "activationFile": None, # <mods.root>/active.json5 when unset
        "sourceSuffixes": [".py"],
        "allowHostApi": True,
        "bundleWorkers": 2,
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "json": False,
        "suppressRecurring": {
            "enabled": False,
            "windowSeconds": 60,
            "maxPerWindow": 5,
            "summaryLevel": "INFO",
        },
    },
}

USER_CONFIG_PATH = Path(os.path.expanduser("~/.modhost/modhost.json5"))



class ModHostSettings(BaseModel):
    """Typed view over the mod-related part of the merged configuration."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    modsRoot: Path = Path("Mods")
    activationFile: Path | None = None
    sourceSuffixes: tuple[str, ...] = (".py",)
    allowHostApi: bool = True
    bundleWorkers: int = Field(default=2, ge=1)

    @field_validator("sourceSuffixes", mode="before")
    @classmethod
    def _normalizeSuffixes(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            value = [value]
        out: list[str] = []
        for suffix in value or ():
            text = str(suffix).strip().lower()
            if not text:
                continue
            if not text.startswith("."):
                text = "." + text
            if text not in out:
                out.append(text)
        return tuple(out)

    @property
    def effectiveActivationFile(self) -> Path:
        return self.activationFile if self.activationFile is not None else self.modsRoot / "active.json5"

    @classmethod
    def fromStore(cls, store: ConfigStore) -> ModHostSettings:
        raw = {
            "modsRoot": store.get("mods.root", "Mods"),
            "activationFile": store.get("mods.activationFile"),
            "sourceSuffixes": store.get("mods.sourceSuffixes", [".py"]),
            "allowHostApi": store.getBool("mods.allowHostApi", True),
            "bundleWorkers": store.get("mods.bundleWorkers", 2),
        }
        return cls.model_validate(raw)



def buildConfigStore(
    *,
    configFile: Path | str | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ConfigStore:
    """
    Layers, bottom to top: shipped defaults, user/explicit config file, runtime overrides.

    When configFile is None the user file at USER_CONFIG_PATH is used if it exists.
    """
    path = Path(configFile) if configFile is not None else USER_CONFIG_PATH
    if configFile is not None and not path.exists():
        logger.warning("Config file '%s' not found, continuing with defaults", path)

    override = OverrideProvider()
    for key, value in (overrides or {}).items():
        override.set(key, value)

    return ConfigStore([
        DefaultsProvider(SETTINGS_DEFAULTS),
        FileProvider(path),
        override,
    ])



def loadSettings(store: ConfigStore | None = None) -> ModHostSettings:
    return ModHostSettings.fromStore(store if store is not None else buildConfigStore())
