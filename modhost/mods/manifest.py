# modhost/mods/manifest.py
from __future__ import annotations
from pydantic import BaseModel, Field, ConfigDict, field_validator

__all__ = ["ModManifest"]



class ModManifest(BaseModel):
    """Represents a validated mod.json5 manifest."""
    model_config = ConfigDict(extra="forbid")

    # Must match the package directory name when given
    name: str | None = None
    author: str = ""
    version: str = ""
    gameVersion: str = ""
    description: str | None = None
    dependencies: list[str] = Field(default_factory=list)

    @field_validator("dependencies")
    @classmethod
    def _stripDependencies(cls, value: list[str]) -> list[str]:
        out: list[str] = []
        for dep in value:
            name = dep.strip()
            if not name:
                raise ValueError("dependency names must be non-empty")
            out.append(name)
        return out
