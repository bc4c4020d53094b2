import sys
from collections.abc import Callable
from pathlib import Path

import json5
import pytest

from modhost.mods.assets import FileAssetStore
from modhost.mods.compiler import PythonSourceCompiler
from modhost.mods.overlay import VirtualFileSystem



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



class RecordingOverlay(VirtualFileSystem):
    """VirtualFileSystem that also remembers every add/remove call."""

    def __init__(self) -> None:
        super().__init__()
        self.added: list[Path] = []
        self.removed: list[Path] = []

    def addSearchPath(self, path):
        self.added.append(Path(path))
        super().addSearchPath(path)

    def removeSearchPath(self, path):
        self.removed.append(Path(path))
        super().removeSearchPath(path)



@pytest.fixture()
def modsRoot(tmp_path: Path) -> Path:
    root = tmp_path / "Mods"
    root.mkdir()
    return root



@pytest.fixture()
def makeMod(modsRoot: Path) -> Callable[..., Path]:
    """
    Creates a package directory:
        makeMod("Foo", manifest={...}, scripts={"main.py": "..."}, bundles={"a.bin": b"..."})
    manifest=None writes no manifest at all.
    """
    def _make(
        name: str,
        *,
        manifest: dict | None = None,
        scripts: dict[str, str] | None = None,
        bundles: dict[str, bytes] | None = None,
    ) -> Path:
        modDir = modsRoot / name
        modDir.mkdir(parents=True, exist_ok=True)
        if manifest is not None:
            (modDir / "mod.json5").write_text(json5.dumps(manifest, indent=2), encoding="utf-8")
        if scripts is not None:
            scriptsDir = modDir / "Scripts"
            scriptsDir.mkdir(exist_ok=True)
            for fileName, text in scripts.items():
                (scriptsDir / fileName).write_text(text, encoding="utf-8")
        if bundles is not None:
            bundlesDir = modDir / "Bundles"
            bundlesDir.mkdir(exist_ok=True)
            for relPath, data in bundles.items():
                target = bundlesDir / relPath
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
        return modDir
    return _make



@pytest.fixture()
def overlay() -> RecordingOverlay:
    return RecordingOverlay()



@pytest.fixture()
def compiler() -> PythonSourceCompiler:
    return PythonSourceCompiler()



@pytest.fixture()
def assetStore():
    store = FileAssetStore(maxWorkers=1)
    yield store
    store.close()
