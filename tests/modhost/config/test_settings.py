# tests/modhost/config/test_settings.py
from __future__ import annotations
from pathlib import Path

import pydantic
import pytest

from modhost.config import settings as settingsModule
from modhost.config.settings import ModHostSettings, buildConfigStore, loadSettings


@pytest.fixture(autouse=True)
def isolateUserConfig(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settingsModule, "USER_CONFIG_PATH", tmp_path / "home" / "modhost.json5")


def test_defaults() -> None:
    settings = loadSettings()

    assert settings.modsRoot == Path("Mods")
    assert settings.sourceSuffixes == (".py",)
    assert settings.allowHostApi is True
    assert settings.bundleWorkers == 2
    assert settings.effectiveActivationFile == Path("Mods") / "active.json5"


def test_configFileAndOverrides(tmp_path: Path) -> None:
    configFile = tmp_path / "modhost.json5"
    configFile.write_text(
        "{ mods: { root: 'FromFile', activationFile: 'act.json5', sourceSuffixes: ['PY', '.pyw', 'py'] } }",
        encoding="utf-8",
    )

    store = buildConfigStore(configFile=configFile, overrides={"mods.root": "FromCli", "mods.allowHostApi": False})
    settings = ModHostSettings.fromStore(store)

    assert settings.modsRoot == Path("FromCli")
    assert settings.activationFile == Path("act.json5")
    assert settings.effectiveActivationFile == Path("act.json5")
    assert settings.sourceSuffixes == (".py", ".pyw")
    assert settings.allowHostApi is False


def test_missingExplicitConfigFile_fallsBackToDefaults(tmp_path: Path) -> None:
    store = buildConfigStore(configFile=tmp_path / "absent.json5")

    assert ModHostSettings.fromStore(store).modsRoot == Path("Mods")


def test_userConfigIsPickedUp(tmp_path: Path) -> None:
    userFile = tmp_path / "home" / "modhost.json5"
    userFile.parent.mkdir()
    userFile.write_text("{ mods: { bundleWorkers: 8 } }", encoding="utf-8")

    assert loadSettings().bundleWorkers == 8


def test_validation() -> None:
    with pytest.raises(pydantic.ValidationError):
        ModHostSettings(bundleWorkers=0)
    with pytest.raises(pydantic.ValidationError):
        ModHostSettings(unknown=True)  # type: ignore[call-arg]

    settings = ModHostSettings(sourceSuffixes=".cs")
    assert settings.sourceSuffixes == (".cs",)
    with pytest.raises(pydantic.ValidationError):
        settings.allowHostApi = False  # type: ignore[misc]
