# modhost/cli.py
from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from typing import Any

from modhost.config.settings import ModHostSettings, buildConfigStore
from modhost.core.logging import configureLogging
from modhost.mods.assets import FileAssetStore
from modhost.mods.catalog import ModCatalog
from modhost.mods.compiler import PythonSourceCompiler
from modhost.mods.lifecycle import ModState
from modhost.mods.manager import ModManager
from modhost.mods.overlay import VirtualFileSystem

logger = logging.getLogger(__name__)

__all__ = ["buildParser", "main"]



def buildParser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modhost",
        description="Discover, load, start and tear down mod packages.",
    )
    parser.add_argument("--mods-root", default=None, help="Directory holding one sub-directory per package")
    parser.add_argument("--config", default=None, help="json5 config file (default: ~/.modhost/modhost.json5)")
    parser.add_argument("--activate", nargs="*", default=None, metavar="NAME",
                        help="Activate these packages instead of reading the activation file")
    parser.add_argument("--all", action="store_true", help="Activate every discovered package")
    parser.add_argument("--save-activation", action="store_true",
                        help="Write the resulting activation set back to the activation file")
    parser.add_argument("--no-host-api", action="store_true", help="Compile scripts without import access")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    return parser



def main(argv: Sequence[str] | None = None) -> int:
    args = buildParser().parse_args(argv)

    overrides: dict[str, Any] = {}
    if args.mods_root is not None:
        overrides["mods.root"] = args.mods_root
    if args.no_host_api:
        overrides["mods.allowHostApi"] = False

    store = buildConfigStore(configFile=args.config, overrides=overrides)
    configureLogging(store, level=args.log_level)
    settings = ModHostSettings.fromStore(store)

    catalog = ModCatalog(settings.modsRoot)
    entries = catalog.discover()

    if args.all:
        catalog.activate(entry.name for entry in entries)
    elif args.activate is not None:
        unknown = [name for name in args.activate if name not in catalog]
        for name in unknown:
            logger.warning("Unknown mod '%s' ignored", name)
        catalog.activate(name for name in args.activate if name in catalog)
    else:
        catalog.loadActivation(settings.effectiveActivationFile)

    if args.save_activation:
        catalog.saveActivation(settings.effectiveActivationFile)

    overlay = VirtualFileSystem()
    with FileAssetStore(maxWorkers=settings.bundleWorkers) as assetStore:
        manager = ModManager(
            catalog,
            overlay=overlay,
            compiler=PythonSourceCompiler(),
            assetStore=assetStore,
            settings=settings,
        )
        try:
            loadStates = manager.loadAll()
            manager.startAll()

            failedStates = {ModState.FAILED, ModState.START_FAILED}
            failures = 0
            for entry in catalog.allEntries():
                engine = manager.engine(entry.name)
                state = engine.state.value if engine is not None else "-"
                missing = ", ".join(sorted(entry.missingDependencies))
                print(f"{entry.name:<32} {entry.status.value:<11} {state:<13} {missing}".rstrip())
                if loadStates.get(entry.name) is ModState.FAILED or (engine is not None and engine.state in failedStates):
                    failures += 1
        finally:
            manager.destroyAll()

    return 1 if failures else 0
