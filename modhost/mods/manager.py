# modhost/mods/manager.py
from __future__ import annotations

import logging

from modhost.config.settings import ModHostSettings
from modhost.mods.assets import AssetStore
from modhost.mods.catalog import ModCatalog
from modhost.mods.compiler import CodeCompiler
from modhost.mods.descriptor import ModEntry, ModEntryStatus
from modhost.mods.lifecycle import InitResult, ModLifecycleEngine, ModState
from modhost.mods.listener import ModLifecycleListener
from modhost.mods.overlay import AssetOverlay
from modhost.mods.resolver import DependencyResolver, dependencyOrder, findDependencyCycles

logger = logging.getLogger(__name__)

__all__ = ["ModManager"]



class ModManager:
    """
    Bulk orchestration over a catalog plus the live registry of activated mods.

    The manager is the "caller" the lifecycle engine expects: it decides the
    load order and serializes init/start/destroy. Collaborators are injected.

    Typical run:
        manager.loadAll()     # prepare statuses, init ACTIVE packages in dependency order
        manager.startAll()
        ...
        manager.destroyAll()
    """

    def __init__(
        self,
        catalog: ModCatalog,
        *,
        overlay: AssetOverlay,
        compiler: CodeCompiler,
        assetStore: AssetStore,
        settings: ModHostSettings | None = None,
        listener: ModLifecycleListener | None = None,
    ) -> None:
        self.catalog = catalog
        self.settings = settings or ModHostSettings(modsRoot=catalog.modsRoot)
        self._overlay = overlay
        self._compiler = compiler
        self._assetStore = assetStore
        self._listener = listener

        self._engines: dict[str, ModLifecycleEngine] = {}
        # Load order of engines that initialized
        self._loadOrder: list[str] = []
        self._active: dict[str, ModEntry] = {}

    # ----- Live registry -----

    def getActiveMod(self, name: str) -> ModEntry | None:
        return self._active.get(name)

    def activeMods(self) -> list[ModEntry]:
        return [self._active[name] for name in self._loadOrder if name in self._active]

    def engine(self, name: str) -> ModLifecycleEngine | None:
        return self._engines.get(name)

    def engines(self) -> list[ModLifecycleEngine]:
        return list(self._engines.values())

    # ----- Bulk pass -----

    def prepare(self) -> dict[str, tuple[str, ...]]:
        """
        Pre-activation pass over the catalog.

        ACTIVE packages on a dependency cycle, or with a dependency that is not
        ACTIVE, become INCOMPLETE. Repeats until nothing changes so that a
        demoted package also demotes its dependents. Returns {name: missing}
        for every package demoted.
        """
        demoted: dict[str, tuple[str, ...]] = {}

        activeDescs = [entry.descriptor for entry in self.catalog.allEntries() if entry.isActive]
        for cycle in findDependencyCycles(activeDescs):
            logger.error("Dependency cycle between mods: %s", " -> ".join(cycle + cycle[:1]))
            for name in cycle:
                others = tuple(member for member in cycle if member != name) or (name,)
                self.catalog.setStatus(name, ModEntryStatus.INCOMPLETE, others)
                demoted[name] = others

        changed = True
        while changed:
            changed = False
            entries = self.catalog.allEntries()
            resolver = DependencyResolver.fromEntries(entries)
            for entry in entries:
                if not entry.isActive:
                    continue
                missing = resolver.missingFor(entry.descriptor.dependencies)
                if missing:
                    logger.warning("Mod '%s' is incomplete, missing: %s", entry.name, ", ".join(missing))
                    self.catalog.setStatus(entry.name, ModEntryStatus.INCOMPLETE, missing)
                    demoted[entry.name] = missing
                    changed = True
        return demoted

    def _engineFor(self, name: str) -> ModLifecycleEngine:
        engine = self._engines.get(name)
        if engine is None or engine.state is ModState.DESTROYED:
            engine = ModLifecycleEngine(
                self.catalog.lookup(name).descriptor,
                overlay=self._overlay,
                compiler=self._compiler,
                assetStore=self._assetStore,
                listener=self._listener,
                allowHostApi=self.settings.allowHostApi,
                sourceSuffixes=self.settings.sourceSuffixes,
            )
            self._engines[name] = engine
        return engine

    def loadMod(self, name: str) -> InitResult:
        """
        Live-context init of one package: its dependencies must already be in
        the active registry. On success the package joins the registry.
        """
        engine = self._engineFor(name)
        result = engine.init(activeLookup=self.getActiveMod)
        if result.ok:
            if name not in self._loadOrder:
                self._loadOrder.append(name)
            # A live-loaded package counts as activated for its dependents
            self._active[name] = self.catalog.setStatus(name, ModEntryStatus.ACTIVE)
        return result

    def loadAll(self) -> dict[str, ModState]:
        """Runs prepare(), then initializes every ACTIVE package in dependency order."""
        self.prepare()

        activeDescs = [entry.descriptor for entry in self.catalog.allEntries() if entry.isActive]
        states: dict[str, ModState] = {}
        for name in dependencyOrder(activeDescs):
            try:
                states[name] = self.loadMod(name).state
            except Exception:
                logger.exception("Failed to load mod '%s'", name)
                states[name] = ModState.FAILED

        failed = [name for name, state in states.items() if state is ModState.FAILED]
        logger.info("Mods loaded: %d ok, %d failed", len(states) - len(failed), len(failed))
        return states

    def startAll(self) -> dict[str, ModState]:
        states: dict[str, ModState] = {}
        for name in list(self._loadOrder):
            engine = self._engines[name]
            if engine.state is ModState.INITIALIZED:
                states[name] = engine.start()
            else:
                states[name] = engine.state
        return states

    def destroyAll(self) -> None:
        """Destroys every engine (initialized or not) in reverse load order."""
        order = list(self._loadOrder) + [name for name in self._engines if name not in self._loadOrder]
        for name in reversed(order):
            self._engines[name].destroy()
        self._active.clear()
        self._loadOrder.clear()
