# modhost/mods/lifecycle.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from modhost.core.errors import ReactorScramError
from modhost.core.logging import logContext
from modhost.mods.assets import AssetStore
from modhost.mods.compiler import CodeCompiler, SourceText
from modhost.mods.constants import DEFAULT_SOURCE_SUFFIXES, SCRIPTS_DIR
from modhost.mods.descriptor import ModDescriptor, ModEntry
from modhost.mods.errors import CompileError, InstantiationError, MissingDependencyError, ModError
from modhost.mods.listener import ModLifecycleListener
from modhost.mods.overlay import AssetOverlay
from modhost.mods.package import ModPackage
from modhost.mods.resolver import DependencyResolver, EntryLookup

logger = logging.getLogger(__name__)

__all__ = ["ModState", "InitResult", "ModLifecycleEngine"]



class ModState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    FAILED = "failed"
    INITIALIZED = "initialized"
    STARTING = "starting"
    START_FAILED = "startFailed"
    STARTED = "started"
    DESTROYED = "destroyed"



_POST_INIT_STATES = frozenset({
    ModState.INITIALIZED,
    ModState.STARTING,
    ModState.START_FAILED,
    ModState.STARTED,
})



@dataclass(frozen=True, slots=True)
class InitResult:
    state: ModState
    missingDependencies: tuple[str, ...] = ()
    error: ModError | None = None

    @property
    def ok(self) -> bool:
        return self.state is ModState.INITIALIZED and self.error is None



def _noActiveMods(_name: str) -> ModEntry | None:
    return None



class ModLifecycleEngine:
    """
    Drives one package through init → start → destroy.

    Every collaborator is passed in; the engine never looks up process-wide
    state. Failures stay scoped to this package and are reported through
    logging, the returned InitResult and the listener.

    Overlay ownership:
      - init() registers the install path once dependencies are met, and
        keeps it registered even if compilation fails (assets still count).
      - destroy() removes it again, and is safe to call in any state.
    """

    def __init__(
        self,
        descriptor: ModDescriptor,
        *,
        overlay: AssetOverlay,
        compiler: CodeCompiler,
        assetStore: AssetStore,
        listener: ModLifecycleListener | None = None,
        allowHostApi: bool = True,
        sourceSuffixes: Iterable[str] = DEFAULT_SOURCE_SUFFIXES,
    ) -> None:
        self.descriptor = descriptor
        self.package = ModPackage(descriptor, assetStore)
        self._overlay = overlay
        self._compiler = compiler
        self._listener = listener or ModLifecycleListener()
        self._allowHostApi = allowHostApi
        self._sourceSuffixes = frozenset(suffix.lower() for suffix in sourceSuffixes)

        self._state = ModState.UNINITIALIZED
        self._overlayRegistered = False
        self._lastResult = InitResult(ModState.UNINITIALIZED)

    # ----- Introspection -----

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def state(self) -> ModState:
        return self._state

    @property
    def lastResult(self) -> InitResult:
        return self._lastResult

    @property
    def missingDependencies(self) -> tuple[str, ...]:
        return self._lastResult.missingDependencies

    @property
    def overlayRegistered(self) -> bool:
        return self._overlayRegistered

    # ----- Helpers -----

    def _notify(self, hook: str, *args: object) -> None:
        try:
            getattr(self._listener, hook)(self.package, *args)
        except Exception:
            logger.exception("Lifecycle listener %s failed for mod '%s'", hook, self.name)

    def _finishInit(self, result: InitResult) -> InitResult:
        self._state = result.state
        self._lastResult = result
        if result.ok:
            self._notify("onModInitialized", result)
        else:
            self._notify("onModFailed", result)
        return result

    def _collectSources(self) -> list[SourceText] | None:
        """
        Returns the package's source batch, or None when there is no Scripts
        directory. Files are taken in file-name order so every platform
        compiles the same batch.
        """
        scriptsPath = self.descriptor.installPath / SCRIPTS_DIR
        if not scriptsPath.is_dir():
            return None
        files = sorted(
            (item for item in scriptsPath.iterdir() if item.is_file() and item.suffix.lower() in self._sourceSuffixes),
            key=lambda item: item.name,
        )
        return [SourceText.read(item) for item in files]

    # ----- Phases -----

    def init(
        self,
        entries: Sequence[ModEntry] | None = None,
        *,
        activeLookup: EntryLookup | None = None,
    ) -> InitResult:
        """
        Checks dependencies, registers the overlay path and compiles sources.

        Dependencies are resolved against `entries` when given (bulk pass),
        otherwise against `activeLookup` (live registry). With neither, every
        declared dependency counts as missing.

        May be called again after FAILED, e.g. once a dependency was activated.
        Calling it after a successful init is a no-op.
        """
        if self._state is ModState.INITIALIZING:
            raise ReactorScramError(f"Re-entrant init() for mod '{self.name}'")
        if self._state in _POST_INIT_STATES:
            logger.debug("Mod '%s' is already initialized (%s)", self.name, self._state.value)
            return self._lastResult
        if self._state is ModState.DESTROYED:
            logger.warning("Mod '%s' was destroyed; init() ignored", self.name)
            return self._lastResult

        with logContext(modId=self.name, phase="init"):
            self._state = ModState.INITIALIZING

            if entries is not None:
                resolver = DependencyResolver.fromEntries(entries)
            else:
                resolver = DependencyResolver.fromActiveMods(activeLookup or _noActiveMods)

            missing = resolver.missingFor(self.descriptor.dependencies)
            if missing:
                for dep in missing:
                    logger.error("Mod '%s' is missing a dependency '%s'", self.name, dep)
                logger.error("Make sure all dependencies for mod '%s' are met.", self.name)
                return self._finishInit(InitResult(
                    ModState.FAILED,
                    missingDependencies=missing,
                    error=MissingDependencyError(self.name, missing),
                ))

            if not self._overlayRegistered:
                self._overlay.addSearchPath(self.descriptor.installPath)
                self._overlayRegistered = True

            try:
                sources = self._collectSources()
            except (OSError, UnicodeDecodeError) as err:
                logger.error("Cannot read sources of mod '%s': %s", self.name, err)
                return self._finishInit(InitResult(ModState.FAILED, error=CompileError(self.name, [str(err)])))

            if not sources:
                logger.info("Mod '%s' initialized (assets only)", self.name)
                return self._finishInit(InitResult(ModState.INITIALIZED))

            try:
                codeUnit = self._compiler.compile(self.name, sources, self._allowHostApi)
            except CompileError as err:
                logger.error("Code unit for mod '%s' couldn't be compiled: %s", self.name, "; ".join(err.diagnostics))
                return self._finishInit(InitResult(ModState.FAILED, error=err))
            except Exception as err:
                logger.exception("Compiler backend crashed on mod '%s'", self.name)
                failure = CompileError(self.name, [f"{type(err).__name__}: {err}"])
                return self._finishInit(InitResult(ModState.FAILED, error=failure))

            self.descriptor.codeUnit = codeUnit
            logger.info("Mod '%s' initialized (%d source file(s))", self.name, len(sources))
            return self._finishInit(InitResult(ModState.INITIALIZED))

    def start(self) -> ModState:
        """
        Instantiates the unit's entry-point type and calls its start(package)
        once. A package without code, without an entry type, or whose entry
        type cannot be constructed starts as a no-op.
        """
        if self._state is not ModState.INITIALIZED:
            logger.warning("Cannot start mod '%s' in state '%s'", self.name, self._state.value)
            return self._state

        with logContext(modId=self.name, phase="start"):
            self._state = ModState.STARTING
            try:
                self._runEntryPoint()
            except Exception:
                logger.exception("Mod '%s' failed during start()", self.name)
                self._state = ModState.START_FAILED
                return self._state

            self._state = ModState.STARTED
            self._notify("onModStarted")
            return self._state

    def _runEntryPoint(self) -> None:
        codeUnit = self.descriptor.codeUnit
        if codeUnit is None:
            return

        entryName = codeUnit.entryPointName
        # Only the first match is used
        entryType = next((typ for typ in codeUnit.enumerateTypes() if typ.name == entryName), None)
        if entryType is None:
            logger.debug("Mod '%s' has no entry point '%s'", self.name, entryName)
            return

        try:
            instance = codeUnit.instantiate(entryType.name)
        except InstantiationError as err:
            logger.warning("Mod '%s': %s; entry point skipped", self.name, err)
            return
        if instance is None:
            return

        startFn = getattr(instance, "start", None)
        if not callable(startFn):
            logger.warning("Entry point '%s' of mod '%s' has no start(package) method", entryType.name, self.name)
            return

        startFn(self.package)
        logger.info("Mod '%s' started entry point '%s'", self.name, entryType.name)

    def destroy(self) -> None:
        """Unregisters the overlay path. Safe in every state, including repeated calls."""
        if self._state is ModState.DESTROYED:
            return

        with logContext(modId=self.name, phase="destroy"):
            if self._overlayRegistered:
                self._overlay.removeSearchPath(self.descriptor.installPath)
                self._overlayRegistered = False
            self.descriptor.codeUnit = None
            self._state = ModState.DESTROYED
            logger.debug("Mod '%s' destroyed", self.name)
        self._notify("onModDestroyed")

    def __repr__(self) -> str:
        return f"ModLifecycleEngine(name={self.name!r}, state={self._state.value!r})"
