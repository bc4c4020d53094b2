# modhost/mods/listener.py
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modhost.mods.lifecycle import InitResult
    from modhost.mods.package import ModPackage

__all__ = ["ModLifecycleListener"]



class ModLifecycleListener:
    """
    Optional hook interface for systems that want to observe mod lifecycle.

    Implementations may override any subset of methods. All methods have
    safe no-op defaults. Exceptions raised by a listener are logged by the
    engine and never change the package's state.
    """

    def onModInitialized(self, package: ModPackage, result: InitResult) -> None:
        """
        Called when init() finished successfully: dependencies met, overlay
        path registered and sources (if any) compiled.
        """
        return

    def onModFailed(self, package: ModPackage, result: InitResult) -> None:
        """
        Called when init() failed. `result.error` tells whether dependencies
        were missing (no overlay registered) or compilation failed (overlay
        stays registered).
        """
        return

    def onModStarted(self, package: ModPackage) -> None:
        """Called after start() completed, whether or not an entry point ran."""
        return

    def onModDestroyed(self, package: ModPackage) -> None:
        return
