# modhost/mods/resolver.py
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from modhost.mods.descriptor import ModDescriptor, ModEntry, ModEntryStatus

logger = logging.getLogger(__name__)

__all__ = [
    "EntryLookup",
    "DependencyResolver",
    "findDependencyCycles",
    "dependencyOrder",
]



EntryLookup = Callable[[str], "ModEntry | None"]



class DependencyResolver:
    """
    Decides whether each direct dependency of a package resolves to an ACTIVE entry.

    Two resolution contexts are supported:
      - fromEntries(): bulk pre-activation pass over catalog entries, using
        their recorded status.
      - fromActiveMods(): live pass against a running manager's registry of
        already-activated mods.

    Resolution is NOT transitive and NOT cycle-checked: only the listed names
    are looked up. Ordering packages is the caller's job (see dependencyOrder()).
    The resolver never mutates anything.
    """

    def __init__(self, resolve: EntryLookup) -> None:
        self._resolve = resolve

    @classmethod
    def fromEntries(cls, entries: Iterable[ModEntry]) -> DependencyResolver:
        byName: dict[str, ModEntry] = {}
        for entry in entries:
            # First wins, matching a first-match scan over the list
            byName.setdefault(entry.name, entry)
        return cls(byName.get)

    @classmethod
    def fromActiveMods(cls, activeLookup: EntryLookup) -> DependencyResolver:
        return cls(activeLookup)

    def missingFor(self, dependencies: Iterable[str]) -> tuple[str, ...]:
        """Names whose lookup is None or not ACTIVE, in declaration order, de-duplicated."""
        missing: list[str] = []
        for dep in dependencies:
            if dep in missing:
                continue
            entry = self._resolve(dep)
            if entry is None or entry.status is not ModEntryStatus.ACTIVE:
                missing.append(dep)
        return tuple(missing)

    def isSatisfied(self, dependencies: Iterable[str]) -> bool:
        return not self.missingFor(dependencies)



# ------------------------------------------------------------------ #
# Graph helpers used by bulk orchestration
# ------------------------------------------------------------------ #

def findDependencyCycles(descriptors: Sequence[ModDescriptor]) -> list[tuple[str, ...]]:
    """
    Returns every dependency cycle among the given packages: strongly connected
    components with more than one member, plus packages depending on themselves.

    Members of a cycle are listed in registration order and cycles are ordered
    by their first member, so the result is deterministic. Dependencies on
    packages outside `descriptors` are ignored.
    """
    position = {desc.name: idx for idx, desc in enumerate(descriptors)}
    graph = {
        desc.name: [dep for dep in desc.dependencies if dep in position]
        for desc in descriptors
    }

    # Tarjan's algorithm, iterative to stay clear of the recursion limit
    index: dict[str, int] = {}
    lowLink: dict[str, int] = {}
    onStack: set[str] = set()
    stack: list[str] = []
    components: list[list[str]] = []
    counter = 0

    for root in graph:
        if root in index:
            continue
        work: list[tuple[str, int]] = [(root, 0)]
        while work:
            node, childIdx = work.pop()
            if childIdx == 0:
                index[node] = lowLink[node] = counter
                counter += 1
                stack.append(node)
                onStack.add(node)

            children = graph[node]
            if childIdx < len(children):
                work.append((node, childIdx + 1))
                child = children[childIdx]
                if child not in index:
                    work.append((child, 0))
                elif child in onStack:
                    lowLink[node] = min(lowLink[node], index[child])
                continue

            if lowLink[node] == index[node]:
                component: list[str] = []
                while True:
                    member = stack.pop()
                    onStack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(component)
            if work:
                parent = work[-1][0]
                lowLink[parent] = min(lowLink[parent], lowLink[node])

    cycles: list[tuple[str, ...]] = []
    for component in components:
        if len(component) > 1 or component[0] in graph[component[0]]:
            cycles.append(tuple(sorted(component, key=position.__getitem__)))
    cycles.sort(key=lambda cycle: position[cycle[0]])
    return cycles



def dependencyOrder(descriptors: Sequence[ModDescriptor]) -> list[str]:
    """
    Stable topological order: a package comes after every dependency that is
    part of `descriptors`; ties keep registration order. Packages that cannot
    be ordered (cycles) are appended at the end in registration order.
    """
    position = {desc.name: idx for idx, desc in enumerate(descriptors)}
    pending = {
        desc.name: {dep for dep in desc.dependencies if dep in position and dep != desc.name}
        for desc in descriptors
    }

    ordered: list[str] = []
    placed: set[str] = set()
    progressed = True
    while progressed:
        progressed = False
        for desc in descriptors:
            name = desc.name
            if name in placed or not pending[name] <= placed:
                continue
            ordered.append(name)
            placed.add(name)
            progressed = True
            # Restart from the top so earlier-registered packages win ties
            break

    leftovers = [desc.name for desc in descriptors if desc.name not in placed]
    if leftovers:
        logger.debug("Packages left unordered by dependency cycles: %s", leftovers)
    return ordered + leftovers
