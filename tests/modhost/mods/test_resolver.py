# tests/modhost/mods/test_resolver.py
from __future__ import annotations
from pathlib import Path

from modhost.mods.descriptor import ModDescriptor, ModEntry, ModEntryStatus
from modhost.mods.resolver import DependencyResolver, dependencyOrder, findDependencyCycles


ROOT = Path("/mods")


def _desc(name, *deps):
    return ModDescriptor(name=name, modsRoot=ROOT, dependencies=deps)


def _entry(name, status=ModEntryStatus.ACTIVE, missing=()):
    return ModEntry(name=name, descriptor=_desc(name), status=status, missingDependencies=frozenset(missing))


# ----------------------------
# DependencyResolver
# ----------------------------

def test_missingFor_keepsDeclarationOrderAndDeduplicates():
    resolver = DependencyResolver.fromEntries([
        _entry("A"),
        _entry("B", ModEntryStatus.INACTIVE),
        _entry("C", ModEntryStatus.INCOMPLETE, missing=["X"]),
    ])

    assert resolver.missingFor(["C", "A", "Z", "B", "C"]) == ("C", "Z", "B")
    assert resolver.missingFor([]) == ()
    assert resolver.isSatisfied(["A"])
    assert not resolver.isSatisfied(["A", "B"])


def test_fromEntries_firstEntryWins():
    resolver = DependencyResolver.fromEntries([_entry("A", ModEntryStatus.INACTIVE), _entry("A")])

    assert resolver.missingFor(["A"]) == ("A",)


def test_fromActiveMods_usesLiveLookup():
    registry = {"A": _entry("A")}
    resolver = DependencyResolver.fromActiveMods(registry.get)

    assert resolver.missingFor(["A", "B"]) == ("B",)

    registry["B"] = _entry("B")
    assert resolver.isSatisfied(["A", "B"])


def test_resolution_isNotTransitive():
    # A is ACTIVE even though its own dependency is not; only direct names are checked
    resolver = DependencyResolver.fromEntries([_entry("A")])

    assert resolver.isSatisfied(["A"])


# ----------------------------
# Graph helpers
# ----------------------------

def test_findDependencyCycles_reportsSccsAndSelfLoops():
    descs = [
        _desc("A", "B"),
        _desc("B", "C"),
        _desc("C", "A"),
        _desc("D", "A"),
        _desc("E", "E"),
        _desc("F", "Outside"),
    ]

    assert findDependencyCycles(descs) == [("A", "B", "C"), ("E",)]


def test_findDependencyCycles_noneInDag():
    assert findDependencyCycles([_desc("A"), _desc("B", "A"), _desc("C", "A", "B")]) == []


def test_findDependencyCycles_deepChainDoesNotRecurse():
    names = [f"m{idx}" for idx in range(3000)]
    descs = [_desc(name, names[idx + 1]) for idx, name in enumerate(names[:-1])]
    descs.append(_desc(names[-1], names[0]))

    cycles = findDependencyCycles(descs)

    assert len(cycles) == 1
    assert len(cycles[0]) == 3000


def test_dependencyOrder_placesDependenciesFirst():
    descs = [_desc("App", "Lib", "Core"), _desc("Lib", "Core"), _desc("Core"), _desc("Loose")]

    assert dependencyOrder(descs) == ["Core", "Lib", "App", "Loose"]


def test_dependencyOrder_keepsRegistrationOrderForTies():
    descs = [_desc("C"), _desc("A"), _desc("B")]

    assert dependencyOrder(descs) == ["C", "A", "B"]


def test_dependencyOrder_appendsCycleMembers():
    descs = [_desc("X", "Y"), _desc("Y", "X"), _desc("Z"), _desc("Self", "Self")]

    assert dependencyOrder(descs) == ["Z", "Self", "X", "Y"]
