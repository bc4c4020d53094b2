# modhost/mods/compiler.py
from __future__ import annotations

import builtins
import logging
import re
import sys
import traceback
import types
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from modhost.mods.constants import COMPILED_MODULE_PREFIX, ENTRY_POINT_ATTR, ENTRY_POINT_NAME
from modhost.mods.errors import CompileError, InstantiationError

logger = logging.getLogger(__name__)

__all__ = [
    "SourceText",
    "TypeDescriptor",
    "CodeUnit",
    "CodeCompiler",
    "PythonCodeUnit",
    "PythonSourceCompiler",
]



@dataclass(frozen=True, slots=True)
class SourceText:
    """One source file of a package's compilation batch."""
    path: Path
    text: str

    @classmethod
    def read(cls, path: Path) -> SourceText:
        return cls(path=path, text=path.read_text(encoding="utf-8"))



@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """A type exported by a code unit."""
    name: str
    unitName: str



@runtime_checkable
class CodeUnit(Protocol):
    """Runtime-loadable result of compiling one package's source batch."""

    name: str

    @property
    def entryPointName(self) -> str:
        """Type name the unit designates as its entry point."""
        ...

    def enumerateTypes(self) -> Sequence[TypeDescriptor]: ...

    def instantiate(self, typeName: str) -> Any:
        """Returns a new instance or raises InstantiationError."""
        ...



@runtime_checkable
class CodeCompiler(Protocol):
    def compile(self, unitName: str, sources: Sequence[SourceText], allowHostApi: bool) -> CodeUnit:
        """
        Compiles all sources as one batch. Raises CompileError with diagnostics
        on failure. Identical inputs must give identical outcomes.
        """
        ...



# ------------------------------------------------------------------ #
# Python backend
# ------------------------------------------------------------------ #

def _moduleNameFor(unitName: str) -> str:
    safe = re.sub(r"\W", "_", unitName)
    if safe[:1].isdigit():
        safe = "_" + safe
    return f"{COMPILED_MODULE_PREFIX}.{safe}"



class PythonCodeUnit:
    """Code unit backed by a single module namespace."""

    def __init__(self, name: str, module: types.ModuleType) -> None:
        self.name = name
        self.module = module

    def _classes(self) -> dict[str, type]:
        return {
            attrName: value
            for attrName, value in vars(self.module).items()
            if isinstance(value, type) and value.__module__ == self.module.__name__
        }

    @property
    def entryPointName(self) -> str:
        designated = getattr(self.module, ENTRY_POINT_ATTR, None)
        if isinstance(designated, type):
            return designated.__name__
        if isinstance(designated, str) and designated:
            return designated
        return ENTRY_POINT_NAME

    def enumerateTypes(self) -> list[TypeDescriptor]:
        # Namespace order is definition order
        return [TypeDescriptor(name=cls.__name__, unitName=self.name) for cls in self._classes().values()]

    def instantiate(self, typeName: str) -> Any:
        cls = next((cls for cls in self._classes().values() if cls.__name__ == typeName), None)
        if cls is None:
            raise InstantiationError(typeName, "no such type in unit", modName=self.name)
        try:
            return cls()
        except Exception as err:
            raise InstantiationError(typeName, f"{type(err).__name__}: {err}", modName=self.name) from err

    def __repr__(self) -> str:
        return f"PythonCodeUnit(name={self.name!r}, module={self.module.__name__!r})"



class PythonSourceCompiler:
    """
    Compiles a package's Python sources into one module.

    Sources are executed in the given order into a shared namespace, so a
    file can use names defined by the files before it. With
    allowHostApi=False the namespace gets builtins without __import__, so any
    import statement rejects the batch. That is a convenience switch, not a
    sandbox.
    """

    def compile(self, unitName: str, sources: Sequence[SourceText], allowHostApi: bool) -> PythonCodeUnit:
        if not sources:
            raise CompileError(unitName, ["no sources to compile"])

        moduleName = _moduleNameFor(unitName)

        # Syntax errors are reported for every file before anything runs
        codeObjects: list[tuple[SourceText, types.CodeType]] = []
        diagnostics: list[str] = []
        for source in sources:
            try:
                codeObjects.append((source, compile(source.text, str(source.path), "exec")))
            except SyntaxError as err:
                diagnostics.append(f"{source.path}:{err.lineno}: {err.msg}")
            except ValueError as err:
                # Null bytes in the source
                diagnostics.append(f"{source.path}: {err}")
        if diagnostics:
            raise CompileError(unitName, diagnostics)

        module = types.ModuleType(moduleName)
        module.__file__ = str(sources[0].path)
        namespace = vars(module)
        if allowHostApi:
            import modhost
            namespace["modhost"] = modhost
        else:
            restricted = dict(vars(builtins))
            restricted.pop("__import__", None)
            namespace["__builtins__"] = restricted

        # Registered while executing so dataclasses/typing can find the module
        sys.modules[moduleName] = module
        for source, code in codeObjects:
            try:
                exec(code, namespace)
            except (Exception, SystemExit) as err:
                sys.modules.pop(moduleName, None)
                detail = "".join(traceback.format_exception_only(type(err), err)).strip()
                raise CompileError(unitName, [f"{source.path}: {detail}"]) from err

        logger.debug("Compiled unit '%s' from %d source(s) into '%s'", unitName, len(sources), moduleName)
        return PythonCodeUnit(unitName, module)
