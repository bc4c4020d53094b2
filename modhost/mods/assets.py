# modhost/mods/assets.py
from __future__ import annotations

import asyncio
import logging
import zlib
from collections.abc import Generator
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from modhost.mods.errors import ArchiveLoadError

logger = logging.getLogger(__name__)

__all__ = ["ArchiveHandle", "ArchiveRequest", "AssetStore", "FileAssetStore"]



@dataclass(frozen=True, slots=True)
class ArchiveHandle:
    """A loaded archive: where it came from and its payload."""
    path: Path
    data: bytes = field(repr=False)
    crc: int

    @property
    def size(self) -> int:
        return len(self.data)



class ArchiveRequest:
    """
    Handle for an in-flight asynchronous archive load.

    Callers may poll (isDone / result()) or await it from asyncio code.
    """

    def __init__(self, path: Path, future: Future[ArchiveHandle]) -> None:
        self.path = path
        self._future = future

    @property
    def isDone(self) -> bool:
        return self._future.done()

    def result(self, timeout: float | None = None) -> ArchiveHandle:
        return self._future.result(timeout=timeout)

    def __await__(self) -> Generator[Any, None, ArchiveHandle]:
        return asyncio.wrap_future(self._future).__await__()

    def __repr__(self) -> str:
        return f"ArchiveRequest(path={str(self.path)!r}, done={self.isDone})"



@runtime_checkable
class AssetStore(Protocol):
    """The host's archive loader."""

    def loadArchive(self, path: Path, crc: int = 0, offset: int = 0) -> ArchiveHandle | None: ...

    def loadArchiveAsync(self, path: Path, crc: int = 0, offset: int = 0) -> ArchiveRequest | None: ...



class FileAssetStore(AssetStore):
    """
    Reads archives straight from disk.

    `offset` skips a header before the payload. A non-zero `crc` must match
    zlib.crc32 of the payload. Async loads run on a small thread pool.
    """

    def __init__(self, *, maxWorkers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max(1, int(maxWorkers)), thread_name_prefix="modhost-assets")

    def loadArchive(self, path: Path, crc: int = 0, offset: int = 0) -> ArchiveHandle:
        path = Path(path)
        if offset < 0:
            raise ArchiveLoadError(path, f"negative offset {offset}")
        try:
            with open(path, "rb") as fl:
                fl.seek(offset)
                data = fl.read()
        except OSError as err:
            raise ArchiveLoadError(path, str(err)) from err

        actual = zlib.crc32(data)
        if crc and actual != crc:
            raise ArchiveLoadError(path, f"crc mismatch (expected {crc:#010x}, got {actual:#010x})")

        logger.debug("Loaded archive '%s' (%d bytes)", path, len(data))
        return ArchiveHandle(path=path, data=data, crc=actual)

    def loadArchiveAsync(self, path: Path, crc: int = 0, offset: int = 0) -> ArchiveRequest:
        path = Path(path)
        future = self._executor.submit(self.loadArchive, path, crc, offset)
        return ArchiveRequest(path, future)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> FileAssetStore:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()
