# tests/modhost/mods/test_assets.py
from __future__ import annotations
import asyncio
import zlib

import pytest

from modhost.mods.assets import ArchiveRequest, AssetStore, FileAssetStore
from modhost.mods.errors import ArchiveLoadError


PAYLOAD = b"HEADER--archive payload"


@pytest.fixture()
def archive(tmp_path):
    path = tmp_path / "level.bundle"
    path.write_bytes(PAYLOAD)
    return path


def test_loadArchive_readsWholeFile(assetStore, archive):
    handle = assetStore.loadArchive(archive)

    assert handle.data == PAYLOAD
    assert handle.size == len(PAYLOAD)
    assert handle.crc == zlib.crc32(PAYLOAD)
    assert handle.path == archive
    assert isinstance(assetStore, AssetStore)


def test_loadArchive_offsetSkipsHeader(assetStore, archive):
    handle = assetStore.loadArchive(archive, offset=8)

    assert handle.data == b"archive payload"


def test_loadArchive_crcIsChecked(assetStore, archive):
    good = zlib.crc32(PAYLOAD)

    assert assetStore.loadArchive(archive, crc=good).data == PAYLOAD
    with pytest.raises(ArchiveLoadError, match="crc mismatch"):
        assetStore.loadArchive(archive, crc=good ^ 0xFFFF)


def test_loadArchive_errors(assetStore, archive, tmp_path):
    with pytest.raises(ArchiveLoadError):
        assetStore.loadArchive(tmp_path / "missing.bundle")
    with pytest.raises(ArchiveLoadError, match="negative offset"):
        assetStore.loadArchive(archive, offset=-1)


def test_loadArchiveAsync_canBePolled(assetStore, archive):
    request = assetStore.loadArchiveAsync(archive, offset=8)

    assert isinstance(request, ArchiveRequest)
    assert request.result(timeout=5).data == b"archive payload"
    assert request.isDone


def test_loadArchiveAsync_canBeAwaited(assetStore, archive):
    async def load():
        return await assetStore.loadArchiveAsync(archive)

    assert asyncio.run(load()).data == PAYLOAD


def test_loadArchiveAsync_propagatesErrors(assetStore, tmp_path):
    request = assetStore.loadArchiveAsync(tmp_path / "missing.bundle")

    with pytest.raises(ArchiveLoadError):
        request.result(timeout=5)


def test_store_isContextManager(archive):
    with FileAssetStore(maxWorkers=0) as store:
        assert store.loadArchiveAsync(archive).result(timeout=5).data == PAYLOAD
