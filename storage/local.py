"""
Filesystem blob store for development and offline use.

Keys are POSIX paths relative to the root directory.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional, Union

from core.errors import BlobNotFoundError, StorageUnavailableError
from storage.base import BlobInfo, BlobStore


class LocalBlobStore(BlobStore):
    """
    Usage:
        store = LocalBlobStore("./bibles")
        xml = await store.fetch("kjv.xml")
    """

    backend = "local"

    def __init__(self, root: Union[str, Path], prefix: str = ""):
        self.root = Path(root)
        self.prefix = prefix

    @classmethod
    def from_config(cls, config) -> "LocalBlobStore":
        return cls(config.local_path, prefix=config.prefix)

    def describe(self) -> str:
        return f"file://{self.root.resolve()}/{self.prefix}"

    def _resolve(self, key: str) -> Path:
        root = self.root.resolve()
        path = (root / key).resolve()
        if path != root and root not in path.parents:
            raise BlobNotFoundError(
                f"Key '{key}' is outside the store",
                key=key,
                backend=self.backend,
                context=self.error_context("fetch", key),
            )
        return path

    def _list_sync(self, prefix: str, limit: Optional[int]) -> List[BlobInfo]:
        root = self.root.resolve()
        blobs: List[BlobInfo] = []
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            key = path.relative_to(root).as_posix()
            if not key.startswith(prefix):
                continue
            blobs.append(BlobInfo(name=key, size=path.stat().st_size))
            if limit is not None and len(blobs) >= limit:
                break
        return blobs

    async def fetch(self, key: str) -> bytes:
        path = self._resolve(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except (FileNotFoundError, IsADirectoryError) as e:
            raise BlobNotFoundError(
                f"No blob '{key}'",
                key=key,
                backend=self.backend,
                cause=e,
                context=self.error_context("fetch", key),
            ) from e
        except OSError as e:
            raise StorageUnavailableError(
                f"Failed to read '{key}': {e}",
                key=key,
                backend=self.backend,
                cause=e,
                context=self.error_context("fetch", key),
            ) from e

    async def list_blobs(self, prefix: str = "", limit: Optional[int] = None) -> List[BlobInfo]:
        await self.ping()
        try:
            return await asyncio.to_thread(self._list_sync, f"{self.prefix}{prefix}", limit)
        except OSError as e:
            raise StorageUnavailableError(
                f"Failed to list '{self.root}': {e}",
                backend=self.backend,
                cause=e,
                context=self.error_context("list"),
            ) from e

    async def ping(self) -> None:
        if not self.root.is_dir():
            raise StorageUnavailableError(
                f"Storage directory '{self.root}' does not exist",
                backend=self.backend,
                context=self.error_context("ping"),
            )
