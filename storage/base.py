"""
Blob storage interface.

The core only ever reads: fetch one blob by key, enumerate keys under a
prefix, and check that the backend is reachable. Transient-failure retry is
the adapter's SDK concern.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from core.errors import ErrorContext


@dataclass(frozen=True)
class BlobInfo:
    """A key returned by a listing."""
    name: str
    size: Optional[int] = None
    last_modified: Optional[datetime] = None


class BlobStore(ABC):
    """Read-only key/value blob store."""

    backend: str = "abstract"

    @abstractmethod
    async def fetch(self, key: str) -> bytes:
        """
        Return the blob's bytes.

        Raises:
            BlobNotFoundError: No blob under ``key``
            StorageUnavailableError: The backend failed or is unreachable
        """

    @abstractmethod
    async def list_blobs(self, prefix: str = "", limit: Optional[int] = None) -> List[BlobInfo]:
        """
        List blobs whose key starts with ``prefix``, in backend order.

        Raises:
            StorageUnavailableError: The backend failed or is unreachable
        """

    @abstractmethod
    async def ping(self) -> None:
        """Raise ``StorageUnavailableError`` unless the container is reachable."""

    def describe(self) -> str:
        return self.backend

    def error_context(self, operation: str, key: Optional[str] = None) -> ErrorContext:
        """Context attached to errors raised by this adapter."""
        return ErrorContext.from_current_span(operation, f"storage.{self.backend}", document_key=key)
