"""
Storage adapters for the translation documents.
"""
from core.errors import BibleConfigError
from storage.base import BlobInfo, BlobStore
from storage.local import LocalBlobStore
from storage.s3 import S3BlobStore


def create_blob_store(config) -> BlobStore:
    """Build the adapter named by ``config.backend`` (a ``StorageConfig``)."""
    if config.backend == "s3":
        return S3BlobStore.from_config(config)
    if config.backend == "local":
        return LocalBlobStore.from_config(config)
    raise BibleConfigError(
        f"Unknown storage backend '{config.backend}'",
        config_key="STORAGE_BACKEND",
        actual_value=config.backend,
    )


__all__ = [
    "BlobInfo",
    "BlobStore",
    "LocalBlobStore",
    "S3BlobStore",
    "create_blob_store",
]
