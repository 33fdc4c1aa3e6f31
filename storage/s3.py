"""
S3 blob store.

Wraps a boto3 client; every SDK call runs in a worker thread so the event
loop is never blocked. Retries use botocore's standard retry mode
(exponential backoff with a bounded attempt count). One client, and so one
connection pool, is shared by all callers.
"""
from __future__ import annotations

import asyncio
import os
from typing import Any, List, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from core.errors import BlobNotFoundError, StorageUnavailableError
from observability.logging import get_logger
from storage.base import BlobInfo, BlobStore

logger = get_logger(__name__)

NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class S3BlobStore(BlobStore):
    """
    Read-only access to the translation documents in one S3 bucket.

    Usage:
        store = S3BlobStore("bibles", prefix="translations/")
        blobs = await store.list_blobs()
        xml = await store.fetch(blobs[0].name)
    """

    backend = "s3"

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        client: Any = None,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        max_attempts: int = 3,
        max_pool_connections: Optional[int] = None,
    ):
        self.bucket = bucket
        self.prefix = prefix
        if client is None:
            cfg = BotoConfig(
                retries={"max_attempts": max_attempts, "mode": "standard"},
                max_pool_connections=max_pool_connections or (os.cpu_count() or 1) * 5,
            )
            client = boto3.client(
                "s3",
                region_name=region_name or None,
                endpoint_url=endpoint_url or None,
                aws_access_key_id=aws_access_key_id or None,
                aws_secret_access_key=aws_secret_access_key or None,
                config=cfg,
            )
        self._client = client

    @classmethod
    def from_config(cls, config: Any) -> "S3BlobStore":
        """Build from a ``config.StorageConfig``."""
        return cls(
            bucket=config.bucket,
            prefix=config.prefix,
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            max_attempts=config.max_attempts,
        )

    def describe(self) -> str:
        return f"s3://{self.bucket}/{self.prefix}"

    def _fetch_sync(self, key: str) -> bytes:
        response = self._client.get_object(Bucket=self.bucket, Key=key)
        return response["Body"].read()

    def _list_sync(self, prefix: str, limit: Optional[int]) -> List[BlobInfo]:
        paginator = self._client.get_paginator("list_objects_v2")
        blobs: List[BlobInfo] = []
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            for obj in page.get("Contents", []):
                blobs.append(BlobInfo(
                    name=obj["Key"],
                    size=obj.get("Size"),
                    last_modified=obj.get("LastModified"),
                ))
                if limit is not None and len(blobs) >= limit:
                    return blobs
        return blobs

    async def fetch(self, key: str) -> bytes:
        try:
            return await asyncio.to_thread(self._fetch_sync, key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in NOT_FOUND_CODES:
                raise BlobNotFoundError(
                    f"No blob '{key}' in bucket '{self.bucket}'",
                    key=key,
                    backend=self.backend,
                    cause=e,
                    context=self.error_context("fetch", key),
                ) from e
            raise StorageUnavailableError(
                f"Failed to fetch '{key}' from bucket '{self.bucket}': {code or e}",
                key=key,
                backend=self.backend,
                cause=e,
                context=self.error_context("fetch", key),
            ) from e
        except BotoCoreError as e:
            raise StorageUnavailableError(
                f"Failed to fetch '{key}' from bucket '{self.bucket}': {e}",
                key=key,
                backend=self.backend,
                cause=e,
                context=self.error_context("fetch", key),
            ) from e

    async def list_blobs(self, prefix: str = "", limit: Optional[int] = None) -> List[BlobInfo]:
        full_prefix = f"{self.prefix}{prefix}"
        try:
            blobs = await asyncio.to_thread(self._list_sync, full_prefix, limit)
        except (BotoCoreError, ClientError) as e:
            raise StorageUnavailableError(
                f"Failed to list bucket '{self.bucket}' under '{full_prefix}': {e}",
                backend=self.backend,
                cause=e,
                context=self.error_context("list"),
            ) from e
        logger.debug("Listed blobs", bucket=self.bucket, prefix=full_prefix, count=len(blobs))
        return blobs

    async def ping(self) -> None:
        try:
            await asyncio.to_thread(self._client.head_bucket, Bucket=self.bucket)
        except (BotoCoreError, ClientError) as e:
            raise StorageUnavailableError(
                f"Bucket '{self.bucket}' is not reachable: {e}",
                backend=self.backend,
                cause=e,
                context=self.error_context("ping"),
            ) from e
