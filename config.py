"""
Configuration

Centralized configuration management for the translation core.
Uses environment variables (optionally from a .env file) with sensible
defaults. ``Config.validate`` is the fail-fast check run at startup.
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv

from core.errors import BibleConfigError

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Deployment environments."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


def _split_extensions(raw: str) -> Tuple[str, ...]:
    extensions = []
    for item in raw.split(","):
        item = item.strip().lower()
        if item:
            extensions.append(item if item.startswith(".") else f".{item}")
    return tuple(extensions)


@dataclass
class StorageConfig:
    """Blob storage holding the translation documents."""
    backend: str = field(default_factory=lambda: os.getenv("STORAGE_BACKEND", "local").lower())
    prefix: str = field(default_factory=lambda: os.getenv("STORAGE_PREFIX", ""))
    document_extensions: Tuple[str, ...] = field(
        default_factory=lambda: _split_extensions(os.getenv("STORAGE_DOCUMENT_EXTENSIONS", ".xml"))
    )

    # S3 settings
    bucket: str = field(default_factory=lambda: os.getenv("STORAGE_BUCKET", ""))
    region: str = field(default_factory=lambda: os.getenv("AWS_REGION", ""))
    endpoint_url: str = field(default_factory=lambda: os.getenv("AWS_ENDPOINT_URL", ""))
    access_key_id: str = field(default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID", ""))
    secret_access_key: str = field(default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY", ""))
    max_attempts: int = field(default_factory=lambda: int(os.getenv("STORAGE_MAX_ATTEMPTS", "3")))

    # Local filesystem settings
    local_path: Path = field(default_factory=lambda: Path(os.getenv("STORAGE_LOCAL_PATH", "./bibles")))


@dataclass
class CacheConfig:
    """Two-tier cache policy."""
    size_limit: int = field(default_factory=lambda: int(os.getenv("CACHE_SIZE_LIMIT", "1000")))

    # Catalog tier: translation list and per-translation metadata
    catalog_sliding_seconds: float = field(
        default_factory=lambda: float(os.getenv("CACHE_CATALOG_SLIDING_SECONDS", str(24 * 3600)))
    )
    catalog_absolute_seconds: float = field(
        default_factory=lambda: float(os.getenv("CACHE_CATALOG_ABSOLUTE_SECONDS", str(7 * 24 * 3600)))
    )
    catalog_weight: int = field(default_factory=lambda: int(os.getenv("CACHE_CATALOG_WEIGHT", "1")))

    # Content tier: raw documents and parsed verse indexes
    content_sliding_seconds: float = field(
        default_factory=lambda: float(os.getenv("CACHE_CONTENT_SLIDING_SECONDS", str(2 * 3600)))
    )
    content_absolute_seconds: float = field(
        default_factory=lambda: float(os.getenv("CACHE_CONTENT_ABSOLUTE_SECONDS", str(24 * 3600)))
    )
    content_weight: int = field(default_factory=lambda: int(os.getenv("CACHE_CONTENT_WEIGHT", "10")))


@dataclass
class CatalogConfig:
    """Catalog refresh and verse resolution settings."""
    fetch_batch_size: int = field(default_factory=lambda: int(os.getenv("CATALOG_FETCH_BATCH_SIZE", "5")))
    skip_malformed_documents: bool = field(
        default_factory=lambda: os.getenv("CATALOG_SKIP_MALFORMED", "true").lower() == "true"
    )

    # Verse window used when a request leaves the end verse open
    default_window_size: int = field(default_factory=lambda: int(os.getenv("VERSE_WINDOW_SIZE", "10")))
    default_max_verse: int = field(default_factory=lambda: int(os.getenv("VERSE_WINDOW_MAX", "31")))


@dataclass
class APIConfig:
    """Settings used when building responses for the request layer."""
    base_url: str = field(default_factory=lambda: os.getenv("API_BASE_URL", "").rstrip("/"))


@dataclass
class ObservabilityConfig:
    """Logging and tracing settings."""
    service_name: str = field(default_factory=lambda: os.getenv("SERVICE_NAME", "bible-xml-api"))
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    log_json_format: bool = field(
        default_factory=lambda: os.getenv("LOG_FORMAT", "json").lower() == "json"
    )

    tracing_enabled: bool = field(
        default_factory=lambda: os.getenv("OTEL_TRACING_ENABLED", "false").lower() == "true"
    )
    otlp_endpoint: Optional[str] = field(
        default_factory=lambda: os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or None
    )
    sample_rate: float = field(default_factory=lambda: float(os.getenv("OTEL_SAMPLE_RATE", "1.0")))
    trace_console_export: bool = field(
        default_factory=lambda: os.getenv("OTEL_CONSOLE_EXPORT", "false").lower() == "true"
    )


@dataclass
class Config:
    """Main configuration class combining all sub-configs."""
    env: Environment = field(default_factory=lambda: Environment(os.getenv("ENVIRONMENT", "development")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    storage: StorageConfig = field(default_factory=StorageConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    api: APIConfig = field(default_factory=APIConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.env == Environment.DEVELOPMENT

    def validate(self) -> "Config":
        """
        Fail fast on settings the core cannot run without.

        Raises:
            BibleConfigError: On the first invalid setting
        """
        storage = self.storage
        if storage.backend not in ("s3", "local"):
            raise BibleConfigError(
                f"STORAGE_BACKEND must be 's3' or 'local', got '{storage.backend}'",
                config_key="STORAGE_BACKEND",
                actual_value=storage.backend,
            )
        if storage.backend == "s3" and not storage.bucket:
            raise BibleConfigError(
                "STORAGE_BUCKET is required for the s3 storage backend",
                config_key="STORAGE_BUCKET",
            )
        if storage.backend == "s3" and bool(storage.access_key_id) != bool(storage.secret_access_key):
            raise BibleConfigError(
                "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must be set together",
                config_key="AWS_SECRET_ACCESS_KEY" if storage.access_key_id else "AWS_ACCESS_KEY_ID",
            )
        if storage.backend == "local" and not storage.local_path.is_dir():
            raise BibleConfigError(
                f"STORAGE_LOCAL_PATH '{storage.local_path}' is not a directory",
                config_key="STORAGE_LOCAL_PATH",
                actual_value=str(storage.local_path),
            )
        if not storage.document_extensions:
            raise BibleConfigError(
                "STORAGE_DOCUMENT_EXTENSIONS must name at least one extension",
                config_key="STORAGE_DOCUMENT_EXTENSIONS",
            )
        if self.cache.size_limit < 1:
            raise BibleConfigError(
                "CACHE_SIZE_LIMIT must be at least 1",
                config_key="CACHE_SIZE_LIMIT",
                actual_value=self.cache.size_limit,
            )
        if self.catalog.fetch_batch_size < 1:
            raise BibleConfigError(
                "CATALOG_FETCH_BATCH_SIZE must be at least 1",
                config_key="CATALOG_FETCH_BATCH_SIZE",
                actual_value=self.catalog.fetch_batch_size,
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary (excluding sensitive values)."""
        return {
            "env": self.env.value,
            "debug": self.debug,
            "storage": {
                "backend": self.storage.backend,
                "bucket": self.storage.bucket,
                "prefix": self.storage.prefix,
                "local_path": str(self.storage.local_path),
                "document_extensions": list(self.storage.document_extensions),
            },
            "cache": {
                "size_limit": self.cache.size_limit,
                "catalog_sliding_seconds": self.cache.catalog_sliding_seconds,
                "content_sliding_seconds": self.cache.content_sliding_seconds,
            },
            "catalog": {
                "fetch_batch_size": self.catalog.fetch_batch_size,
                "skip_malformed_documents": self.catalog.skip_malformed_documents,
            },
        }


# Singleton configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create configuration singleton."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment."""
    global _config
    load_dotenv(override=True)
    _config = Config()
    return _config
