"""
Observability Package

Structured logging (structlog) and distributed tracing (OpenTelemetry).

Usage:
    from observability import setup_observability, get_logger

    setup_observability(config.observability)
    logger = get_logger(__name__)
"""
from typing import Any, Optional

from config import ObservabilityConfig
from observability.logging import LogContext, LoggingConfig, get_logger, setup_logging
from observability.tracing import TracingConfig, setup_tracing, shutdown_tracing


def setup_observability(config: Optional[Any] = None) -> None:
    """
    Configure logging and tracing from a ``config.ObservabilityConfig``.

    Without a config the environment is read through ``ObservabilityConfig``.
    """
    config = config or ObservabilityConfig()
    setup_logging(
        LoggingConfig(
            service_name=config.service_name,
            level=config.log_level,
            json_format=config.log_json_format,
            environment=config.environment,
        ),
        force=True,
    )
    setup_tracing(
        TracingConfig(
            service_name=config.service_name,
            enabled=config.tracing_enabled,
            otlp_endpoint=config.otlp_endpoint,
            sample_rate=config.sample_rate,
            console_export=config.trace_console_export,
            environment=config.environment,
        )
    )


__all__ = [
    "LogContext",
    "LoggingConfig",
    "TracingConfig",
    "get_logger",
    "setup_logging",
    "setup_observability",
    "setup_tracing",
    "shutdown_tracing",
]
