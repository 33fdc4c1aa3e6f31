"""
Distributed Tracing with OpenTelemetry

Library code only depends on the OpenTelemetry API (``trace.get_tracer``);
without setup the spans are no-ops. ``setup_tracing`` installs an SDK
tracer provider with OTLP and/or console export.

Usage:
    from observability.tracing import setup_tracing, TracingConfig

    setup_tracing(TracingConfig(enabled=True, otlp_endpoint="http://jaeger:4317"))
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)
from opentelemetry.sdk.trace.sampling import ALWAYS_OFF, ALWAYS_ON, ParentBased, TraceIdRatioBased

from observability.logging import get_logger

logger = get_logger(__name__)

_tracer_provider: Optional[TracerProvider] = None


@dataclass
class TracingConfig:
    """Configuration for OpenTelemetry tracing."""

    service_name: str = "bible-xml-api"
    service_version: str = "1.0.0"
    enabled: bool = False
    otlp_endpoint: Optional[str] = None
    sample_rate: float = 1.0
    console_export: bool = False
    environment: str = "development"
    extra_attributes: Dict[str, str] = field(default_factory=dict)


def setup_tracing(config: Optional[TracingConfig] = None) -> Optional[TracerProvider]:
    """
    Install the SDK tracer provider. Returns None when tracing is disabled.
    """
    global _tracer_provider

    if _tracer_provider is not None:
        return _tracer_provider

    config = config or TracingConfig()
    if not config.enabled:
        return None

    resource = Resource.create({
        SERVICE_NAME: config.service_name,
        SERVICE_VERSION: config.service_version,
        "deployment.environment": config.environment,
        **config.extra_attributes,
    })

    if config.sample_rate <= 0.0:
        sampler = ALWAYS_OFF
    elif config.sample_rate >= 1.0:
        sampler = ALWAYS_ON
    else:
        sampler = ParentBased(root=TraceIdRatioBased(config.sample_rate))

    provider = TracerProvider(resource=resource, sampler=sampler)

    if config.otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=config.otlp_endpoint, insecure=True))
        )
    if config.console_export:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer_provider = provider
    logger.info(
        "Tracing enabled",
        otlp_endpoint=config.otlp_endpoint,
        sample_rate=config.sample_rate,
    )
    return provider


def shutdown_tracing() -> None:
    """Flush pending spans and drop the provider."""
    global _tracer_provider
    if _tracer_provider is not None:
        _tracer_provider.shutdown()
    _tracer_provider = None
