"""OpenTelemetry configuration helpers."""

from __future__ import annotations

import logging
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.semconv.resource import ResourceAttributes

from exchange_rates.config import ExchangeRatesSettings

logger = logging.getLogger(__name__)

_TELEMETRY_INITIALISED = False


def _build_resource(settings: ExchangeRatesSettings) -> Resource:
    attributes: dict[str, Any] = {
        ResourceAttributes.SERVICE_NAME: settings.telemetry_service_name,
        ResourceAttributes.SERVICE_NAMESPACE: "exchange-rates",
    }
    return Resource.create(attributes)


def _build_exporter_options(settings: ExchangeRatesSettings) -> dict[str, Any]:
    options: dict[str, Any] = {"insecure": settings.telemetry_otlp_insecure}
    if settings.telemetry_otlp_endpoint:
        options["endpoint"] = settings.telemetry_otlp_endpoint
    return options


def setup_telemetry(settings: ExchangeRatesSettings) -> bool:
    """Install an OTLP tracer provider and instrument httpx.

    Returns whether tracing is active after the call.
    """

    global _TELEMETRY_INITIALISED  # noqa: PLW0603 - single initialisation guard

    if _TELEMETRY_INITIALISED:
        return True

    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return False

    tracer_provider = TracerProvider(resource=_build_resource(settings))
    span_processor = BatchSpanProcessor(OTLPSpanExporter(**_build_exporter_options(settings)))
    tracer_provider.add_span_processor(span_processor)
    trace.set_tracer_provider(tracer_provider)

    # Outbound API calls get their own spans under exchange_rates.fetch
    HTTPXClientInstrumentor().instrument(tracer_provider=tracer_provider)

    _TELEMETRY_INITIALISED = True
    logger.info("Telemetry initialised and httpx instrumentation enabled")
    return True


__all__ = ["setup_telemetry"]
