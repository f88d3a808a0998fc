# numberting_match/telemetry/tracing.py
import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)

from ..config import Settings
from .resource import build_resource

try:
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
        OTLPSpanExporter,
    )
except ImportError:  # pragma: no cover - installed with the "otlp" extra
    OTLPSpanExporter = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def _span_exporter(otlp_endpoint: Optional[str]) -> SpanExporter:
    if otlp_endpoint and OTLPSpanExporter is not None:
        logger.info("Exporting spans over OTLP to %s", otlp_endpoint)
        return OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)
    if otlp_endpoint:
        logger.warning(
            "otlp_endpoint=%s set but the OTLP exporter is not installed; spans go to the console.",
            otlp_endpoint,
        )
    return ConsoleSpanExporter()


def configure_tracer(
    settings: Settings, exporter: Optional[SpanExporter] = None
) -> TracerProvider:
    """
    Install the global TracerProvider that carries the Gemini call spans.
    A provider installed earlier in the process is returned unchanged.
    """
    current = trace.get_tracer_provider()
    if isinstance(current, TracerProvider):
        return current

    provider = TracerProvider(resource=build_resource(settings))
    provider.add_span_processor(
        BatchSpanProcessor(exporter or _span_exporter(settings.otlp_endpoint))
    )
    trace.set_tracer_provider(provider)
    return provider
