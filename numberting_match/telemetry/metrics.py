# numberting_match/telemetry/metrics.py
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricExporter,
    MetricReader,
    PeriodicExportingMetricReader,
)

from ..config import Settings
from .resource import build_resource

try:
    from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
        OTLPMetricExporter,
    )
except ImportError:  # pragma: no cover - installed with the "otlp" extra
    OTLPMetricExporter = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

REQUESTS_TOTAL = "match_requests_total"
REQUEST_LATENCY = "match_request_latency_ms"


def _metric_exporter(otlp_endpoint: Optional[str]) -> MetricExporter:
    if otlp_endpoint and OTLPMetricExporter is not None:
        logger.info("Exporting metrics over OTLP to %s", otlp_endpoint)
        return OTLPMetricExporter(endpoint=otlp_endpoint, insecure=True)
    return ConsoleMetricExporter()


def configure_meter(
    settings: Settings, reader: Optional[MetricReader] = None
) -> MeterProvider:
    """
    Install the global MeterProvider. Without an explicit reader, metrics
    are exported every `metrics_export_interval_ms` to OTLP or the console.
    """
    current = metrics.get_meter_provider()
    if isinstance(current, MeterProvider):
        return current

    if reader is None:
        reader = PeriodicExportingMetricReader(
            _metric_exporter(settings.otlp_endpoint),
            export_interval_millis=settings.metrics_export_interval_ms,
        )
    provider = MeterProvider(resource=build_resource(settings), metric_readers=[reader])
    metrics.set_meter_provider(provider)
    return provider


class RequestRecord:
    """Mutable slot the request body fills in with its final status."""

    def __init__(self) -> None:
        self.status_code = 0


class RequestMetrics:
    """Request count and latency, tagged with path and response status."""

    def __init__(self, meter_provider: Optional[metrics.MeterProvider] = None):
        meter = metrics.get_meter(__name__, meter_provider=meter_provider)
        self._requests = meter.create_counter(
            name=REQUESTS_TOTAL,
            unit="1",
            description="Total number of match proxy requests",
        )
        self._latency = meter.create_histogram(
            name=REQUEST_LATENCY,
            unit="ms",
            description="Latency of match proxy requests",
        )

    @contextmanager
    def track(self, path: str) -> Iterator[RequestRecord]:
        """Usage:
            with request_metrics.track("/api/get-ai-analysis") as rec:
                ...
                rec.status_code = resp.status_code
        """
        rec = RequestRecord()
        start = time.time()
        try:
            yield rec
        finally:
            duration_ms = (time.time() - start) * 1000.0
            attributes: Dict[str, str] = {"path": path, "status": str(rec.status_code)}
            try:
                self._requests.add(1, attributes)
                self._latency.record(duration_ms, attributes)
            except Exception:
                # Metrics must never break the main flow
                logger.debug("Failed to record request metrics", exc_info=True)
