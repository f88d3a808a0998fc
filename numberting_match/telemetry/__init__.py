# numberting_match/telemetry/__init__.py
from .logging import RedactingFilter, configure_logging
from .metrics import RequestMetrics, configure_meter
from .resource import build_resource
from .tracing import configure_tracer

__all__ = [
    "RedactingFilter",
    "RequestMetrics",
    "build_resource",
    "configure_logging",
    "configure_meter",
    "configure_tracer",
]
