# numberting_match/telemetry/resource.py
from opentelemetry.sdk.resources import SERVICE_NAME, Resource

from ..config import Settings


def build_resource(settings: Settings) -> Resource:
    """Resource shared by the tracer and meter providers."""
    return Resource.create(
        {
            SERVICE_NAME: settings.service_name,
            "deployment.environment": settings.environment,
            "gemini.model": settings.gemini_model,
        }
    )
