from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from opentelemetry import metrics, trace

from .config import Settings, get_settings
from .gemini import GeminiClient
from .handler import MatchHandler
from .models import ErrorResponse
from .telemetry import (
    RequestMetrics,
    configure_logging,
    configure_meter,
    configure_tracer,
)

logger = logging.getLogger(__name__)

MATCH_PATH = "/api/get-ai-analysis"
# Path the static event page already posts to
NETLIFY_PATH = "/.netlify/functions/get-ai-analysis"


def build_handler(
    settings: Settings,
    http: httpx.AsyncClient,
    tracer_provider: Optional[trace.TracerProvider] = None,
) -> MatchHandler:
    client = None
    if settings.GEMINI_API_KEY:
        client = GeminiClient(
            http,
            api_key=settings.GEMINI_API_KEY,
            model=settings.gemini_model,
            api_base=settings.gemini_api_base,
            tracer_provider=tracer_provider,
        )
    else:
        logger.warning("GEMINI_API_KEY is not set; match requests will fail with 500.")

    return MatchHandler(
        api_key=settings.GEMINI_API_KEY,
        client=client,
        validate_upstream_json=settings.validate_upstream_json,
    )


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    tracer_provider: Optional[trace.TracerProvider] = None,
    meter_provider: Optional[metrics.MeterProvider] = None,
) -> FastAPI:
    """
    Build the proxy app.

    `transport` replaces the network layer of the shared httpx client,
    which is how tests stand in for Gemini. Without explicit providers,
    spans and metrics go to the global OpenTelemetry providers.
    """
    settings = settings or get_settings()
    request_metrics = RequestMetrics(meter_provider)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(
            transport=transport,
            timeout=settings.upstream_timeout_s,
        ) as http:
            app.state.handler = build_handler(settings, http, tracer_provider)
            logger.info(
                "Starting %s (env=%s, model=%s)",
                settings.service_name,
                settings.environment,
                settings.gemini_model,
            )
            yield
        logger.info("Shutting down %s", settings.service_name)

    app = FastAPI(title="numberting-match", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok", "service": settings.service_name}

    async def get_ai_analysis(request: Request) -> Response:
        """
        Score candidates against the participant's answers via Gemini.

        The body is read raw so malformed JSON comes back as 400 {error}
        rather than FastAPI's 422.
        """
        with request_metrics.track(request.url.path) as rec:
            body = await request.body()
            result = await request.app.state.handler.handle(body)
            rec.status_code = result.status_code
            return Response(
                content=result.body,
                status_code=result.status_code,
                media_type=result.media_type,
            )

    responses = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
    app.add_api_route(MATCH_PATH, get_ai_analysis, methods=["POST"], responses=responses)
    app.add_api_route(
        NETLIFY_PATH,
        get_ai_analysis,
        methods=["POST"],
        responses=responses,
        include_in_schema=False,
    )

    return app


def build_app(settings: Optional[Settings] = None) -> FastAPI:
    """Factory for `uvicorn --factory numberting_match.server:build_app`."""
    settings = settings or get_settings()
    configure_logging(settings)
    tracer_provider = configure_tracer(settings)
    meter_provider = configure_meter(settings)
    return create_app(
        settings,
        tracer_provider=tracer_provider,
        meter_provider=meter_provider,
    )
