# numberting_match/gemini.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx
from opentelemetry import trace

from .errors import ErrorKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpstreamSuccess:
    text: str


@dataclass(frozen=True)
class UpstreamFailure:
    kind: ErrorKind
    message: str


UpstreamResult = Union[UpstreamSuccess, UpstreamFailure]


def extract_text(data: Any) -> Optional[str]:
    """Return candidates[0].content.parts[0].text, or None if any step is missing."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text:
        return None
    return text


class GeminiClient:
    """
    Thin wrapper over Gemini's generateContent REST endpoint.

    One POST per call, no retries. Expected failures come back as an
    UpstreamFailure value instead of being raised.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        model: str,
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        tracer_provider: Optional[trace.TracerProvider] = None,
    ):
        self.http = http
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.tracer = trace.get_tracer(__name__, tracer_provider=tracer_provider)

    @property
    def url(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    async def generate(self, payload: Dict[str, Any]) -> UpstreamResult:
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        with self.tracer.start_as_current_span("gemini.generate_content") as span:
            span.set_attribute("gemini.model", self.model)
            try:
                resp = await self.http.post(self.url, json=payload, headers=headers)
            except httpx.HTTPError as e:
                logger.error("Gemini request failed: %s: %s", type(e).__name__, e)
                return UpstreamFailure(ErrorKind.unexpected, f"AI 서버 연결 실패: {e}")

            span.set_attribute("http.status_code", resp.status_code)

            if not resp.is_success:
                logger.error("Gemini API error (status=%s): %s", resp.status_code, resp.text)
                return UpstreamFailure(ErrorKind.upstream_status, f"AI 서버 오류: {resp.status_code}")

            try:
                data = resp.json()
            except ValueError:
                logger.error("Gemini API returned non-JSON body: %s", resp.text[:500])
                return UpstreamFailure(ErrorKind.upstream_format, "AI 서버 응답을 해석할 수 없습니다.")

            text = extract_text(data)
            if text is None:
                logger.error("Gemini API response missing generated text: %s", data)
                return UpstreamFailure(ErrorKind.upstream_format, "AI가 유효한 응답을 생성하지 못했습니다.")

            return UpstreamSuccess(text)
