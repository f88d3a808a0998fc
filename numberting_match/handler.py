# numberting_match/handler.py

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from .errors import ErrorKind, MatchError
from .gemini import GeminiClient, UpstreamFailure
from .models import MatchRequest, MatchResult
from .prompts import build_payload

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("userAnswers", "candidates", "userOptionsCount", "AI_QUESTIONS")

_results_adapter = TypeAdapter(List[MatchResult])


@dataclass(frozen=True)
class ProxyResponse:
    status_code: int
    body: str
    media_type: str = "application/json"

    @classmethod
    def success(cls, text: str) -> "ProxyResponse":
        return cls(status_code=200, body=text)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "ProxyResponse":
        return cls(
            status_code=kind.status_code,
            body=json.dumps({"error": message}, ensure_ascii=False),
        )


# ------------------------------------------------------------
# Request validation
# ------------------------------------------------------------

def parse_body(raw: Union[bytes, str, None]) -> Any:
    try:
        return json.loads(raw or b"")
    except (ValueError, TypeError):
        raise MatchError(ErrorKind.bad_request, "잘못된 요청 데이터입니다.")


def _summarize(err: ValidationError, limit: int = 3) -> str:
    parts = []
    for e in err.errors()[:limit]:
        loc = ".".join(str(p) for p in e["loc"]) or "body"
        parts.append(f"{loc}: {e['msg']}")
    return "; ".join(parts)


def validate_request(data: Any) -> MatchRequest:
    """
    Presence check first (all four fields truthy), then structural
    validation against MatchRequest.
    """
    if not isinstance(data, dict) or any(not data.get(f) for f in REQUIRED_FIELDS):
        raise MatchError(ErrorKind.missing_fields, "필수 데이터가 누락되었습니다.")

    try:
        return MatchRequest.model_validate(data)
    except ValidationError as e:
        raise MatchError(ErrorKind.bad_request, f"잘못된 요청 데이터입니다: {_summarize(e)}")


def check_results(text: str, request: MatchRequest) -> None:
    """Strict mode: generated text must be a list of results naming known candidates."""
    try:
        results = _results_adapter.validate_json(text)
    except ValidationError as e:
        logger.error("Generated text does not match the result schema: %s", _summarize(e))
        raise MatchError(ErrorKind.upstream_format, "AI 응답이 요구된 형식과 다릅니다.")

    known = set(request.candidate_ids())
    unknown = [r.id for r in results if r.id not in known]
    if unknown:
        logger.error("Generated results reference unknown candidate ids: %s", unknown)
        raise MatchError(ErrorKind.upstream_format, "AI 응답에 존재하지 않는 후보자가 포함되어 있습니다.")


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------

class MatchHandler:
    """
    validate → build prompt → one Gemini call → relay.

    Every invocation ends in a ProxyResponse; nothing is raised to the caller.
    """

    def __init__(
        self,
        api_key: Optional[str],
        client: Optional[GeminiClient],
        validate_upstream_json: bool = False,
    ):
        self.api_key = api_key
        self.client = client
        self.validate_upstream_json = validate_upstream_json

    async def handle(self, raw_body: Union[bytes, str, None]) -> ProxyResponse:
        try:
            return await self._handle(raw_body)
        except MatchError as e:
            if e.status_code >= 500:
                logger.error("Match request failed (%s): %s", e.kind.value, e.message)
            else:
                logger.info("Rejected match request (%s): %s", e.kind.value, e.message)
            return ProxyResponse.failure(e.kind, e.message)
        except Exception as e:
            logger.exception("Unexpected failure while handling match request")
            return ProxyResponse.failure(ErrorKind.unexpected, str(e) or type(e).__name__)

    async def _handle(self, raw_body: Union[bytes, str, None]) -> ProxyResponse:
        if not self.api_key or self.client is None:
            raise MatchError(ErrorKind.configuration, "서버에 GEMINI_API_KEY가 설정되지 않았습니다.")

        request = validate_request(parse_body(raw_body))
        logger.info(
            "Match request: %d candidates, %d requested",
            len(request.candidates),
            request.userOptionsCount,
        )

        result = await self.client.generate(build_payload(request))
        if isinstance(result, UpstreamFailure):
            raise MatchError(result.kind, result.message)

        if self.validate_upstream_json:
            check_results(result.text, request)

        return ProxyResponse.success(result.text)
