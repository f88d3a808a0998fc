from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from numberting_match.config import Settings


STUB_TEXT = '[{"id":"X","matchScore":90,"matchReason":"aligned"}]'


def gemini_body(text: str) -> Dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class StubGemini:
    """Stand-in for the Gemini endpoint; records every request it receives."""

    def __init__(
        self,
        status_code: int = 200,
        text: str = STUB_TEXT,
        body: Any = None,
        raw: Optional[str] = None,
        error: Optional[Callable[[httpx.Request], Exception]] = None,
    ):
        self.status_code = status_code
        self.text = text
        self.body = gemini_body(text) if body is None else body
        self.raw = raw
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if self.raw is not None:
            return httpx.Response(self.status_code, text=self.raw)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def payload(self, i: int = 0) -> Dict[str, Any]:
        return json.loads(self.requests[i].content)

    def query(self, i: int = 0) -> str:
        return self.payload(i)["contents"][0]["parts"][0]["text"]


@pytest.fixture
def make_stub() -> Callable[..., StubGemini]:
    return StubGemini


@pytest.fixture
def stub() -> StubGemini:
    return StubGemini()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        GEMINI_API_KEY="test-key",
        gemini_model="gemini-test",
        gemini_api_base="https://gemini.test/v1beta",
    )


@pytest.fixture
def match_body() -> Dict[str, Any]:
    return {
        "userAnswers": ["a", "b", "c"],
        "candidates": [{"id": "X", "q1": "a", "q2": "b", "q3": "c"}],
        "userOptionsCount": 1,
        "AI_QUESTIONS": ["Q1", "Q2", "Q3"],
    }
