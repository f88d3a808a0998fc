# numberting_match/models.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Candidate(BaseModel):
    """One drawn number's owner and their three answers."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(..., min_length=1)
    q1: str
    q2: str
    q3: str


class MatchRequest(BaseModel):
    userAnswers: List[str] = Field(..., min_length=3, max_length=3)
    candidates: List[Candidate] = Field(..., min_length=1)
    userOptionsCount: int = Field(..., ge=1)
    AI_QUESTIONS: List[str] = Field(..., min_length=3, max_length=3)

    @model_validator(mode="after")
    def _unique_candidate_ids(self) -> "MatchRequest":
        seen = set()
        for c in self.candidates:
            if c.id in seen:
                raise ValueError(f"duplicate candidate id: {c.id}")
            seen.add(c.id)
        return self

    def candidate_ids(self) -> List[str]:
        return [c.id for c in self.candidates]


class MatchResult(BaseModel):
    id: str
    matchScore: float = Field(..., ge=0, le=100)
    matchReason: str


class ErrorResponse(BaseModel):
    error: str
