# numberting_match/errors.py
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    bad_request = "bad_request"
    missing_fields = "missing_fields"
    configuration = "configuration"
    upstream_status = "upstream_status"
    upstream_format = "upstream_format"
    unexpected = "unexpected"

    @property
    def status_code(self) -> int:
        if self in (ErrorKind.bad_request, ErrorKind.missing_fields):
            return 400
        return 500


class MatchError(RuntimeError):
    """Classified failure of a single match invocation."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.status_code
