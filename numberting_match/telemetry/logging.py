# numberting_match/telemetry/logging.py
import logging
import sys
from typing import Iterable, Optional, TextIO

from ..config import Settings

_REDACTED = "***"


class _ServiceHandler(logging.StreamHandler):
    """Marks the handler installed by configure_logging."""


class RedactingFilter(logging.Filter):
    """Masks configured secrets (the Gemini key) in formatted log messages."""

    def __init__(self, secrets: Iterable[Optional[str]]):
        super().__init__()
        self.secrets = [s for s in secrets if s]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True
        message = record.getMessage()
        for secret in self.secrets:
            message = message.replace(secret, _REDACTED)
        record.msg = message
        record.args = None
        return True


def configure_logging(settings: Settings, stream: Optional[TextIO] = None) -> logging.Handler:
    """
    Attach one stdout handler to the root logger. Calling it again replaces
    the handler installed by the previous call.
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h, _ServiceHandler):
            root.removeHandler(h)

    handler = _ServiceHandler(stream or sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | "
            f"service={settings.service_name} env={settings.environment} | %(message)s"
        )
    )
    handler.addFilter(RedactingFilter([settings.GEMINI_API_KEY]))

    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())

    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured for service=%s level=%s", settings.service_name, settings.log_level
    )
    return handler

