# numberting_match/__init__.py

from .handler import MatchHandler, ProxyResponse
from .server import create_app

__all__ = [
    "MatchHandler",
    "ProxyResponse",
    "create_app",
]
