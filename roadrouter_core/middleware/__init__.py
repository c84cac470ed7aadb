"""Middleware module - Request/response middleware."""

from roadrouter_core.middleware.base import (
    Continuation,
    Middleware,
    PassthroughMiddleware,
    is_middleware_type,
)
from roadrouter_core.middleware.cors import CORSConfig, CORSMiddleware
from roadrouter_core.middleware.headers import HeadersMiddleware
from roadrouter_core.middleware.logging import LoggingConfig, LoggingMiddleware

__all__ = [
    "Continuation",
    "Middleware",
    "PassthroughMiddleware",
    "is_middleware_type",
    "CORSConfig",
    "CORSMiddleware",
    "HeadersMiddleware",
    "LoggingConfig",
    "LoggingMiddleware",
]
