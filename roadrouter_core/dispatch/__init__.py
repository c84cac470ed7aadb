"""Dispatch module - Middleware chain and request handling."""

from roadrouter_core.dispatch.chain import DispatchChain, normalize_response
from roadrouter_core.dispatch.handler import (
    DispatchState,
    Outcome,
    RequestHandler,
    error_response,
)

__all__ = [
    "DispatchChain",
    "normalize_response",
    "DispatchState",
    "Outcome",
    "RequestHandler",
    "error_response",
]
