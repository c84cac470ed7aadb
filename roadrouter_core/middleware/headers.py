"""Headers Middleware - Request/response header manipulation.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional

from roadrouter_core.http.request import Request
from roadrouter_core.middleware.base import Continuation, Middleware


class HeadersMiddleware(Middleware):
    """Simple header manipulation middleware.

    Usage:
        class SecurityHeaders(HeadersMiddleware):
            add_response = {"X-Frame-Options": "DENY"}

        router.register_middleware("secure", SecurityHeaders)
    """

    add_request: Dict[str, str] = {}
    add_response: Dict[str, str] = {}
    remove_request: List[str] = []
    remove_response: List[str] = []

    def __init__(
        self,
        add_request_headers: Optional[Dict[str, str]] = None,
        add_response_headers: Optional[Dict[str, str]] = None,
        remove_request_headers: Optional[List[str]] = None,
        remove_response_headers: Optional[List[str]] = None,
    ):
        self.add_request = dict(add_request_headers or self.add_request)
        self.add_response = dict(add_response_headers or self.add_response)
        self.remove_request = list(remove_request_headers or self.remove_request)
        self.remove_response = list(remove_response_headers or self.remove_response)

    def handle(self, request: Request, next: Continuation) -> Any:
        if self.add_request or self.remove_request:
            request = self._rewrite_request(request)

        response = next(request)

        headers = getattr(response, "headers", None)
        if isinstance(headers, dict):
            for key in self.remove_response:
                headers.pop(key, None)
            headers.update(self.add_response)

        return response

    def _rewrite_request(self, request: Request) -> Request:
        """Copy of the request with headers added/removed."""
        headers = {
            key: value
            for key, value in request.headers.items()
            if key not in self.remove_request
        }
        headers.update(self.add_request)
        return replace(request, headers=headers)


__all__ = [
    "HeadersMiddleware",
]
