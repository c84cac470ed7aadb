"""CORS Middleware - Cross-Origin Resource Sharing.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from roadrouter_core.http.request import Request
from roadrouter_core.http.response import Response
from roadrouter_core.middleware.base import Continuation, Middleware

logger = logging.getLogger(__name__)


@dataclass
class CORSConfig:
    """CORS configuration."""

    allow_origins: List[str] = field(default_factory=lambda: ["*"])
    allow_methods: List[str] = field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
    )
    allow_headers: List[str] = field(
        default_factory=lambda: ["Content-Type", "Authorization", "X-Requested-With"]
    )
    expose_headers: List[str] = field(default_factory=list)
    allow_credentials: bool = False
    max_age: int = 86400


class CORSMiddleware(Middleware):
    """CORS middleware for cross-origin requests.

    Preflight OPTIONS requests are answered here and never reach the
    target. Subclass and pass a CORSConfig to ``__init__`` to change the
    policy, since middleware is built with no arguments.
    """

    def __init__(self, config: Optional[CORSConfig] = None):
        self.config = config or CORSConfig()

    def handle(self, request: Request, next: Continuation) -> Any:
        origin = request.get_header("Origin")

        if request.method == "OPTIONS" and request.get_header("Access-Control-Request-Method"):
            return self._preflight_response(origin)

        response = next(request)

        if not origin or not self._is_origin_allowed(origin):
            return response

        headers = getattr(response, "headers", None)
        if not isinstance(headers, dict):
            return response

        headers["Access-Control-Allow-Origin"] = self._allow_origin_value(origin)
        if self.config.allow_credentials:
            headers["Access-Control-Allow-Credentials"] = "true"
        if self.config.expose_headers:
            headers["Access-Control-Expose-Headers"] = ", ".join(self.config.expose_headers)

        return response

    def _preflight_response(self, origin: str) -> Response:
        """Generate preflight response."""
        response = Response(status=204)

        if origin and self._is_origin_allowed(origin):
            response.set_header("Access-Control-Allow-Origin", self._allow_origin_value(origin))
            response.set_header(
                "Access-Control-Allow-Methods", ", ".join(self.config.allow_methods)
            )
            response.set_header(
                "Access-Control-Allow-Headers", ", ".join(self.config.allow_headers)
            )
            response.set_header("Access-Control-Max-Age", str(self.config.max_age))

            if self.config.allow_credentials:
                response.set_header("Access-Control-Allow-Credentials", "true")
        else:
            logger.debug(f"Rejected preflight from origin {origin!r}")

        return response

    def _allow_origin_value(self, origin: str) -> str:
        if "*" in self.config.allow_origins and not self.config.allow_credentials:
            return "*"
        return origin

    def _is_origin_allowed(self, origin: str) -> bool:
        """Check if origin is allowed."""
        if "*" in self.config.allow_origins:
            return True
        return origin in self.config.allow_origins


__all__ = [
    "CORSMiddleware",
    "CORSConfig",
]
