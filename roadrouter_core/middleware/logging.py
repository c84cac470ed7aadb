"""Logging Middleware - Request/response logging.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, List, Optional

from roadrouter_core.http.request import Request
from roadrouter_core.middleware.base import Continuation, Middleware

logger = logging.getLogger(__name__)


@dataclass
class LoggingConfig:
    """Logging middleware configuration."""

    log_headers: bool = False
    log_query: bool = True
    skip_paths: List[str] = field(default_factory=list)
    request_id_header: str = "X-Request-Id"


class LoggingMiddleware(Middleware):
    """Logging middleware for requests and responses.

    Tags the request context with a short request id and echoes it back
    in a response header.
    """

    def __init__(self, config: Optional[LoggingConfig] = None):
        self.config = config or LoggingConfig()

    def handle(self, request: Request, next: Continuation) -> Any:
        if request.path in self.config.skip_paths:
            return next(request)

        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        log_parts = [f"[{request_id}] --> {request.method} {request.path}"]
        if self.config.log_query and request.query:
            log_parts.append(f"query={request.query}")
        if self.config.log_headers:
            log_parts.append(f"headers={request.headers}")
        logger.info(" ".join(log_parts))

        try:
            response = next(request.with_context(request_id=request_id))
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                f"[{request_id}] <-- {type(e).__name__} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        status = getattr(response, "status", 0)
        logger.info(f"[{request_id}] <-- {status} ({duration_ms:.2f}ms)")

        headers = getattr(response, "headers", None)
        if isinstance(headers, dict):
            headers[self.config.request_id_header] = request_id
        return response


__all__ = [
    "LoggingConfig",
    "LoggingMiddleware",
]
