"""WSGI Adapter - Serve a RequestHandler from any WSGI server.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Usage:
    from wsgiref.simple_server import make_server

    app = WSGIApplication(RequestHandler(router))
    make_server("127.0.0.1", 8080, app).serve_forever()
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List

from roadrouter_core.dispatch.handler import RequestHandler, error_response
from roadrouter_core.errors import RouterError
from roadrouter_core.http.request import Request
from roadrouter_core.http.response import STATUS_MESSAGES, Response

logger = logging.getLogger(__name__)


class WSGIApplication:
    """WSGI callable wrapping a RequestHandler."""

    def __init__(self, handler: RequestHandler):
        self.handler = handler

    def __call__(
        self,
        environ: Dict[str, Any],
        start_response: Callable[..., Any],
    ) -> Iterable[bytes]:
        try:
            request = Request.from_environ(environ)
        except RouterError as e:
            # Unsupported method: never reaches the router
            logger.info(f"Rejected request: {e.message}")
            response = error_response(e)
        else:
            response = self.handler.handle(request)

        if not isinstance(response, Response):
            response = Response(
                status=response.status,
                body=response.body,
                headers=dict(response.headers),
            )

        status = f"{response.status} {STATUS_MESSAGES.get(response.status, 'Unknown')}"
        body = response.body_bytes()
        headers: List[tuple] = list(response.wire_headers().items())

        start_response(status, headers)
        if environ.get("REQUEST_METHOD", "").upper() == "HEAD":
            return [b""]
        return [body]


__all__ = [
    "WSGIApplication",
]
