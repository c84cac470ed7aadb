"""Request - Inbound HTTP request object.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qsl

from roadrouter_core.errors import InvalidMethodError

HTTP_METHODS = (
    "CONNECT",
    "DELETE",
    "GET",
    "HEAD",
    "OPTIONS",
    "PATCH",
    "POST",
    "PUT",
    "TRACE",
)


def _strip_query(uri: str) -> str:
    return uri.split("?", 1)[0]


@dataclass(frozen=True)
class Request:
    """HTTP Request object.

    Immutable once built. Layers that need to hand a modified request
    inward create a copy with ``with_context`` or ``with_params``.
    """

    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    form: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    remote_addr: str = ""
    protocol: str = "HTTP/1.1"
    timestamp: float = field(default_factory=time.time)

    # Filled in by dispatch
    params: Dict[str, str] = field(default_factory=dict)
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        method = self.method.upper()
        if method not in HTTP_METHODS:
            raise InvalidMethodError(f'"{method}" is an invalid HTTP method.')
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "path", _strip_query(self.path))

    @property
    def content_type(self) -> str:
        """Get Content-Type header."""
        return self.get_header("Content-Type")

    @property
    def is_json(self) -> bool:
        """Check if request is JSON."""
        return "application/json" in self.content_type

    def json(self) -> Any:
        """Parse body as JSON."""
        return json.loads(self.body.decode())

    def text(self) -> str:
        """Get body as text."""
        return self.body.decode()

    def get_header(self, name: str, default: str = "") -> str:
        """Get header value (case-insensitive)."""
        for key, value in self.headers.items():
            if key.lower() == name.lower():
                return value
        return default

    def with_params(self, params: Mapping[str, str]) -> "Request":
        """Copy of this request carrying matched path variables."""
        return replace(self, params=dict(params))

    def with_context(self, **values: Any) -> "Request":
        """Copy of this request with extra context entries."""
        context = dict(self.context)
        context.update(values)
        return replace(self, context=context)

    @classmethod
    def from_raw(cls, data: bytes) -> "Request":
        """Parse request from raw HTTP data."""
        head, _, body = data.partition(b"\r\n\r\n")
        lines = head.split(b"\r\n")

        # Parse request line
        parts = lines[0].decode().split(" ")
        method = parts[0]
        target = parts[1] if len(parts) > 1 else "/"
        protocol = parts[2] if len(parts) > 2 else "HTTP/1.1"

        query: Dict[str, str] = {}
        if "?" in target:
            query = dict(parse_qsl(target.split("?", 1)[1]))

        headers = {}
        for line in lines[1:]:
            if b":" in line:
                key, value = line.decode().split(":", 1)
                headers[key.strip()] = value.strip()

        return cls(
            method=method,
            path=target,
            headers=headers,
            query=query,
            form=_parse_form(headers, body),
            body=body,
            protocol=protocol,
        )

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> "Request":
        """Build a request from a WSGI environ."""
        headers = {}
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                name = key[5:].replace("_", "-").title()
                headers[name] = value
        if environ.get("CONTENT_TYPE"):
            headers["Content-Type"] = environ["CONTENT_TYPE"]
        if environ.get("CONTENT_LENGTH"):
            headers["Content-Length"] = environ["CONTENT_LENGTH"]

        body = b""
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        if length > 0 and environ.get("wsgi.input") is not None:
            body = environ["wsgi.input"].read(length)

        return cls(
            method=environ.get("REQUEST_METHOD", "GET"),
            path=environ.get("PATH_INFO", "") or "/",
            headers=headers,
            query=dict(parse_qsl(environ.get("QUERY_STRING", ""))),
            form=_parse_form(headers, body),
            body=body,
            remote_addr=environ.get("REMOTE_ADDR", ""),
            protocol=environ.get("SERVER_PROTOCOL", "HTTP/1.1"),
        )


def _parse_form(headers: Mapping[str, str], body: bytes) -> Dict[str, str]:
    content_type: Optional[str] = None
    for key, value in headers.items():
        if key.lower() == "content-type":
            content_type = value
    if content_type and content_type.startswith("application/x-www-form-urlencoded"):
        return dict(parse_qsl(body.decode()))
    return {}


__all__ = [
    "HTTP_METHODS",
    "Request",
]
