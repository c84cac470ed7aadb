"""Response - Outbound HTTP response object.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from roadrouter_core.errors import InvalidStatusCodeError

STATUS_MESSAGES = {
    100: "Continue",
    101: "Switching Protocol",
    200: "OK",
    201: "Created",
    202: "Accepted",
    204: "No Content",
    205: "Reset Content",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Payload Too Large",
    414: "URI Too Long",
    415: "Unsupported Media Type",
    416: "Range Not Satisfiable",
    417: "Expectation Failed",
    426: "Upgrade Required",
    428: "Precondition Required",
    429: "Too Many Requests",
    431: "Request Header Fields Too Large",
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
}

VALID_STATUS_CODES = frozenset(STATUS_MESSAGES)

DEFAULT_CONTENT_TYPE = "application/json"


def is_valid_status(code: Any) -> bool:
    """Check if code is one of the recognized status codes."""
    return isinstance(code, int) and not isinstance(code, bool) and code in VALID_STATUS_CODES


@runtime_checkable
class ResponseLike(Protocol):
    """Anything exposing status, headers and body."""

    status: int
    headers: Dict[str, str]
    body: Any


@dataclass
class Response:
    """HTTP Response object.

    The body is kept as the raw value until ``to_bytes`` serializes it,
    so layers on the way out can still inspect and rewrite it.
    """

    status: int = 200
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    content_type: str = DEFAULT_CONTENT_TYPE

    def __post_init__(self):
        if not is_valid_status(self.status):
            raise InvalidStatusCodeError(
                f'"{self.status}" is not a valid response status code.'
            )
        self.content_type = self.get_header("Content-Type", self.content_type)

    @property
    def status_message(self) -> str:
        """Get status message."""
        return STATUS_MESSAGES.get(self.status, "Unknown")

    @property
    def is_success(self) -> bool:
        """Check if response is successful (2xx)."""
        return 200 <= self.status < 300

    @property
    def is_error(self) -> bool:
        """Check if response is error (4xx or 5xx)."""
        return self.status >= 400

    def set_status(self, code: int) -> "Response":
        """Set status code, rejecting unrecognized codes."""
        if not is_valid_status(code):
            raise InvalidStatusCodeError(
                f'"{code}" is not a valid response status code.'
            )
        self.status = code
        return self

    def set_body(self, body: Any) -> "Response":
        """Set body value."""
        self.body = body
        return self

    def set_header(self, name: str, value: str) -> "Response":
        """Set header value, replacing any existing header of that name."""
        for key in [k for k in self.headers if k.lower() == name.lower()]:
            del self.headers[key]
        self.headers[name] = value
        if name.lower() == "content-type":
            self.content_type = value
        return self

    def get_header(self, name: str, default: str = "") -> str:
        """Get header value (case-insensitive)."""
        for key, value in self.headers.items():
            if key.lower() == name.lower():
                return value
        return default

    def body_bytes(self) -> bytes:
        """Serialize the body for the wire."""
        body = self.body
        if body is None:
            return b""
        if isinstance(body, bytes):
            return body
        if isinstance(body, (dict, list)) and "json" in self.content_type:
            return json.dumps(body, ensure_ascii=False, separators=(",", ":")).encode()
        return str(body).encode()

    def wire_headers(self) -> Dict[str, str]:
        """Headers as they go out, with Content-Type and Content-Length."""
        headers = dict(self.headers)
        if not self.get_header("Content-Type"):
            headers["Content-Type"] = self.content_type
        for key in [k for k in headers if k.lower() == "content-length"]:
            del headers[key]
        headers["Content-Length"] = str(len(self.body_bytes()))
        return headers

    def to_bytes(self) -> bytes:
        """Convert to raw HTTP response."""
        lines = [f"HTTP/1.1 {self.status} {self.status_message}"]
        for key, value in self.wire_headers().items():
            lines.append(f"{key}: {value}")

        lines.append("")
        header_bytes = "\r\n".join(lines).encode()

        return header_bytes + b"\r\n" + self.body_bytes()

    @classmethod
    def json(
        cls,
        data: Any,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ) -> "Response":
        """Create JSON response."""
        resp_headers = dict(headers or {})
        resp_headers["Content-Type"] = "application/json"
        return cls(status=status, body=data, headers=resp_headers)

    @classmethod
    def text(
        cls,
        text: str,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ) -> "Response":
        """Create text response."""
        resp_headers = dict(headers or {})
        resp_headers["Content-Type"] = "text/plain"
        return cls(status=status, body=text, headers=resp_headers)

    @classmethod
    def error(cls, status: int, message: Optional[str] = None) -> "Response":
        """Create structured error response."""
        msg = message or STATUS_MESSAGES.get(status, "Error")
        return cls.json(
            {"status": "ERROR", "code": status, "message": msg},
            status=status,
        )


def is_response(value: Any) -> bool:
    """Check if value already satisfies the response contract."""
    return isinstance(value, (Response, ResponseLike))


__all__ = [
    "STATUS_MESSAGES",
    "VALID_STATUS_CODES",
    "DEFAULT_CONTENT_TYPE",
    "Response",
    "ResponseLike",
    "is_response",
    "is_valid_status",
]
