"""HTTP module - Request and response value objects."""

from roadrouter_core.http.request import HTTP_METHODS, Request
from roadrouter_core.http.response import (
    STATUS_MESSAGES,
    VALID_STATUS_CODES,
    Response,
    ResponseLike,
    is_response,
    is_valid_status,
)

__all__ = [
    "HTTP_METHODS",
    "Request",
    "STATUS_MESSAGES",
    "VALID_STATUS_CODES",
    "Response",
    "ResponseLike",
    "is_response",
    "is_valid_status",
]
