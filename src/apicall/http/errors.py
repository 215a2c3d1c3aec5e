"""Exceptions raised by apicall HTTP calls."""

from __future__ import annotations

import typing as _t

if _t.TYPE_CHECKING:
    from .response import HttpResponse

__all__ = [
    "ApiCallError",
    "HttpApiCallError",
    "ResponseParsingError",
]


class ApiCallError(Exception):
    """Base class for exceptions raised by apicall."""
    pass


class HttpApiCallError(ApiCallError):
    """Raised when the server answers with a 4xx or 5xx status.

    The original response is kept on ``response`` so callers can inspect
    the status code and body.
    """

    def __init__(self, response: HttpResponse, message: str | None = None):
        self.response = response
        if message is None:
            message = (
                f"Http request call exception - status: {response.status_code}, "
                f"response: {response.body}"
            )
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def body(self) -> str:
        return self.response.body


class ResponseParsingError(ApiCallError):
    """Raised when a response body cannot be decoded into the requested type."""

    def __init__(self, message: str, *, body: str, response_type: _t.Any = None):
        super().__init__(message)
        self.body = body
        self.response_type = response_type
