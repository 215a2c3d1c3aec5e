from __future__ import annotations

import typing as _t
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "HttpMethod",
    "HttpRequest",
    "HttpRequestWithoutResponse",
]


class HttpMethod(str, Enum):
    """HTTP methods accepted by the call surface."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class HttpRequestWithoutResponse(BaseModel):
    """Describes a call whose response body the caller does not need."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: HttpMethod
    url: str
    header: dict[str, str] = Field(default_factory=dict)
    body: _t.Any | None = None

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, value: _t.Any) -> _t.Any:
        if isinstance(value, str) and not isinstance(value, HttpMethod):
            return value.upper()
        return value


class HttpRequest(HttpRequestWithoutResponse):
    """Describes a call and the type its response body is parsed into.

    ``response_type`` defaults to ``str``, which returns the raw body.
    Anything pydantic can validate from JSON is accepted: models,
    dataclasses, ``dict``, ``list[int]`` and so on.
    """

    response_type: _t.Any = str
