from __future__ import annotations

import typing as _t

from pydantic import BaseModel, ConfigDict, Field

from .request import HttpMethod

__all__ = [
    "HttpApiCallResult",
    "HttpResponse",
]


class HttpResponse(BaseModel):
    """Status code and raw body of a completed call."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str = ""

    @classmethod
    def of(cls, status_code: int, body: str | None) -> HttpResponse:
        return cls(status_code=status_code, body=body or "")

    @property
    def is_error(self) -> bool:
        """True for 4xx and 5xx statuses."""
        return 400 <= self.status_code < 600


class HttpApiCallResult(BaseModel):
    """Everything about one exchange, handed to the logging hook."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: HttpMethod
    url: str
    header: dict[str, str] = Field(default_factory=dict)
    request: _t.Any | None = None
    response: HttpResponse

    @classmethod
    def of(
        cls,
        method: HttpMethod,
        url: str,
        header: dict[str, str] | None,
        request: _t.Any | None,
        response: HttpResponse,
    ) -> HttpApiCallResult:
        return cls(
            method=method,
            url=url,
            header=dict(header or {}),
            request=request,
            response=response,
        )
