from __future__ import annotations

import abc
import typing as _t

from .serialization import deserialize
from .errors import ResponseParsingError

__all__ = [
    "JsonResponseBodyParser",
    "ResponseBodyParser",
    "StringOnlyResponseBodyParser",
]

T = _t.TypeVar("T")


class ResponseBodyParser(abc.ABC):
    """Turns a raw response body into the caller's response type."""

    @abc.abstractmethod
    def parse(self, body: str, response_type: type[T] | _t.Any) -> T:
        pass


class JsonResponseBodyParser(ResponseBodyParser):
    """Decodes JSON bodies with pydantic."""

    def parse(self, body: str, response_type: type[T] | _t.Any) -> T:
        return deserialize(body, response_type)


class StringOnlyResponseBodyParser(ResponseBodyParser):
    """Accepts ``str`` as the only response type."""

    def parse(self, body: str, response_type: type[T] | _t.Any) -> T:
        if response_type is str:
            return body  # type: ignore[return-value]
        raise ResponseParsingError(
            f"StringOnlyResponseBodyParser cannot parse into {response_type!r}; "
            "configure a JsonResponseBodyParser instead",
            body=body,
            response_type=response_type,
        )
