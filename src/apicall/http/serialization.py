"""JSON conversion helpers shared by the call surfaces.

Request bodies go out through :func:`to_jsonable`; response bodies come back
through :func:`deserialize`, which uses a pydantic ``TypeAdapter`` so any type
pydantic understands can be used as a response type.
"""
from __future__ import annotations

import functools
import typing as _t

from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import ResponseParsingError

__all__ = [
    "deserialize",
    "to_jsonable",
]

T = _t.TypeVar("T")


def to_jsonable(body: _t.Any) -> _t.Any:
    """Convert a request body into data ``json.dumps`` accepts."""
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True)
    return TypeAdapter(_t.Any).dump_python(body, mode="json")


@functools.lru_cache(maxsize=256)
def _adapter_for(response_type: _t.Any) -> TypeAdapter:
    return TypeAdapter(response_type)


def _get_adapter(response_type: _t.Any) -> TypeAdapter:
    try:
        return _adapter_for(response_type)
    except TypeError:
        # Unhashable generic aliases skip the cache
        return TypeAdapter(response_type)


def deserialize(body: str, response_type: type[T] | _t.Any) -> T:
    """Decode a JSON body into ``response_type``.

    An empty body decodes to ``None``.

    Raises:
        ResponseParsingError: If the body is not valid JSON or does not
            validate against ``response_type``.
    """
    if not body:
        return None  # type: ignore[return-value]

    try:
        return _get_adapter(response_type).validate_json(body)
    except ValidationError as e:
        raise ResponseParsingError(
            f"Failed to parse response body as {_type_name(response_type)}: {e}",
            body=body,
            response_type=response_type,
        ) from e


def _type_name(response_type: _t.Any) -> str:
    return getattr(response_type, "__name__", None) or repr(response_type)
