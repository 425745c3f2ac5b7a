"""Typed JSON decoding backed by pydantic."""

import json
from functools import cache
from typing import Any, TypeVar

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from core.exceptions import DecodingError, JsonParseError

T = TypeVar("T")


@cache
def _cached_adapter(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


def get_type_adapter(target_type: Any) -> TypeAdapter:
    """Return a TypeAdapter for ``target_type`` (cached when hashable)."""
    try:
        return _cached_adapter(target_type)
    except TypeError:
        return TypeAdapter(target_type)


class PydanticDecoder:
    """Decode JSON bytes into pydantic-validated values."""

    def decode(self, data: bytes, target_type: type[T] | Any) -> T:
        try:
            return get_type_adapter(target_type).validate_json(data)
        except (ValidationError, PydanticSchemaGenerationError) as e:
            raise DecodingError(e) from e

    def parse(self, data: bytes) -> Any:
        """Parse into a generic tree; bare scalars are accepted at the top level."""
        try:
            return json.loads(data)
        except (ValueError, UnicodeDecodeError) as e:
            raise JsonParseError(e) from e

    def serialize(self, value: Any) -> bytes:
        return json.dumps(value, ensure_ascii=False).encode("utf-8")
