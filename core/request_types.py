"""Shared request and result data types."""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, NoReturn, TypeVar

from pydantic import BaseModel

from core.exceptions import FetchError
from core.headers import HeaderBuilder

T = TypeVar("T")

DEFAULT_ACCEPTED_STATUS_CODES = range(200, 300)


@dataclass(frozen=True)
class JsonRequest:
    """Immutable description of a single HTTP request."""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict, hash=False)
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        headers = HeaderBuilder().build_json_headers(self.headers)
        object.__setattr__(self, "headers", MappingProxyType(headers))

    @classmethod
    def from_url(cls, url: str) -> "JsonRequest":
        """GET request with the JSON content type set."""
        return cls(url)

    @classmethod
    def with_json(
        cls,
        url: str,
        payload: Any,
        method: str = "POST",
        headers: Mapping[str, str] | None = None,
    ) -> "JsonRequest":
        """Request whose body is the JSON encoding of ``payload``."""
        if isinstance(payload, BaseModel):
            body = payload.model_dump_json().encode()
        else:
            body = json.dumps(payload).encode()
        return cls(url, method=method, headers=headers or {}, body=body)


@dataclass(frozen=True)
class TransportResponse:
    """What the transport reports once the round trip finishes."""

    status_code: int | None = None
    content: bytes | None = None
    error: BaseException | None = None


@dataclass(frozen=True)
class Success(Generic[T]):
    """Decoded value of a fetch."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Error that terminated a fetch."""

    error: FetchError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise self.error


FetchResult = Success[T] | Failure
