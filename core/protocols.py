"""Shared protocol definitions."""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from core.request_types import FetchResult, JsonRequest, TransportResponse

T = TypeVar("T")


class Transport(Protocol):
    """Protocol for the HTTP round trip (httpx in production, canned data in tests)."""

    async def send(self, request: JsonRequest) -> TransportResponse:
        """Perform the request.

        Transport-level failures are reported in ``TransportResponse.error``
        rather than raised.
        """
        ...


class Decoder(Protocol):
    """Protocol for typed JSON decoding."""

    def decode(self, data: bytes, target_type: type[T] | Any) -> T:
        """Decode ``data`` as ``target_type``, raising ``DecodingError``."""
        ...

    def parse(self, data: bytes) -> Any:
        """Parse ``data`` into a generic JSON tree, raising ``JsonParseError``."""
        ...

    def serialize(self, value: Any) -> bytes:
        """Serialize any JSON value (scalars included) back to bytes."""
        ...


class CompletionExecutor(Protocol):
    """Protocol for the context completions are delivered on.

    Matches ``concurrent.futures.Executor.submit`` so a single-thread pool can
    serve as the designated context.
    """

    def submit(self, fn: Callable[..., Any], /, *args: Any) -> Any: ...


class FetchLogger(Protocol):
    """Protocol for fetch logging (console, files)."""

    def log_request(self, request: JsonRequest, *, keypath: str | None = None) -> None: ...
    def log_result(
        self,
        request: JsonRequest,
        result: FetchResult[Any],
        *,
        keypath: str | None = None,
    ) -> None: ...
    def log_error(self, request: JsonRequest, status: int | None, message: str) -> None: ...
