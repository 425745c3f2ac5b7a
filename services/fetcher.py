"""Fetch JSON over HTTP and decode it into typed values."""

import asyncio
import logging
import threading
from collections.abc import Callable, Collection, Coroutine
from typing import Any, Generic, TypeVar

from core.decoding import PydanticDecoder
from core.exceptions import (
    DecodingError,
    EmptyBodyError,
    FetchCancelledError,
    FetchError,
    StatusCodeError,
    TransportError,
)
from core.keypath import extract_keypath
from core.protocols import CompletionExecutor, Decoder, FetchLogger, Transport
from core.request_types import (
    DEFAULT_ACCEPTED_STATUS_CODES,
    Failure,
    FetchResult,
    JsonRequest,
    Success,
    TransportResponse,
)
from services.executors import ImmediateExecutor

logger = logging.getLogger(__name__)

T = TypeVar("T")

Completion = Callable[[FetchResult[T]], Any]


def process_response(
    response: TransportResponse,
    target_type: type[T] | Any,
    decoder: Decoder,
    *,
    accepted_status_codes: Collection[int] | None = DEFAULT_ACCEPTED_STATUS_CODES,
    keypath: str | None = None,
) -> T:
    """Turn a finished round trip into a decoded value.

    Checks run in a fixed order: transport error, status code, empty body,
    then decoding (through the keypath when one is given). The first failing
    check raises the matching ``FetchError``.
    """
    if response.error is not None:
        raise TransportError(response.error)

    if (
        response.status_code is not None
        and accepted_status_codes
        and response.status_code not in accepted_status_codes
    ):
        raise StatusCodeError(
            response.status_code,
            accepted_status_codes,
            body=response.content,
            transport_error=response.error,
        )

    data = response.content
    if not data:
        raise EmptyBodyError()

    if keypath is None:
        return decoder.decode(data, target_type)

    # Malformed JSON surfaces here as JsonParseError, before any traversal
    tree = decoder.parse(data)
    value = extract_keypath(tree, keypath)
    try:
        data = decoder.serialize(value)
    except (TypeError, ValueError) as e:
        raise DecodingError(e) from e
    return decoder.decode(data, target_type)


class FetchTask(Generic[T]):
    """Handle for one fetch; its completion fires exactly once after start or cancel."""

    def __init__(
        self,
        fetcher: "JsonFetcher",
        request: JsonRequest,
        target_type: type[T] | Any,
        completion: Completion[T],
        accepted_status_codes: Collection[int] | None,
        keypath: str | None,
    ) -> None:
        self.request = request
        self.target_type = target_type
        self.keypath = keypath
        self._fetcher = fetcher
        self._completion = completion
        self._accepted_status_codes = accepted_status_codes
        self._lock = threading.Lock()
        self._future: asyncio.Future | Any = None
        self._started = False
        self._cancelled = False
        self._done = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    def start(self) -> "FetchTask[T]":
        """Schedule the fetch. Starting twice, or after cancel, does nothing."""
        with self._lock:
            if self._started or self._cancelled:
                return self
            self._future = self._fetcher._schedule(self._run())
            self._started = True
        self._future.add_done_callback(self._on_future_done)
        return self

    def cancel(self) -> None:
        """Cancel the fetch; the completion receives a cancelled TransportError."""
        with self._lock:
            if self._done or self._cancelled:
                return
            self._cancelled = True
            future = self._future
        if future is None:
            self._complete(Failure(TransportError(FetchCancelledError())))
        else:
            future.cancel()

    async def _run(self) -> None:
        result = await self._fetcher.fetch(
            self.request,
            self.target_type,
            accepted_status_codes=self._accepted_status_codes,
            keypath=self.keypath,
        )
        self._complete(result)

    def _on_future_done(self, future: Any) -> None:
        if future.cancelled():
            self._complete(Failure(TransportError(FetchCancelledError())))
            return
        error = future.exception()
        if error is not None and not self._done:
            logger.error("Fetch of %s raised", self.request.url, exc_info=error)
            self._complete(Failure(DecodingError(error)))

    def _complete(self, result: FetchResult[T]) -> None:
        with self._lock:
            if self._done:
                return
            self._done = True
        self._fetcher._executor.submit(self._completion, result)


class JsonFetcher:
    """Issue requests, validate status, and decode (optionally keypath-scoped) JSON.

    Args:
        transport: Performs the HTTP round trip.
        decoder: Typed decoder; defaults to pydantic.
        executor: Where completions are delivered; defaults to the finishing thread.
        loop: Loop fetches run on; defaults to the loop running at start time.
        logger: Optional request logger.
    """

    def __init__(
        self,
        transport: Transport,
        decoder: Decoder | None = None,
        executor: CompletionExecutor | None = None,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        logger: FetchLogger | None = None,
    ) -> None:
        self._transport = transport
        self._decoder = decoder or PydanticDecoder()
        self._executor = executor or ImmediateExecutor()
        self._loop = loop
        self._logger = logger
        self._pending: set[Any] = set()

    def fetch_decoded(
        self,
        request: JsonRequest | str,
        target_type: type[T] | Any,
        completion: Completion[T],
        *,
        accepted_status_codes: Collection[int] | None = DEFAULT_ACCEPTED_STATUS_CODES,
        keypath: str | None = None,
        auto_start: bool = True,
    ) -> FetchTask[T]:
        """Fetch and decode, reporting the result through ``completion``.

        A bare URL is sent as a GET with a JSON content type. Pass
        ``accepted_status_codes=None`` to skip status validation.
        """
        task = FetchTask(
            self,
            _as_request(request),
            target_type,
            completion,
            accepted_status_codes,
            keypath,
        )
        if auto_start:
            task.start()
        return task

    async def fetch(
        self,
        request: JsonRequest | str,
        target_type: type[T] | Any,
        *,
        accepted_status_codes: Collection[int] | None = DEFAULT_ACCEPTED_STATUS_CODES,
        keypath: str | None = None,
    ) -> FetchResult[T]:
        """Awaitable form of ``fetch_decoded``; returns the result directly."""
        request = _as_request(request)
        if self._logger:
            self._logger.log_request(request, keypath=keypath)

        try:
            response = await self._transport.send(request)
        except Exception as e:
            # Transports should report failures, but a raising one still ends the fetch
            response = TransportResponse(error=e)

        result: FetchResult[T]
        try:
            value = process_response(
                response,
                target_type,
                self._decoder,
                accepted_status_codes=accepted_status_codes,
                keypath=keypath,
            )
        except FetchError as e:
            logger.debug("%s %s failed: %s", request.method, request.url, e)
            result = Failure(e)
            if self._logger:
                self._logger.log_error(request, response.status_code, str(e))
        except Exception as e:
            # Unschemable target types and custom decoders raising foreign errors
            logger.debug("%s %s decode failed: %r", request.method, request.url, e)
            result = Failure(DecodingError(e))
            if self._logger:
                self._logger.log_error(request, response.status_code, str(e))
        else:
            result = Success(value)

        if self._logger:
            self._logger.log_result(request, result, keypath=keypath)
        return result

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> Any:
        """Run ``coro`` on the fetcher's loop, or the running one."""
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        loop = self._loop or running
        if loop is None:
            coro.close()
            raise RuntimeError("JsonFetcher needs a running event loop or an explicit loop")

        if loop is running:
            future = loop.create_task(coro)
        else:
            future = asyncio.run_coroutine_threadsafe(coro, loop)
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)
        return future


def _as_request(request: JsonRequest | str) -> JsonRequest:
    if isinstance(request, str):
        return JsonRequest.from_url(request)
    return request
