"""Custom exception hierarchy for the JSON fetcher."""

from collections.abc import Collection


class FetchError(Exception):
    """Base exception for all fetch pipeline errors.

    Errors of the same kind compare equal on their discriminating payload only;
    diagnostic payloads (causes, raw bodies) never take part in equality.
    """

    def _key(self) -> tuple:
        return ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FetchError):
            return NotImplemented
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self), self._key()))


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""


class FetchCancelledError(Exception):
    """Raised into a fetch whose task was cancelled."""

    def __init__(self, message: str = "Fetch was cancelled") -> None:
        super().__init__(message)


class TransportError(FetchError):
    """Raised when the HTTP call fails before a response is obtained.

    Attributes:
        cause: Underlying transport exception
    """

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause


class StatusCodeError(FetchError):
    """Raised when the response status is not in the accepted set.

    Attributes:
        status_code: Status code received
        accepted_status_codes: Codes that would have been accepted
        body: Raw response body, if any
        transport_error: Transport error reported alongside the response, if any
    """

    def __init__(
        self,
        status_code: int,
        accepted_status_codes: Collection[int],
        body: bytes | None = None,
        transport_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"Status code {status_code} not in accepted {_describe_codes(accepted_status_codes)}"
        )
        self.status_code = status_code
        self.accepted_status_codes = accepted_status_codes
        self.body = body
        self.transport_error = transport_error

    def _key(self) -> tuple:
        return (self.status_code, frozenset(self.accepted_status_codes))


class EmptyBodyError(FetchError):
    """Response carried no body bytes."""

    def __init__(self) -> None:
        super().__init__("DataError")


class JsonParseError(FetchError):
    """Response body is not syntactically valid JSON."""

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(f"JsonError {cause}" if cause is not None else "JsonError")
        self.cause = cause


class KeypathError(FetchError):
    """Keypath did not resolve to a value.

    Attributes:
        keypath: The full keypath as requested, not the failing segment
    """

    def __init__(self, keypath: str) -> None:
        super().__init__(f"Keypath {keypath} is missing or not valid")
        self.keypath = keypath

    def _key(self) -> tuple:
        return (self.keypath,)


class DecodingError(FetchError):
    """Body or extracted value does not match the target type."""

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(f"DecodingError {cause}" if cause is not None else "DecodingError")
        self.cause = cause


def _describe_codes(codes: Collection[int]) -> str:
    if isinstance(codes, range) and codes.step == 1:
        return f"[{codes.start}, {codes.stop})"
    return "{" + ", ".join(str(code) for code in sorted(codes)) + "}"
