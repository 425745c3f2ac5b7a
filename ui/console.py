"""Console request logger for the CLI."""

from threading import Lock
from typing import Any

from rich.console import Console
from rich.markup import escape

from core.config import Config
from core.request_types import Failure, FetchResult, JsonRequest
from ui.log_utils import write_cli_log, write_request_log

console = Console(stderr=True)


class ConsoleFetchLogger:
    """Print fetch activity with rich and mirror it to the log files."""

    def __init__(self, config: Config, console: Console = console):
        self.config = config
        self.console = console
        self._lock = Lock()
        self._request_count = 0
        self._error_count = 0

    @property
    def request_count(self) -> int:
        return self._request_count

    @property
    def error_count(self) -> int:
        return self._error_count

    def log_request(self, request: JsonRequest, *, keypath: str | None = None) -> None:
        """Log an outgoing request."""
        with self._lock:
            self._request_count += 1
        suffix = f" [dim](keypath {escape(keypath)})[/dim]" if keypath else ""
        self.console.print(f"[cyan]{request.method}[/cyan] {escape(request.url)}{suffix}")
        write_cli_log("REQUEST", request.url, method=request.method, keypath=keypath)

    def log_result(
        self,
        request: JsonRequest,
        result: FetchResult[Any],
        *,
        keypath: str | None = None,
    ) -> None:
        """Log a finished fetch and, when enabled, write its JSON record."""
        if not isinstance(result, Failure):
            self.console.print(f"[green]OK[/green] {escape(request.url)}")
        if self.config.logging.log_requests:
            write_request_log(request, result, keypath=keypath)

    def log_error(self, request: JsonRequest, status: int | None, message: str) -> None:
        """Log a failed fetch."""
        with self._lock:
            self._error_count += 1
        status_text = f" {status}" if status is not None else ""
        self.console.print(f"[red]ERROR{status_text}[/red] {escape(request.url)}: {escape(message)}")
        write_cli_log("ERROR", message, url=request.url, status=status)
