"""CLI entry point for json-fetch."""

import argparse
import asyncio
import json
import sys
from collections.abc import Collection
from typing import Any

from rich.console import Console

from app import open_fetcher
from core.config import CONFIG_FILE, Config, load_config
from core.exceptions import ConfigurationError
from core.request_types import Failure, FetchResult, JsonRequest
from ui.console import ConsoleFetchLogger
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json-fetch",
        description="Fetch JSON over HTTP and print the value at an optional keypath.",
    )
    parser.add_argument("url", nargs="?", help="URL to fetch")
    parser.add_argument("-k", "--keypath", help="dot-separated keys to descend into, e.g. user.name")
    parser.add_argument(
        "-X", "--method", help="HTTP method (default: GET, or POST when --data is given)"
    )
    parser.add_argument("-d", "--data", help="JSON request body")
    parser.add_argument(
        "-H", "--header", action="append", default=[], metavar="NAME:VALUE", help="extra header"
    )
    parser.add_argument(
        "--accept",
        action="append",
        default=[],
        metavar="CODE|LO-HI",
        help="accepted status code or inclusive range (default: 200-299)",
    )
    parser.add_argument(
        "--no-status-check", action="store_true", help="accept any response status"
    )
    parser.add_argument("--config", action="store_true", help="show config location")
    parser.add_argument(
        "--clear-logs", action="store_true", help="delete request logs before fetching"
    )
    return parser


def parse_headers(values: list[str]) -> dict[str, str]:
    """Parse ``NAME:VALUE`` header arguments."""
    headers: dict[str, str] = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise ConfigurationError(f"Invalid header (expected NAME:VALUE): {value}")
        headers[name.strip()] = content.strip()
    return headers


def parse_accepted(values: list[str], config: Config) -> Collection[int]:
    """Parse ``--accept`` arguments; falls back to configured codes."""
    if not values:
        return config.fetch.accepted()
    codes: set[int] = set()
    for value in values:
        try:
            if "-" in value:
                low, high = (int(part) for part in value.split("-", 1))
                codes.update(range(low, high + 1))
            else:
                codes.add(int(value))
        except ValueError as e:
            raise ConfigurationError(f"Invalid status code or range: {value}") from e
    return codes


def build_request(args: argparse.Namespace) -> JsonRequest:
    headers = parse_headers(args.header)
    body = None
    if args.data is not None:
        try:
            json.loads(args.data)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"--data is not valid JSON: {e}") from e
        body = args.data.encode()
    method = args.method or ("POST" if body is not None else "GET")
    return JsonRequest(args.url, method=method, headers=headers, body=body)


async def run(args: argparse.Namespace, config: Config) -> FetchResult[Any]:
    """Fetch once and return the result."""
    request = build_request(args)
    accepted = None if args.no_status_check else parse_accepted(args.accept, config)
    logger = ConsoleFetchLogger(config)
    async with open_fetcher(config, logger) as fetcher:
        return await fetcher.fetch(
            request,
            Any,
            accepted_status_codes=accepted,
            keypath=args.keypath,
        )


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config:
        console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
        return 0

    if args.clear_logs:
        deleted = clear_logs()
        write_cli_log("CLEAR", "Request logs cleared", deleted=deleted)
        console.print(f"[dim]Cleared {deleted} request logs[/dim]")
        if not args.url:
            return 0

    if not args.url:
        parser.print_help()
        return 2

    config = load_config()
    try:
        result = asyncio.run(run(args, config))
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        return 1

    if isinstance(result, Failure):
        write_cli_log("FAILED", str(result.error), url=args.url)
        return 1

    console.print_json(data=result.value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
