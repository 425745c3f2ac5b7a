"""Shared logging utilities."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from pydantic_core import to_jsonable_python

from core.request_types import Failure, FetchResult, JsonRequest

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "fetch.log"


def write_request_log(
    request: JsonRequest,
    result: FetchResult[Any],
    *,
    keypath: str | None = None,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write a single request/outcome log entry."""
    payload: dict[str, Any] = {
        "timestamp": _utc_now(),
        "method": request.method,
        "url": request.url,
        "headers": _redact_headers(dict(request.headers)),
        "body": _decode_body(request.body),
        "keypath": keypath,
    }
    if isinstance(result, Failure):
        payload["error"] = {"kind": type(result.error).__name__, "message": str(result.error)}
    else:
        payload["value"] = to_jsonable_python(result.value, fallback=str)
    return _write_json(log_root / "requests", payload)


def write_cli_log(
    level: str,
    message: str,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    CLI_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with CLI_LOG_FILE.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path | None = None) -> int:
    """Delete request log files; returns how many were removed."""
    folder = (log_root or LOG_ROOT) / "requests"
    if not folder.exists():
        return 0

    deleted = 0
    for old_file in folder.glob("*.json"):
        try:
            old_file.unlink()
            deleted += 1
        except OSError:
            pass
    return deleted


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _decode_body(body: bytes | None) -> Any:
    if not body:
        return None
    text = body.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if "key" in key.lower() or "authorization" in key.lower():
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
