"""Configuration models and loading."""

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from core.request_types import DEFAULT_ACCEPTED_STATUS_CODES

CONFIG_DIR = Path.home() / ".config" / "json-fetcher"
CONFIG_FILE = CONFIG_DIR / "config.json"


class FetchSettings(BaseModel):
    timeout: float = 30.0
    follow_redirects: bool = True
    # None means the 2xx range
    accepted_status_codes: list[int] | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    def accepted(self) -> range | list[int]:
        """Accepted status codes, falling back to 2xx."""
        if self.accepted_status_codes is None:
            return DEFAULT_ACCEPTED_STATUS_CODES
        return self.accepted_status_codes


class LimitsSettings(BaseModel):
    max_connections: int = 100
    max_keepalive_connections: int = 20


class LoggingSettings(BaseModel):
    log_requests: bool = True


class Config(BaseModel):
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(config_file.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default
