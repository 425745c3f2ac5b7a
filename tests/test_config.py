import json

from core.config import Config, load_config
from core.request_types import DEFAULT_ACCEPTED_STATUS_CODES


def test_missing_config_writes_defaults(tmp_path):
    config_file = tmp_path / "json-fetcher" / "config.json"

    config = load_config(config_file)

    assert config == Config()
    assert json.loads(config_file.read_text())["fetch"]["timeout"] == 30.0


def test_existing_config_is_loaded(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(
        json.dumps({"fetch": {"timeout": 5, "accepted_status_codes": [200, 204]}})
    )

    config = load_config(config_file)

    assert config.fetch.timeout == 5.0
    assert config.fetch.accepted() == [200, 204]
    assert config.limits.max_connections == 100


def test_corrupt_config_is_backed_up(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text("{not json")

    config = load_config(config_file)

    assert config == Config()
    assert (tmp_path / "config.json.bak").read_text() == "{not json"


def test_accepted_defaults_to_2xx():
    assert Config().fetch.accepted() == DEFAULT_ACCEPTED_STATUS_CODES
