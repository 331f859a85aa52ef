import pytest

from config import Config, load_config, validate_config
from core.errors import ValidationError


def test_load_config_defaults():
    cfg = load_config({"SRC_ACCESS_TOKEN": "tok"})

    assert cfg.endpoint == "https://sourcegraph.com"
    assert cfg.access_token == "tok"
    assert cfg.timeout_ms == 30000
    assert cfg.log_level == "info"
    assert cfg.http_verify is True
    assert cfg.graphql_url == "https://sourcegraph.com/.api/graphql"
    assert cfg.timeout_seconds == 30.0


def test_load_config_reads_overrides():
    cfg = load_config(
        {
            "SRC_ACCESS_TOKEN": " tok ",
            "SRC_ENDPOINT": "https://sg.example.com/",
            "TIMEOUT_MS": "1500",
            "LOG_LEVEL": "DEBUG",
            "HTTP_VERIFY": "false",
        }
    )

    assert cfg.endpoint == "https://sg.example.com"
    assert cfg.access_token == "tok"
    assert cfg.timeout_ms == 1500
    assert cfg.log_level == "debug"
    assert cfg.http_verify is False


def test_load_config_invalid_values_fall_back():
    cfg = load_config({"SRC_ACCESS_TOKEN": "tok", "TIMEOUT_MS": "soon", "LOG_LEVEL": "chatty"})
    assert cfg.timeout_ms == 30000
    assert cfg.log_level == "info"


def test_load_config_requires_token():
    with pytest.raises(ValidationError, match="SRC_ACCESS_TOKEN"):
        load_config({"SRC_ENDPOINT": "https://sg.example.com"})


@pytest.mark.parametrize(
    "cfg",
    [
        Config(endpoint="", access_token="tok"),
        Config(endpoint="https://sg.example.com", access_token=""),
        Config(endpoint="ftp://sg.example.com", access_token="tok"),
        Config(endpoint="sg.example.com", access_token="tok"),
        Config(endpoint="https://sg.example.com", access_token="tok", timeout_ms=0),
    ],
)
def test_validate_config_rejects(cfg):
    with pytest.raises(ValidationError):
        validate_config(cfg)


def test_validate_config_accepts():
    validate_config(Config(endpoint="http://localhost:7080", access_token="tok"))
