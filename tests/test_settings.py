"""Settings tests."""

import pytest
from pydantic import ValidationError

from sus_client.settings import Configuration


def test_configuration_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUS_ENDPOINT", "https://api.example.com/ ")
    monkeypatch.setenv("SUS_ACCESS_TOKEN", "token")
    monkeypatch.setenv("SUS_REQUESTS_PER_SECOND", "2.5")
    monkeypatch.setenv("SUS_REQUEST_BURST_SIZE", "5")
    monkeypatch.setenv("SUS_BLOCK_TILL_RATE_LIMIT_RESET", "false")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Configuration()

    assert settings.endpoint == "https://api.example.com"
    assert settings.access_token == "token"
    assert settings.requests_per_second == pytest.approx(2.5)
    assert settings.request_burst_size == 5
    assert settings.block_till_rate_limit_reset is False
    assert settings.timeout is None
    assert settings.log_level == "DEBUG"


def test_configuration_is_immutable() -> None:
    settings = Configuration(endpoint="https://api.example.com", access_token="token")

    with pytest.raises(ValidationError):
        settings.access_token = "other"  # type: ignore[misc]


@pytest.mark.parametrize(
    "overrides",
    [
        {"requests_per_second": 0},
        {"request_burst_size": 0},
        {"max_connections_per_route": 0},
        {"endpoint": "ftp://api.example.com"},
    ],
)
def test_configuration_rejects_invalid_values(overrides: dict) -> None:
    values = {"endpoint": "https://api.example.com", "access_token": "token", **overrides}

    with pytest.raises(ValidationError):
        Configuration(**values)
