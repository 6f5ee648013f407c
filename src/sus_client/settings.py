"""Client configuration management using Pydantic settings."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Configuration(BaseSettings):
    """Immutable configuration shared read-only by every call of one client."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    endpoint: str = Field(..., alias="SUS_ENDPOINT")
    access_token: str = Field(..., alias="SUS_ACCESS_TOKEN")
    user_agent: str = Field("sus-client-python/0.1.0", alias="SUS_USER_AGENT")
    requests_per_second: float = Field(10.0, gt=0, alias="SUS_REQUESTS_PER_SECOND")
    request_burst_size: int = Field(10, ge=1, alias="SUS_REQUEST_BURST_SIZE")
    max_connections_per_route: int = Field(20, ge=1, alias="SUS_MAX_CONNECTIONS_PER_ROUTE")
    block_till_rate_limit_reset: bool = Field(True, alias="SUS_BLOCK_TILL_RATE_LIMIT_RESET")
    # None disables connect/read timeouts entirely.
    timeout: float | None = Field(None, gt=0, alias="SUS_TIMEOUT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @field_validator("endpoint")
    @classmethod
    def _strip_endpoint(cls, value: str) -> str:
        """Normalise the base URL so paths can be joined with a single slash."""

        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Endpoint must be an http(s) URL: {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache(maxsize=1)
def get_settings() -> Configuration:
    """Return cached Configuration instance loaded from environment variables."""

    return Configuration()
