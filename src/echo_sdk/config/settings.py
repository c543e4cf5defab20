"""Configuration management."""

from functools import cache

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings

from ..consts import DEFAULT_ECHO_URL, DEFAULT_ROUTER_URL


class Settings(BaseSettings):
    """Process-wide SDK settings, overridable via ECHO_* environment variables."""

    model_config = ConfigDict(env_prefix="ECHO_", case_sensitive=False, extra="ignore")

    base_router_url: str = Field(
        default=DEFAULT_ROUTER_URL,
        description="Router endpoint that proxies and meters LLM provider calls",
    )
    base_echo_url: str = Field(
        default=DEFAULT_ECHO_URL,
        description="Control plane base URL (apps, balances, users, payments)",
    )
    api_key: str | None = Field(
        default=None, description="App-scoped API key used by the CLI"
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level",
    )
    timeout_seconds: int = Field(
        default=30, gt=0, le=300, description="HTTP request timeout in seconds"
    )

    def __repr__(self) -> str:
        # api_key is never rendered
        return (
            f"Settings(base_router_url='{self.base_router_url}', "
            f"base_echo_url='{self.base_echo_url}', log_level='{self.log_level}')"
        )


@cache
def get_settings() -> Settings:
    """Get a cached Settings instance."""
    return Settings()
