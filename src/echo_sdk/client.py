"""Echo control plane client: groups the resource clients."""

import logging
from functools import cache

import httpx

from .auth import ApiKeyTokenProvider
from .config import Settings, get_settings
from .consts import USER_AGENT
from .exceptions import ConfigError
from .models import EchoConfig
from .protocols import TokenProvider
from .resources import (
    AppsResource,
    BalanceResource,
    ModelsResource,
    PaymentsResource,
    UsersResource,
)

logger = logging.getLogger("echo-sdk.client")


class EchoClient:
    """Echo control plane client with authentication.

    Responsibilities:
    - Own the shared HTTP client and token provider
    - Expose one resource client per control plane area
    """

    def __init__(
        self,
        settings: Settings | None = None,
        token_provider: TokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
        config: EchoConfig | None = None,
    ):
        """Initialize EchoClient.

        Args:
            settings: Settings instance. If None, uses get_settings().
            token_provider: Token provider. If None, uses settings.api_key.
            http_client: HTTP client. If None, creates a new one.
            config: App configuration. If given, its control plane URL
                (base_echo_url plus base_path) replaces settings.base_echo_url.

        Raises:
            ConfigError: If no token provider is given and no API key is set.
        """
        self.settings = settings or get_settings()

        if token_provider is None:
            if not self.settings.api_key:
                raise ConfigError(
                    "No Echo API key configured",
                    suggestions=[
                        "Set the ECHO_API_KEY environment variable",
                        "Pass a token_provider to EchoClient",
                    ],
                )
            token_provider = ApiKeyTokenProvider(self.settings.api_key)
        self.token_provider = token_provider

        self.http_client = http_client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=self.settings.timeout_seconds,
            follow_redirects=True,
        )

        self.config = config
        self.base_url = (
            config.control_plane_url if config else self.settings.base_echo_url
        )

        resource_args = (self.http_client, self.token_provider, self.base_url)
        self.apps = AppsResource(*resource_args)
        self.balance = BalanceResource(*resource_args)
        self.users = UsersResource(*resource_args)
        self.payments = PaymentsResource(*resource_args)
        self.models = ModelsResource(*resource_args)

        logger.info(f"Echo client created for {self.base_url}")

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def __aenter__(self) -> "EchoClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


@cache
def get_client() -> EchoClient:
    """Get a cached EchoClient instance with default configuration.

    Raises:
        ConfigError: If ECHO_API_KEY is not set.
    """
    return EchoClient()
