"""Provider factories: third-party LLM clients wired through the Echo router.

Each factory validates the app id, then builds the provider SDK's async client
with the router as base URL, a placeholder API key (always replaced by the
bearer header) and an httpx client whose transport is EchoTransport.
"""

import logging
from typing import Any

import anthropic
import groq
import httpx
import openai
from google import genai
from google.genai import types as genai_types

from .consts import PLACEHOLDER_API_KEY
from .exceptions import ConfigError, ProviderInjectionError
from .fetch import EchoTransport
from .models import EchoConfig
from .protocols import AppTokenGetter, InsufficientFundsCallback
from .utils import maybe_await
from .validation import validate_app_id

logger = logging.getLogger("echo-sdk.providers")


def _echo_transport(
    config: EchoConfig,
    get_token: AppTokenGetter,
    on_insufficient_funds: InsufficientFundsCallback | None,
    transport: httpx.AsyncBaseTransport | None,
) -> EchoTransport:
    app_id = config.app_id

    async def token_for_app() -> str | None:
        return await maybe_await(get_token(app_id))

    return EchoTransport(token_for_app, on_insufficient_funds, transport)


def _echo_http_client(
    client_class: type[httpx.AsyncClient],
    config: EchoConfig,
    get_token: AppTokenGetter,
    on_insufficient_funds: InsufficientFundsCallback | None,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.AsyncClient:
    """SDK default httpx client whose every request goes through echo_fetch.

    ``client_class`` is the SDK's DefaultAsyncHttpxClient so its timeout,
    connection limits and redirect policy are kept.
    """
    return client_class(
        transport=_echo_transport(config, get_token, on_insufficient_funds, transport)
    )


def _openai_compatible(
    provider: str,
    config: EchoConfig,
    get_token: AppTokenGetter,
    on_insufficient_funds: InsufficientFundsCallback | None,
    transport: httpx.AsyncBaseTransport | None,
    default_headers: dict[str, str] | None,
) -> openai.AsyncOpenAI:
    validate_app_id(config.app_id, f"create_echo_{provider}")
    client = openai.AsyncOpenAI(
        api_key=PLACEHOLDER_API_KEY,
        base_url=config.base_router_url,
        default_headers=default_headers,
        http_client=_echo_http_client(
            openai.DefaultAsyncHttpxClient,
            config,
            get_token,
            on_insufficient_funds,
            transport,
        ),
    )
    logger.info(f"Created Echo {provider} client for app {config.app_id}")
    return client


def create_echo_openai(
    config: EchoConfig,
    get_token: AppTokenGetter,
    on_insufficient_funds: InsufficientFundsCallback | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    default_headers: dict[str, str] | None = None,
) -> openai.AsyncOpenAI:
    """Create an OpenAI client billed through Echo.

    Args:
        config: Echo app configuration.
        get_token: Async callable ``(app_id) -> token | None``.
        on_insufficient_funds: Optional callback for 402 responses.
        transport: Inner httpx transport (for tests or custom networking).
        default_headers: Extra headers sent with every request.

    Raises:
        InvalidAppIdError: If config.app_id is not a UUID v4.
    """
    return _openai_compatible(
        "openai", config, get_token, on_insufficient_funds, transport, default_headers
    )


def create_echo_openrouter(
    config: EchoConfig,
    get_token: AppTokenGetter,
    on_insufficient_funds: InsufficientFundsCallback | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    default_headers: dict[str, str] | None = None,
) -> openai.AsyncOpenAI:
    """Create an OpenRouter (OpenAI-compatible) client billed through Echo."""
    return _openai_compatible(
        "openrouter",
        config,
        get_token,
        on_insufficient_funds,
        transport,
        default_headers,
    )


def create_echo_xai(
    config: EchoConfig,
    get_token: AppTokenGetter,
    on_insufficient_funds: InsufficientFundsCallback | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    default_headers: dict[str, str] | None = None,
) -> openai.AsyncOpenAI:
    """Create an xAI (OpenAI-compatible) client billed through Echo."""
    return _openai_compatible(
        "xai", config, get_token, on_insufficient_funds, transport, default_headers
    )


def create_echo_groq(
    config: EchoConfig,
    get_token: AppTokenGetter,
    on_insufficient_funds: InsufficientFundsCallback | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    default_headers: dict[str, str] | None = None,
) -> groq.AsyncGroq:
    """Create a Groq client billed through Echo."""
    validate_app_id(config.app_id, "create_echo_groq")
    client = groq.AsyncGroq(
        api_key=PLACEHOLDER_API_KEY,
        base_url=config.base_router_url,
        default_headers=default_headers,
        http_client=_echo_http_client(
            groq.DefaultAsyncHttpxClient,
            config,
            get_token,
            on_insufficient_funds,
            transport,
        ),
    )
    logger.info(f"Created Echo groq client for app {config.app_id}")
    return client


def create_echo_anthropic(
    config: EchoConfig,
    get_token: AppTokenGetter,
    on_insufficient_funds: InsufficientFundsCallback | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    default_headers: dict[str, str] | None = None,
) -> anthropic.AsyncAnthropic:
    """Create an Anthropic client billed through Echo.

    Raises:
        InvalidAppIdError: If config.app_id is not a UUID v4.
        ProviderInjectionError: If the installed anthropic SDK did not keep the
            Echo transport.
    """
    validate_app_id(config.app_id, "create_echo_anthropic")
    client = anthropic.AsyncAnthropic(
        api_key=PLACEHOLDER_API_KEY,
        base_url=config.base_router_url,
        default_headers=default_headers,
        http_client=_echo_http_client(
            anthropic.DefaultAsyncHttpxClient,
            config,
            get_token,
            on_insufficient_funds,
            transport,
        ),
    )
    verify_echo_transport(client, "anthropic", anthropic.__version__)
    logger.info(f"Created Echo anthropic client for app {config.app_id}")
    return client


def verify_echo_transport(client: Any, package: str, version: str) -> None:
    """Check that ``client`` sends through EchoTransport.

    Raises:
        ProviderInjectionError: If the SDK replaced or dropped the httpx client.
    """
    http_client = getattr(client, "_client", None)
    installed = getattr(http_client, "_transport", None)
    if isinstance(installed, EchoTransport):
        return

    raise ProviderInjectionError(
        f"The installed {package} SDK ({version}) did not accept the Echo "
        f"transport; requests would be sent without Echo credentials",
        errors=[f"Installed transport: {type(installed).__name__}"],
        suggestions=[
            f"Install a {package} version compatible with echo-sdk",
            "Check that the SDK still accepts the http_client argument",
        ],
        context={"package": package, "version": version},
    )


class _SyncTransportDisabled(httpx.BaseTransport):
    """Refuses sync requests so they cannot bypass Echo credentials."""

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        raise ConfigError(
            "Echo Google clients are async only: use client.aio",
            context={"url": str(request.url)},
        )


def create_echo_google(
    config: EchoConfig,
    get_token: AppTokenGetter,
    on_insufficient_funds: InsufficientFundsCallback | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    default_headers: dict[str, str] | None = None,
) -> genai.Client:
    """Create a Google GenAI client billed through Echo.

    Only ``client.aio`` is routed through Echo; sync calls raise ConfigError.
    """
    validate_app_id(config.app_id, "create_echo_google")
    echo_transport = _echo_transport(
        config, get_token, on_insufficient_funds, transport
    )
    client = genai.Client(
        api_key=PLACEHOLDER_API_KEY,
        http_options=genai_types.HttpOptions(
            base_url=config.base_router_url,
            headers=default_headers,
            client_args={"transport": _SyncTransportDisabled()},
            async_client_args={"transport": echo_transport},
        ),
    )
    logger.info(f"Created Echo google client for app {config.app_id}")
    return client
