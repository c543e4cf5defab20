"""Echo SDK

Client-side request layer for the Echo LLM router: token providers, an
authenticated fetch with a single token-expiry retry and an insufficient-funds
callback, provider client factories, and control plane resource clients with
normalized errors.
"""

from .auth import ApiKeyTokenProvider, OAuthTokenProvider, token_getter
from .client import EchoClient, get_client
from .config import Settings, get_settings, setup_logging
from .consts import PACKAGE_VERSION
from .errors import (
    get_user_friendly_message,
    is_auth_error,
    is_retryable_error,
    parse_echo_error,
    with_retry,
)
from .exceptions import (
    ConfigError,
    EchoError,
    ErrorCode,
    HttpResponseError,
    InvalidAppIdError,
    ProviderInjectionError,
)
from .fetch import EchoTransport, echo_fetch
from .models import EchoConfig
from .protocols import TokenProvider
from .providers import (
    create_echo_anthropic,
    create_echo_google,
    create_echo_groq,
    create_echo_openai,
    create_echo_openrouter,
    create_echo_xai,
)
from .validation import is_valid_app_id, validate_app_id

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "get_settings",
    "get_client",
    "setup_logging",
    "Settings",
    "EchoConfig",
    "EchoClient",
    "TokenProvider",
    "ApiKeyTokenProvider",
    "OAuthTokenProvider",
    "token_getter",
    "validate_app_id",
    "is_valid_app_id",
    "echo_fetch",
    "EchoTransport",
    "create_echo_openai",
    "create_echo_anthropic",
    "create_echo_google",
    "create_echo_groq",
    "create_echo_openrouter",
    "create_echo_xai",
    "parse_echo_error",
    "is_auth_error",
    "is_retryable_error",
    "get_user_friendly_message",
    "with_retry",
    "EchoError",
    "ErrorCode",
    "ConfigError",
    "InvalidAppIdError",
    "ProviderInjectionError",
    "HttpResponseError",
]
