"""Token providers: how the SDK obtains and refreshes bearer tokens."""

import logging
from collections.abc import Callable
from typing import Any

from .protocols import AppTokenGetter, TokenProvider
from .utils import maybe_await

logger = logging.getLogger("echo-sdk.auth")


class ApiKeyTokenProvider:
    """Static API key; the token never changes and refresh is a no-op."""

    def __init__(self, api_key: str):
        self._api_key = api_key

    async def get_access_token(self) -> str | None:
        return self._api_key or None

    async def refresh_token(self) -> str | None:
        return await self.get_access_token()

    def __repr__(self) -> str:
        return "ApiKeyTokenProvider(api_key='***')"


class OAuthTokenProvider:
    """Token provider backed by caller-supplied callables.

    The embedding application keeps ownership of token storage (an OAuth
    session, a keyring, a web framework's session store); the SDK only calls
    back into it.

    Responsibilities:
    - Delegate token reads to ``get_token``
    - Run ``refresh`` and report failures to ``on_refresh_error``
    """

    def __init__(
        self,
        get_token: Callable[[], Any],
        refresh: Callable[[], Any],
        on_refresh_error: Callable[[Exception], Any] | None = None,
    ):
        """Initialize OAuthTokenProvider.

        Args:
            get_token: Returns the current token or None. May be async.
            refresh: Refreshes the stored token. May be async.
            on_refresh_error: Optional hook called with the refresh exception.
        """
        self._get_token = get_token
        self._refresh = refresh
        self.on_refresh_error = on_refresh_error

    async def get_access_token(self) -> str | None:
        token = await maybe_await(self._get_token())
        return token or None

    async def refresh_token(self) -> str | None:
        """Refresh the token; failures are reported, never raised.

        Returns:
            Whatever the refresh callable returned, or None on failure.
        """
        logger.debug("Refreshing access token")
        try:
            return await maybe_await(self._refresh())
        except Exception as e:
            logger.warning(f"Token refresh failed: {type(e).__name__}: {e}")
            if self.on_refresh_error is not None:
                await maybe_await(self.on_refresh_error(e))
            return None


def token_getter(provider: TokenProvider) -> AppTokenGetter:
    """Adapt a TokenProvider to the ``(app_id) -> token`` shape factories take.

    The provider is app-scoped already, so the app id is ignored.
    """

    async def get_token(app_id: str) -> str | None:
        return await provider.get_access_token()

    return get_token
