"""Protocol definitions for dependency injection and interface contracts."""

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

import httpx

# Zero-argument token source used by the fetch layer
TokenGetter = Callable[[], Awaitable[str | None]]

# Per-app token source accepted by the provider factories
AppTokenGetter = Callable[[str], Awaitable[str | None]]

# Underlying request primitive wrapped by echo_fetch
FetchFn = Callable[[httpx.Request], Awaitable[httpx.Response]]

# Invoked with no arguments when the router answers 402; may be sync or async
InsufficientFundsCallback = Callable[[], Awaitable[None] | None]


@runtime_checkable
class TokenProvider(Protocol):
    """Protocol for authentication token providers."""

    async def get_access_token(self) -> str | None:
        """Get the current access token.

        Returns:
            Bearer token string, or None when no token exists yet.
        """
        ...

    async def refresh_token(self) -> str | None:
        """Trigger a token refresh.

        Returns:
            The refreshed token, advisory only. Callers re-read it with
            get_access_token().
        """
        ...
