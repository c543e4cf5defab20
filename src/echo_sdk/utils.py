"""Small helpers shared across the SDK."""

import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged.

    Lets callers supply either plain or ``async`` callables for token sources
    and callbacks.
    """
    if inspect.isawaitable(value):
        return await value
    return value


def join_url(base: str, path: str) -> str:
    """Join a base URL and a path without doubling or dropping the slash."""
    if not path:
        return base
    return f"{base.rstrip('/')}/{path.lstrip('/')}"
