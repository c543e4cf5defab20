"""Authenticated fetch for router-bound provider traffic.

Every request gets the current bearer token, survives exactly one token expiry
(401) by re-fetching the token and retrying, and reports insufficient funds
(402) through a callback instead of raising. The wrapper keeps no state between
calls; token caching belongs to the token provider.
"""

import logging
from typing import Any

import httpx

from .consts import STATUS_PAYMENT_REQUIRED, STATUS_UNAUTHORIZED
from .protocols import FetchFn, InsufficientFundsCallback, TokenGetter
from .utils import maybe_await

logger = logging.getLogger("echo-sdk.fetch")

AUTHORIZATION = "Authorization"

# Recomputed by httpx from the cloned body
_BODY_FRAMING_HEADERS = ("Content-Length", "Transfer-Encoding")


def _to_request(
    source: httpx.Request | httpx.URL | str, init: dict[str, Any]
) -> httpx.Request:
    """Normalize ``(url, **init)`` or a prebuilt request into an httpx.Request.

    A prebuilt request only accepts a ``headers`` override. Its method, URL and
    headers are never changed; without an override it is used as-is, so its
    body is buffered in place when echo_fetch reads it for a possible retry.
    """
    if isinstance(source, httpx.Request):
        extra_headers = init.pop("headers", None)
        if init:
            raise TypeError(
                f"Unexpected options for a prebuilt request: {sorted(init)}"
            )
        if extra_headers is None:
            return source
        headers = source.headers.copy()
        headers.update(extra_headers)
        return httpx.Request(
            source.method,
            source.url,
            headers=headers,
            stream=source.stream,
            extensions=source.extensions,
        )

    method = init.pop("method", "GET")
    return httpx.Request(method, source, **init)


def _with_token(request: httpx.Request, token: str | None) -> httpx.Request:
    """Clone ``request`` with the wrapper's credentials.

    Any caller-supplied Authorization header is discarded; the bearer header is
    set only when a token is available. The body must already be read.
    """
    headers = request.headers.copy()
    headers.pop(AUTHORIZATION, None)
    for name in _BODY_FRAMING_HEADERS:
        headers.pop(name, None)
    if token:
        headers[AUTHORIZATION] = f"Bearer {token}"

    return httpx.Request(
        request.method,
        request.url,
        headers=headers,
        content=request.content,
        extensions=request.extensions,
    )


def echo_fetch(
    fetch: FetchFn,
    get_token: TokenGetter,
    on_insufficient_funds: InsufficientFundsCallback | None = None,
):
    """Wrap ``fetch`` with token injection, one 401 retry and a 402 side channel.

    Args:
        fetch: Underlying request primitive, ``(httpx.Request) -> httpx.Response``.
        get_token: Zero-argument async callable returning the token or None.
            Called again for the retry; any refresh logic belongs inside it.
        on_insufficient_funds: Called with no arguments when the final response
            is 402. May be sync or async.

    Returns:
        Async callable accepting a prebuilt ``httpx.Request`` or a URL plus
        request keyword arguments (method, headers, content, json, ...). The
        request body is read once up front (``aread``) so a streamed body can
        be resent after a 401. It returns the final response whatever its
        status; only exceptions raised by ``fetch`` or ``get_token`` propagate.
    """

    async def wrapped(
        source: httpx.Request | httpx.URL | str, **init: Any
    ) -> httpx.Response:
        original = _to_request(source, init)
        await original.aread()

        token = await get_token()
        response = await fetch(_with_token(original, token))

        if response.status_code == STATUS_UNAUTHORIZED:
            logger.info(
                f"{original.method} {original.url} returned 401, "
                "retrying once with a re-fetched token"
            )
            await response.aclose()
            token = await get_token()
            response = await fetch(_with_token(original, token))

        if response.status_code == STATUS_PAYMENT_REQUIRED:
            logger.info(
                f"{original.method} {original.url} returned 402 (insufficient funds)"
            )
            if on_insufficient_funds is not None:
                await maybe_await(on_insufficient_funds())

        return response

    return wrapped


class EchoTransport(httpx.AsyncBaseTransport):
    """httpx transport that routes every request through echo_fetch.

    This is the injection point for provider SDKs, which accept an
    ``httpx.AsyncClient``: ``httpx.AsyncClient(transport=EchoTransport(...))``.
    """

    def __init__(
        self,
        get_token: TokenGetter,
        on_insufficient_funds: InsufficientFundsCallback | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize EchoTransport.

        Args:
            get_token: Zero-argument async token source.
            on_insufficient_funds: Optional 402 callback.
            transport: Inner transport. Defaults to httpx.AsyncHTTPTransport().
        """
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._fetch = echo_fetch(
            self._transport.handle_async_request, get_token, on_insufficient_funds
        )

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._fetch(request)

    async def aclose(self) -> None:
        await self._transport.aclose()
