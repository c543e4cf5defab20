"""Shared test helpers"""

import json

import httpx

VALID_APP_ID = "60601628-cdb7-481e-8f7e-921981220348"
OTHER_APP_ID = "3f2b8c1e-9d4a-4f6b-a2c7-5e8d1b9f0a34"
TEST_ECHO_URL = "https://echo.test"
TEST_ROUTER_URL = "https://router.echo.test"


class RecordingHandler:
    """MockTransport handler that records requests and replays canned responses.

    ``responses`` is consumed in order; once exhausted the last one repeats.
    Entries may be httpx.Response objects or exceptions to raise.
    """

    def __init__(self, *responses):
        self.responses = list(responses) or [httpx.Response(200, json={})]
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.responses)) - 1
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            content=response.content,
        )

    @property
    def auth_headers(self) -> list[str | None]:
        return [r.headers.get("Authorization") for r in self.requests]

    def json_bodies(self) -> list:
        return [json.loads(r.content) if r.content else None for r in self.requests]


def token_sequence(*tokens):
    """Async token getter returning ``tokens`` in order, repeating the last."""
    calls = []

    async def get_token(*args):
        calls.append(args)
        return tokens[min(len(calls), len(tokens)) - 1]

    get_token.calls = calls
    return get_token
