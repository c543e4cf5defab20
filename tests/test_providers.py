"""Tests for provider factories"""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import anthropic
import groq
import httpx
import openai
import pytest
from google import genai

from echo_sdk.consts import PLACEHOLDER_API_KEY
from echo_sdk.exceptions import (
    ConfigError,
    ErrorCode,
    InvalidAppIdError,
    ProviderInjectionError,
)
from echo_sdk.fetch import EchoTransport
from echo_sdk.models import EchoConfig
from echo_sdk.providers import (
    create_echo_anthropic,
    create_echo_google,
    create_echo_groq,
    create_echo_openai,
    create_echo_openrouter,
    create_echo_xai,
    verify_echo_transport,
)
from tests.helpers import (
    OTHER_APP_ID,
    TEST_ROUTER_URL,
    VALID_APP_ID,
    RecordingHandler,
    token_sequence,
)

ALL_FACTORIES = [
    create_echo_openai,
    create_echo_anthropic,
    create_echo_google,
    create_echo_groq,
    create_echo_openrouter,
    create_echo_xai,
]

CHAT_COMPLETION = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "created": 0,
    "model": "gpt-4o",
    "choices": [
        {
            "index": 0,
            "finish_reason": "stop",
            "message": {"role": "assistant", "content": "hello"},
        }
    ],
}

ANTHROPIC_MESSAGE = {
    "id": "msg_1",
    "type": "message",
    "role": "assistant",
    "model": "claude-sonnet-4-0",
    "content": [{"type": "text", "text": "hello"}],
    "stop_reason": "end_turn",
    "stop_sequence": None,
    "usage": {"input_tokens": 1, "output_tokens": 1},
}

GEMINI_RESPONSE = {
    "candidates": [
        {
            "content": {"role": "model", "parts": [{"text": "hello"}]},
            "finishReason": "STOP",
        }
    ]
}

MESSAGES = [{"role": "user", "content": "hi"}]


@pytest.fixture
def config():
    """Echo config pointing at the test router"""
    return EchoConfig(app_id=VALID_APP_ID, base_router_url=TEST_ROUTER_URL)


class TestAppIdPrecondition:
    """Every factory validates the app id before building anything"""

    @pytest.mark.parametrize("factory", ALL_FACTORIES)
    @pytest.mark.parametrize("app_id", ["not-a-uuid", "", "12345"])
    def test_invalid_app_id_fails_fast(self, factory, app_id):
        """Test invalid app ids raise before any token lookup or request"""
        get_token = AsyncMock()
        config = EchoConfig(app_id=app_id, base_router_url=TEST_ROUTER_URL)

        with pytest.raises(InvalidAppIdError) as exc_info:
            factory(config, get_token)

        assert factory.__name__ in exc_info.value.message
        get_token.assert_not_called()

    @pytest.mark.parametrize(
        "factory,client_class",
        [
            (create_echo_openai, openai.AsyncOpenAI),
            (create_echo_openrouter, openai.AsyncOpenAI),
            (create_echo_xai, openai.AsyncOpenAI),
            (create_echo_groq, groq.AsyncGroq),
            (create_echo_anthropic, anthropic.AsyncAnthropic),
        ],
    )
    def test_client_is_wired_through_echo(self, config, factory, client_class):
        """Test factories return SDK clients using the router and Echo transport"""
        client = factory(config, token_sequence("tok"))

        assert isinstance(client, client_class)
        assert str(client.base_url).rstrip("/") == TEST_ROUTER_URL
        assert client.api_key == PLACEHOLDER_API_KEY
        assert isinstance(client._client._transport, EchoTransport)

    @pytest.mark.parametrize(
        "factory,sdk",
        [
            (create_echo_openai, openai),
            (create_echo_groq, groq),
            (create_echo_anthropic, anthropic),
        ],
    )
    def test_sdk_default_http_client_kept(self, config, factory, sdk):
        """Test the SDK's own default httpx client carries the Echo transport"""
        client = factory(config, token_sequence("tok"))

        assert isinstance(client._client, sdk.DefaultAsyncHttpxClient)
        assert client._client.follow_redirects is True

    def test_google_client_created(self, config):
        """Test the Google factory returns a GenAI client"""
        client = create_echo_google(config, token_sequence("tok"))

        assert isinstance(client, genai.Client)


class TestOpenAIThroughEcho:
    """OpenAI SDK requests flow through echo_fetch"""

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_transparently(self, config):
        """Test a 401 from the router is retried with a re-fetched token"""
        handler = RecordingHandler(
            httpx.Response(401, json={"error": "expired"}),
            httpx.Response(200, json=CHAT_COMPLETION),
        )
        get_token = token_sequence("old", "new")
        client = create_echo_openai(
            config, get_token, transport=httpx.MockTransport(handler)
        )

        completion = await client.chat.completions.create(
            model="gpt-4o", messages=MESSAGES
        )

        assert completion.choices[0].message.content == "hello"
        assert handler.auth_headers == ["Bearer old", "Bearer new"]
        assert get_token.calls == [(VALID_APP_ID,), (VALID_APP_ID,)]
        assert str(handler.requests[0].url) == f"{TEST_ROUTER_URL}/chat/completions"

    @pytest.mark.asyncio
    async def test_placeholder_key_and_caller_authorization_replaced(self, config):
        """Test neither the placeholder key nor a default header leaks out"""
        handler = RecordingHandler(httpx.Response(200, json=CHAT_COMPLETION))
        client = create_echo_openai(
            config,
            token_sequence("user-token"),
            transport=httpx.MockTransport(handler),
            default_headers={"X-Title": "My App", "Authorization": "Bearer nope"},
        )

        await client.chat.completions.create(model="gpt-4o", messages=MESSAGES)

        sent = handler.requests[0]
        assert sent.headers.get_list("Authorization") == ["Bearer user-token"]
        assert sent.headers["X-Title"] == "My App"
        assert PLACEHOLDER_API_KEY not in str(sent.headers)

    @pytest.mark.asyncio
    async def test_insufficient_funds_callback(self, config):
        """Test a 402 reaches the callback before the SDK raises its own error"""
        handler = RecordingHandler(httpx.Response(402, json={"error": "no funds"}))
        on_insufficient_funds = Mock()
        client = create_echo_openai(
            config,
            token_sequence("tok"),
            on_insufficient_funds,
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(openai.APIStatusError) as exc_info:
            await client.chat.completions.create(model="gpt-4o", messages=MESSAGES)

        assert exc_info.value.status_code == 402
        on_insufficient_funds.assert_called_once_with()
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_two_clients_concurrently_keep_their_own_tokens(self):
        """Test concurrent requests through separate clients never mix tokens"""
        handler = RecordingHandler(httpx.Response(200, json=CHAT_COMPLETION))

        def route(request: httpx.Request) -> httpx.Response:
            if request.headers["Authorization"].endswith("-expired"):
                handler.requests.append(request)
                return httpx.Response(401)
            return handler(request)

        def tokens_for(name):
            issued = []

            async def get_token(app_id):
                await asyncio.sleep(0)
                issued.append(app_id)
                suffix = "expired" if len(issued) == 1 else "fresh"
                return f"{name}-{suffix}"

            return get_token

        transport = httpx.MockTransport(route)
        first = create_echo_openai(
            EchoConfig(app_id=VALID_APP_ID, base_router_url=TEST_ROUTER_URL),
            tokens_for("first"),
            transport=transport,
            default_headers={"X-Caller": "first"},
        )
        second = create_echo_openai(
            EchoConfig(app_id=OTHER_APP_ID, base_router_url=TEST_ROUTER_URL),
            tokens_for("second"),
            transport=transport,
            default_headers={"X-Caller": "second"},
        )

        await asyncio.gather(
            first.chat.completions.create(model="gpt-4o", messages=MESSAGES),
            second.chat.completions.create(model="gpt-4o", messages=MESSAGES),
        )

        seen = {}
        for request in handler.requests:
            seen.setdefault(request.headers["X-Caller"], []).append(
                request.headers["Authorization"]
            )
        assert seen == {
            "first": ["Bearer first-expired", "Bearer first-fresh"],
            "second": ["Bearer second-expired", "Bearer second-fresh"],
        }


class TestAnthropicThroughEcho:
    """Anthropic SDK requests flow through echo_fetch"""

    @pytest.mark.asyncio
    async def test_message_request_carries_bearer_token(self, config):
        """Test Anthropic requests get the Echo bearer token"""
        handler = RecordingHandler(httpx.Response(200, json=ANTHROPIC_MESSAGE))
        client = create_echo_anthropic(
            config, token_sequence("tok"), transport=httpx.MockTransport(handler)
        )

        message = await client.messages.create(
            model="claude-sonnet-4-0", max_tokens=16, messages=MESSAGES
        )

        assert message.content[0].text == "hello"
        assert handler.auth_headers == ["Bearer tok"]
        assert str(handler.requests[0].url) == f"{TEST_ROUTER_URL}/v1/messages"

    def test_dropped_transport_is_detected(self, config):
        """Test a client that ignored the injected transport fails construction"""
        foreign = Mock(_client=Mock(_transport=httpx.AsyncHTTPTransport()))

        with patch("anthropic.AsyncAnthropic", return_value=foreign):
            with pytest.raises(ProviderInjectionError) as exc_info:
                create_echo_anthropic(config, token_sequence("tok"))

        error = exc_info.value
        assert error.code == ErrorCode.DEPENDENCY_VERSION_ERROR
        assert anthropic.__version__ in error.message
        assert "AsyncHTTPTransport" in error.errors[0]


class TestVerifyEchoTransport:
    """verify_echo_transport helper"""

    def test_accepts_echo_transport(self):
        """Test a client using EchoTransport passes"""
        client = Mock(_client=Mock(_transport=EchoTransport(token_sequence("t"))))

        verify_echo_transport(client, "somesdk", "1.0.0")

    def test_rejects_missing_http_client(self):
        """Test a client without an httpx client is rejected"""
        client = object()

        with pytest.raises(ProviderInjectionError, match="somesdk SDK \\(1.0.0\\)"):
            verify_echo_transport(client, "somesdk", "1.0.0")


class TestGoogleThroughEcho:
    """Google GenAI requests flow through echo_fetch"""

    @pytest.mark.asyncio
    async def test_async_requests_are_refreshed_transparently(self, config):
        """Test client.aio requests get the bearer token and the 401 retry"""
        handler = RecordingHandler(
            httpx.Response(401, json={"error": {"code": 401}}),
            httpx.Response(200, json=GEMINI_RESPONSE),
        )
        client = create_echo_google(
            config,
            token_sequence("old", "new"),
            transport=httpx.MockTransport(handler),
        )

        response = await client.aio.models.generate_content(
            model="gemini-2.0-flash", contents="hi"
        )

        assert response.text == "hello"
        assert handler.auth_headers == ["Bearer old", "Bearer new"]
        sent = handler.requests[0]
        assert sent.url.host == "router.echo.test"
        assert sent.url.path.endswith("gemini-2.0-flash:generateContent")

    def test_sync_requests_are_refused(self, config):
        """Test the sync client cannot send without Echo credentials"""
        handler = RecordingHandler(httpx.Response(200, json=GEMINI_RESPONSE))
        client = create_echo_google(
            config, token_sequence("tok"), transport=httpx.MockTransport(handler)
        )

        with pytest.raises(ConfigError, match="async only"):
            client.models.generate_content(model="gemini-2.0-flash", contents="hi")

        assert handler.requests == []


class TestGroqThroughEcho:
    """Groq SDK requests flow through echo_fetch"""

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_transparently(self, config):
        """Test a 401 from the router is retried with a re-fetched token"""
        handler = RecordingHandler(
            httpx.Response(401, json={"error": "expired"}),
            httpx.Response(200, json=CHAT_COMPLETION),
        )
        client = create_echo_groq(
            config,
            token_sequence("old", "new"),
            transport=httpx.MockTransport(handler),
        )

        completion = await client.chat.completions.create(
            model="llama-3.3-70b-versatile", messages=MESSAGES
        )

        assert completion.choices[0].message.content == "hello"
        assert handler.auth_headers == ["Bearer old", "Bearer new"]
        assert handler.requests[0].url.host == "router.echo.test"
