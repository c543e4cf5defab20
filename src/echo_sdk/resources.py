"""Control plane resource clients (apps, balance, users, payments, models)."""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from .consts import (
    APPS_PATH,
    BALANCE_PATH,
    DEFAULT_PAYMENT_DESCRIPTION,
    FREE_BALANCE_PATH,
    PAYMENT_LINK_PATH,
    REFERRAL_PATH,
    SUPPORTED_MODELS_PATH,
    USER_PATH,
)
from .errors import parse_echo_error
from .exceptions import EchoError, ErrorCode, HttpResponseError
from .models import (
    Balance,
    EchoApp,
    FreeBalance,
    PaymentLinkResponse,
    SupportedModel,
    User,
)
from .protocols import TokenProvider
from .utils import join_url

logger = logging.getLogger("echo-sdk.resources")

T = TypeVar("T")


class BaseResource:
    """Shared request path for control plane resources.

    Responsibilities:
    - Attach the bearer token from the token provider
    - Raise HttpResponseError for non-2xx responses
    - Normalize every failure into an EchoError at the boundary
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_provider: TokenProvider,
        base_url: str,
    ):
        self.http_client = http_client
        self.token_provider = token_provider
        self.base_url = base_url

    async def _send(self, method: str, path: str, **kwargs) -> Any:
        """Issue one request and return the decoded JSON body.

        Raises:
            HttpResponseError: For non-2xx responses.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        headers = dict(kwargs.pop("headers", None) or {})
        token = await self.token_provider.get_access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        url = join_url(self.base_url, path)
        logger.debug(f"{method} {url}")
        response = await self.http_client.request(
            method, url, headers=headers, **kwargs
        )

        if not response.is_success:
            raise HttpResponseError(response.status_code, response.text)

        logger.debug(f"{method} {url} successful")
        if not response.content:
            return None
        return response.json()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        context: str,
        parse: Callable[[Any], T] | None = None,
        **kwargs,
    ) -> T | Any:
        """Run a request and ``parse`` its body, normalizing any failure.

        Args:
            method: HTTP method.
            path: Path relative to the control plane base URL.
            context: What is being attempted, used in error messages.
            parse: Optional conversion of the decoded body.
            **kwargs: Additional arguments for httpx.AsyncClient.request.

        Raises:
            EchoError: With code HTTP_<status>, NETWORK_ERROR or UNKNOWN_ERROR.
                A 2xx body that ``parse`` rejects is always UNKNOWN_ERROR.
        """
        try:
            data = await self._send(method, path, **kwargs)
        except Exception as e:
            error = parse_echo_error(e, context, endpoint=path)
            logger.warning(f"Failed to {context}: {error.code}")
            if error is e:
                raise
            raise error from e

        if parse is None:
            return data

        # the response exists here, so nothing below is a network failure
        try:
            return parse(data)
        except Exception as e:
            logger.warning(f"Failed to {context}: unexpected response body")
            raise EchoError(
                f"Failed to {context}: Unexpected response: {e}",
                code=ErrorCode.UNKNOWN_ERROR,
                endpoint=path,
                errors=[str(e)],
                context={"exception_type": type(e).__name__},
            ) from e


class AppsResource(BaseResource):
    """Echo applications owned by or accessible to the current user."""

    async def list_echo_apps(self) -> list[EchoApp]:
        return await self._request(
            "GET",
            APPS_PATH,
            context="fetch Echo apps",
            parse=lambda data: [
                EchoApp.model_validate(app) for app in _unwrap(data, "echoApps")
            ],
        )

    async def get_echo_app(self, app_id: str) -> EchoApp:
        return await self._request(
            "GET",
            f"{APPS_PATH}/{app_id}",
            context="fetch Echo app",
            parse=lambda data: EchoApp.model_validate(_unwrap(data, "echoApp")),
        )

    def get_app_url(self, app_id: str) -> str:
        """Dashboard URL of an app."""
        return join_url(self.base_url, f"/apps/{app_id}")


class BalanceResource(BaseResource):
    """Account and free-tier balances."""

    async def get_balance(self) -> Balance:
        return await self._request(
            "GET", BALANCE_PATH, context="fetch balance", parse=Balance.model_validate
        )

    async def get_free_balance(self, app_id: str) -> FreeBalance:
        """Free-tier credit an app grants to the current user."""
        return await self._request(
            "POST",
            FREE_BALANCE_PATH,
            context="fetch free balance",
            parse=FreeBalance.model_validate,
            json={"echoAppId": app_id},
        )


class UsersResource(BaseResource):
    """Current user profile and referrals."""

    async def get_user_info(self) -> User:
        return await self._request(
            "GET", USER_PATH, context="fetch user info", parse=User.model_validate
        )

    async def register_referral_code(self, app_id: str, code: str) -> dict:
        return await self._request(
            "POST",
            REFERRAL_PATH,
            context="register referral code",
            json={"echoAppId": app_id, "code": code},
        )


class PaymentsResource(BaseResource):
    """Stripe payment links for buying credits."""

    async def create_payment_link(
        self,
        amount: float,
        description: str | None = None,
        success_url: str | None = None,
    ) -> PaymentLinkResponse:
        body: dict[str, Any] = {"amount": amount}
        if description is not None:
            body["description"] = description
        if success_url is not None:
            body["successUrl"] = success_url

        return await self._request(
            "POST",
            PAYMENT_LINK_PATH,
            context="create payment link",
            parse=PaymentLinkResponse.model_validate,
            json=body,
        )

    async def get_payment_url(
        self, amount: float, description: str = DEFAULT_PAYMENT_DESCRIPTION
    ) -> str:
        """Create a payment link and return only its checkout URL."""
        response = await self.create_payment_link(amount, description)
        return response.payment_link.url


class ModelsResource(BaseResource):
    """Models the router can bill for."""

    async def list_supported_models(self) -> list[SupportedModel]:
        return await self._request(
            "GET",
            SUPPORTED_MODELS_PATH,
            context="fetch supported models",
            parse=lambda data: [
                SupportedModel.model_validate(model)
                for model in _unwrap(data, "models")
            ],
        )


def _unwrap(data: Any, key: str) -> Any:
    """Return ``data[key]`` for enveloped responses, else ``data`` itself."""
    if isinstance(data, dict) and key in data:
        return data[key]
    return data
