from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config import get_settings
from .utils import join_url

# =============================================================================
# SDK CONFIGURATION MODEL
# =============================================================================


class EchoConfig(BaseModel):
    """Per-app configuration for the provider factories and EchoClient.

    ``app_id`` is not validated here: the factories run validate_app_id so a
    misconfigured id fails at client construction, before any request.
    """

    app_id: str = Field(..., description="UUID v4 of the provisioned Echo app")
    base_path: str | None = Field(
        None, description="Path prefix the control plane is mounted under"
    )
    base_router_url: str = Field(
        default_factory=lambda: get_settings().base_router_url,
        description="Router endpoint that proxies and meters LLM provider calls",
    )
    base_echo_url: str = Field(
        default_factory=lambda: get_settings().base_echo_url,
        description="Control plane base URL",
    )

    @property
    def control_plane_url(self) -> str:
        """Control plane root: ``base_echo_url`` plus ``base_path`` if set."""
        return join_url(self.base_echo_url, self.base_path or "")


# =============================================================================
# CONTROL PLANE MODELS
# =============================================================================
# Response bodies of the /api/v1 endpoints. The server speaks camelCase; fields
# are snake_case in Python and unknown fields are kept.


class ApiModel(BaseModel):
    """Base for control plane payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )


class EchoApp(ApiModel):
    """An Echo application."""

    id: str = Field(..., description="App UUID")
    name: str = Field(..., description="Display name")
    description: str | None = Field(None, description="Optional description")
    is_active: bool = Field(True, description="Whether the app accepts requests")
    created_at: str | None = Field(None, description="ISO-8601 creation time")
    updated_at: str | None = Field(None, description="ISO-8601 update time")
    user_id: str | None = Field(None, description="Owner user id")
    total_tokens: int | None = Field(None, description="Tokens used by the app")
    total_cost: float | None = Field(None, description="Spend attributed to the app")


class Balance(ApiModel):
    """Account balance in USD."""

    balance: float = Field(..., description="Remaining balance")
    total_credits: float = Field(0.0, description="Total credits purchased")
    total_spent: float = Field(0.0, description="Total amount spent")


class FreeBalance(ApiModel):
    """Free-tier balance an app grants to the current user."""

    spend_pool_balance: float = Field(0.0, description="Remaining pool balance")
    user_spend_info: dict | None = Field(None, description="Per-user spend limits")


class User(ApiModel):
    """Authenticated user profile."""

    id: str = Field(..., description="User id")
    email: str | None = Field(None, description="Email address")
    name: str | None = Field(None, description="Display name")
    picture: str | None = Field(None, description="Avatar URL")


class PaymentLink(ApiModel):
    """Stripe checkout link."""

    id: str = Field(..., description="Payment link id")
    url: str = Field(..., description="Checkout URL")
    amount: float = Field(..., description="Amount in USD")
    currency: str = Field("usd", description="ISO currency code")
    description: str | None = Field(None, description="Line item description")


class PaymentLinkResponse(ApiModel):
    """Response of the payment link endpoint."""

    payment_link: PaymentLink = Field(..., description="Created payment link")


class SupportedModel(ApiModel):
    """A model the router can bill for."""

    id: str = Field(..., description="Provider model identifier")
    provider: str = Field(..., description="Provider name")
    input_cost_per_token: float | None = Field(None, description="USD per input token")
    output_cost_per_token: float | None = Field(
        None, description="USD per output token"
    )
