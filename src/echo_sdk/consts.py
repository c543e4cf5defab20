"""High-value constants for the Echo SDK package."""

# Package metadata
PACKAGE_VERSION = "0.4.0"
SDK_NAME = "echo-sdk"
USER_AGENT = f"{SDK_NAME}/{PACKAGE_VERSION}"

# External API contract consts
DEFAULT_ROUTER_URL = "https://echo.router.merit.systems"
DEFAULT_ECHO_URL = "https://echo.merit.systems"

APPS_PATH = "/api/v1/apps"
BALANCE_PATH = "/api/v1/balance"
FREE_BALANCE_PATH = "/api/v1/balance/free"
USER_PATH = "/api/v1/user"
REFERRAL_PATH = "/api/v1/user/referral"
PAYMENT_LINK_PATH = "/api/v1/stripe/payment-link"
SUPPORTED_MODELS_PATH = "/api/v1/supported-models"

# Reserved router status codes
STATUS_UNAUTHORIZED = 401  # token expired/invalid, retried once
STATUS_PAYMENT_REQUIRED = 402  # insufficient funds, reported via callback

# Never sent: the Authorization header always replaces it
PLACEHOLDER_API_KEY = "echo-placeholder-key"

DEFAULT_PAYMENT_DESCRIPTION = "Echo Credits"
