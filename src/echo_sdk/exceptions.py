"""Echo SDK custom exceptions.

Exception Design Principles:
1. Raise once at the boundary where the failure is first observed, never re-wrap
2. Carry a machine-readable ``code`` so callers branch without string matching
3. Split on domain of actionable information:
   - Recoverable by reconfiguration before any request is made (ConfigError)
   - Control plane request failures, normalized by parse_echo_error (EchoError)
   - Raw non-2xx bodies awaiting normalization (HttpResponseError)

Router-level 401 and 402 are protocol facts, not failures: the fetch layer never
raises for them.
"""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Fixed error codes. HTTP failures use the dynamic ``HTTP_<status>`` form."""

    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
    INVALID_APP_ID = "INVALID_APP_ID"
    DEPENDENCY_VERSION_ERROR = "DEPENDENCY_VERSION_ERROR"


def http_error_code(status_code: int) -> str:
    """Error code for an HTTP status, e.g. ``HTTP_404``."""
    return f"HTTP_{status_code}"


class EchoError(Exception):
    """Base exception for all Echo SDK errors.

    Provides a normalized shape (code, message, status_code, endpoint) plus rich
    context and actionable suggestions beyond standard exceptions.
    """

    def __init__(
        self,
        message: str,  # the error message
        *,
        code: str = ErrorCode.UNKNOWN_ERROR,
        status_code: int | None = None,  # HTTP status, when one was received
        endpoint: str | None = None,  # control plane path that failed
        errors: list[str] = None,  # detailed list of errors (if available)
        suggestions: list[str] = None,  # remedial actions
        context: dict = None,  # additional detailed context
    ):
        """Initialize EchoError.

        Args:
            message: Primary error message for users
            code: Machine-readable error code
            status_code: HTTP status code, if the failure had HTTP semantics
            endpoint: Endpoint the failing request was sent to
            errors: List of specific error details
            suggestions: List of actionable suggestions for resolution
            context: Additional context information as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.code = str(code)
        self.status_code = status_code
        self.endpoint = endpoint
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}

    def to_dict(self) -> dict:
        """Serializable view of the normalized error."""
        return {
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "endpoint": self.endpoint,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, message={self.message!r}, "
            f"status_code={self.status_code!r}, endpoint={self.endpoint!r})"
        )


class ConfigError(EchoError):
    """SDK configuration errors - recoverable by user reconfiguration.

    Raised synchronously before any network call is made:
    - App identifiers that are not UUID v4
    - Missing credentials for the CLI
    - Provider SDK versions that silently drop the injected transport

    Never retried and never recovered locally: these indicate programmer or
    configuration error, not transient failure.
    """

    def __init__(self, message: str, *, code: str = ErrorCode.CONFIG_ERROR, **kwargs):
        super().__init__(message, code=code, **kwargs)


class InvalidAppIdError(ConfigError):
    """App identifier is empty, not a string, or not a UUID v4."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code=ErrorCode.INVALID_APP_ID, **kwargs)


class ProviderInjectionError(ConfigError):
    """The provider SDK did not accept the authenticated transport.

    Without the transport, requests would go out carrying the placeholder key
    and no bearer token, so construction fails instead.
    """

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code=ErrorCode.DEPENDENCY_VERSION_ERROR, **kwargs)


class HttpResponseError(Exception):
    """Raw non-2xx control plane response.

    The message is always ``HTTP <status>: <body>``; parse_echo_error turns it
    into an EchoError with code ``HTTP_<status>``.
    """

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body
