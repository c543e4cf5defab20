"""Error normalization for control plane calls.

Resource methods raise raw exceptions (HttpResponseError for non-2xx responses,
transport exceptions for everything else); parse_echo_error classifies them at
the boundary into NETWORK_ERROR, HTTP_<status> or UNKNOWN_ERROR. All taxonomy
knowledge lives here.
"""

import asyncio
import logging
import random
import re
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from .exceptions import EchoError, ErrorCode, http_error_code

logger = logging.getLogger("echo-sdk.errors")

T = TypeVar("T")

HTTP_ERROR_PATTERN = re.compile(r"^HTTP (\d+): (.*)$", re.DOTALL)

# Exceptions raised before any response existed
NETWORK_EXCEPTIONS = (httpx.RequestError, OSError, TypeError)

AUTH_STATUS_CODES = frozenset({401, 403})
RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


def parse_echo_error(
    error: BaseException, context: str | None = None, endpoint: str | None = None
) -> EchoError:
    """Classify any exception into an EchoError.

    Args:
        error: Exception raised by a control plane call.
        context: What was being attempted, e.g. "fetch balance".
        endpoint: Path of the failing request.

    Returns:
        The error itself if it already is an EchoError, otherwise a new one with
        code HTTP_<status>, NETWORK_ERROR or UNKNOWN_ERROR.
    """
    if isinstance(error, EchoError):
        return error

    text = str(error)
    prefix = f"Failed to {context}: " if context else ""

    match = HTTP_ERROR_PATTERN.match(text)
    if match:
        status_code = int(match.group(1))
        details = match.group(2)
        return EchoError(
            f"{prefix}{text}",
            code=http_error_code(status_code),
            status_code=status_code,
            endpoint=endpoint,
            errors=[details] if details else [],
            context={"exception_type": type(error).__name__},
        )

    if isinstance(error, NETWORK_EXCEPTIONS):
        return EchoError(
            f"{prefix}Network error: {text or type(error).__name__}",
            code=ErrorCode.NETWORK_ERROR,
            endpoint=endpoint,
            errors=[text] if text else [],
            suggestions=[
                "Check your internet connection",
                "Verify the Echo base URL is correct",
            ],
            context={"exception_type": type(error).__name__},
        )

    return EchoError(
        f"{prefix}Unexpected error: {text or type(error).__name__}",
        code=ErrorCode.UNKNOWN_ERROR,
        endpoint=endpoint,
        errors=[text] if text else [],
        context={"exception_type": type(error).__name__},
    )


def is_auth_error(error: EchoError) -> bool:
    """Check if an error should send the user back through sign-in."""
    return error.status_code in AUTH_STATUS_CODES


def is_retryable_error(error: EchoError) -> bool:
    """Check if an error is transient and worth retrying."""
    return (
        error.code == ErrorCode.NETWORK_ERROR
        or error.status_code in RETRYABLE_STATUS_CODES
    )


def get_user_friendly_message(error: EchoError) -> str:
    """Short message suitable for showing to an end user."""
    if is_auth_error(error):
        return "Please sign in to continue."
    if error.status_code == 402:
        return "Insufficient balance. Please add credits to your account."
    if error.status_code == 429:
        return "Too many requests. Please wait a moment and try again."
    if error.status_code == 404:
        return error.message or "The requested resource was not found."
    if error.status_code in (502, 503, 504):
        return "Service is temporarily unavailable. Please try again later."
    if error.code == ErrorCode.NETWORK_ERROR:
        return "Connection failed. Please check your internet connection."
    return error.message or "An unexpected error occurred. Please try again."


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    delay_seconds: float = 0.2,
    context: str | None = None,
) -> T:
    """Run ``operation``, retrying retryable errors with exponential backoff.

    Args:
        operation: Zero-argument async callable.
        max_retries: Total number of attempts.
        delay_seconds: Base delay, doubled after each failed attempt.
        context: Passed to parse_echo_error for the message.

    Raises:
        EchoError: The normalized error of the last attempt, or the first
            non-retryable one.
    """
    for attempt in range(1, max_retries + 1):
        try:
            return await operation()
        except Exception as e:
            error = parse_echo_error(e, context)
            if not is_retryable_error(error) or attempt == max_retries:
                if error is e:
                    raise
                raise error from e

            delay = delay_seconds * 2 ** (attempt - 1) + random.uniform(0, 0.1)
            logger.debug(
                f"Attempt {attempt}/{max_retries} failed with {error.code}, "
                f"retrying in {delay:.2f}s"
            )
            await asyncio.sleep(delay)

    raise ValueError("max_retries must be at least 1")
