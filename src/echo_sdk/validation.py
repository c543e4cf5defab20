"""App identifier validation, run before any provider client exists."""

import re
from typing import Any

from .exceptions import InvalidAppIdError

UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
UUID_V4_FORMAT = "xxxxxxxx-xxxx-4xxx-[89ab]xxx-xxxxxxxxxxxx"


def is_valid_app_id(app_id: Any) -> bool:
    """Check whether ``app_id`` is a UUID v4 string."""
    return isinstance(app_id, str) and bool(UUID_V4_PATTERN.fullmatch(app_id))


def validate_app_id(app_id: Any, context: str) -> None:
    """Fail fast unless ``app_id`` is a UUID v4 string.

    Args:
        app_id: Value to check.
        context: Label of the caller, included in the error message.

    Raises:
        InvalidAppIdError: If app_id is empty, not a string, or not a UUID v4.
    """
    if not app_id or not isinstance(app_id, str):
        raise InvalidAppIdError(
            f"{context}: app_id is required and must be a non-empty string, "
            f"got {app_id!r}. Expected a UUID v4 ({UUID_V4_FORMAT})",
            suggestions=["Copy the app ID from the Echo dashboard"],
            context={"app_id": repr(app_id), "caller": context},
        )

    if not UUID_V4_PATTERN.fullmatch(app_id):
        raise InvalidAppIdError(
            f"{context}: invalid app_id {app_id!r}. "
            f"Expected a UUID v4 ({UUID_V4_FORMAT})",
            suggestions=[
                "Copy the app ID from the Echo dashboard",
                "Check for surrounding whitespace or a truncated value",
            ],
            context={"app_id": app_id, "caller": context},
        )
