"""Error taxonomy for the recipe search core.

HTTP-facing code raises the typed exceptions below. Components catch them at
their operation boundary and turn them into notifications via ErrorKind.
"""

from enum import Enum
from typing import Optional

from pydantic import ValidationError


class ErrorKind(str, Enum):
    """Category of a failure, as surfaced to the user."""

    THROTTLED = "throttled"
    TRANSIENT_NETWORK = "transient_network"
    VALIDATION = "validation"
    SOFT_REJECT = "soft_reject"
    HARD_FAILURE = "hard_failure"


class RecipeSearchError(Exception):
    """Base class for errors raised by the search client."""

    kind: ErrorKind = ErrorKind.HARD_FAILURE


class ThrottledError(RecipeSearchError):
    """Remote API answered 429 (usage limits exceeded)."""

    kind = ErrorKind.THROTTLED

    def __init__(self, message: str = "Usage limits are exceeded, try again later.", retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class TransientNetworkError(RecipeSearchError):
    """Request failed in transport (connection error, timeout, non-2xx status)."""

    kind = ErrorKind.TRANSIENT_NETWORK

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class SearchRejectedError(RecipeSearchError):
    """Remote API answered with {"success": false, "message": ...}."""

    kind = ErrorKind.SOFT_REJECT


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception caught at an operation boundary to its ErrorKind."""
    if isinstance(exc, RecipeSearchError):
        return exc.kind
    if isinstance(exc, ValidationError):
        return ErrorKind.VALIDATION
    return ErrorKind.HARD_FAILURE
