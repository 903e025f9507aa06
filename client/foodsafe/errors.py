"""
Failure taxonomy for lookups, and the one place that turns raw exceptions
into user-facing messages.

Every entry operation on SafetyClient surfaces exactly one LookupFailure
subclass per failed call. The UI shows `message` verbatim.
"""
import asyncio
import json
import logging
from enum import Enum
from typing import Optional

import httpx
from pydantic import ValidationError

logger = logging.getLogger(__name__)

# Default texts used when the backend does not supply one
TIMEOUT_MESSAGE = "Request timed out - please try again"
NETWORK_MESSAGE = "We couldn't reach the server. Check your connection and try again."
SHAPE_MESSAGE = "The server sent a response we couldn't understand."
NOT_FOUND_MESSAGE = "We couldn't find that barcode. Try scanning again or type the ingredients instead."
INCOMPLETE_MESSAGE = "This product has no ingredient list we can check. Try typing the ingredients instead."

_MAX_BODY_CHARS = 200


class FailureKind(str, Enum):
    TIMEOUT = "timeout"
    NETWORK_FAILURE = "network_failure"
    SERVER_ERROR = "server_error"
    SHAPE_MISMATCH = "shape_mismatch"
    NOT_FOUND = "not_found"
    INCOMPLETE_DATA = "incomplete_data"


class LookupFailure(Exception):
    """Base class. `kind` tags the failure, `message` is ready to display."""

    kind: FailureKind
    default_message: str = ""

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        text = (message or "").strip() or self.default_message
        super().__init__(text)
        self.message = text
        self.detail = detail  # developer-facing, never shown

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}


class RequestTimeout(LookupFailure):
    kind = FailureKind.TIMEOUT
    default_message = TIMEOUT_MESSAGE


class NetworkFailure(LookupFailure):
    kind = FailureKind.NETWORK_FAILURE
    default_message = NETWORK_MESSAGE


class ServerError(LookupFailure):
    kind = FailureKind.SERVER_ERROR

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = (body or "").strip()[:_MAX_BODY_CHARS]
        text = f"Server error: {status_code}"
        if self.body:
            text = f"{text} - {self.body}"
        super().__init__(text)


class ShapeMismatch(LookupFailure):
    kind = FailureKind.SHAPE_MISMATCH
    default_message = SHAPE_MESSAGE

    def __init__(self, detail: Optional[str] = None):
        super().__init__(None, detail=detail)


class NotFound(LookupFailure):
    kind = FailureKind.NOT_FOUND
    default_message = NOT_FOUND_MESSAGE


class IncompleteData(LookupFailure):
    kind = FailureKind.INCOMPLETE_DATA
    default_message = INCOMPLETE_MESSAGE


def classify_failure(exc: BaseException, operation: str = "lookup") -> BaseException:
    """
    Map a raw exception to a LookupFailure.
    Exceptions outside the taxonomy (programming errors) are returned unchanged
    so the caller re-raises them as-is.
    """
    if isinstance(exc, LookupFailure):
        failure: BaseException = exc
    elif isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        failure = RequestTimeout(detail=str(exc) or type(exc).__name__)
    elif isinstance(exc, httpx.HTTPStatusError):
        failure = ServerError(exc.response.status_code, _safe_text(exc.response))
    elif isinstance(exc, (httpx.RequestError, OSError)):
        failure = NetworkFailure(detail=f"{type(exc).__name__}: {exc}")
    elif isinstance(exc, (json.JSONDecodeError, UnicodeDecodeError, ValidationError)):
        # Undecodable or invalid body; normalizers raise ShapeMismatch themselves
        failure = ShapeMismatch(detail=f"{type(exc).__name__}: {exc}")
    else:
        return exc
    logger.warning(
        "LOOKUP_FAILED op=%s kind=%s message=%s detail=%s",
        operation, failure.kind.value, failure.message, (failure.detail or "")[:120],
    )
    return failure


def _safe_text(response: httpx.Response) -> str:
    try:
        return response.text
    except (httpx.ResponseNotRead, UnicodeDecodeError):
        return ""
