# =============================================================================
# core/errors.py  —  Failure Taxonomy & Classification
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns whatever the Gemini SDK (or the transport under it) raised into
#   exactly ONE GeminiError with a fixed, human-readable message.
#
# CLASSIFICATION ORDER (first match wins):
#   1. Our own deadline fired          → TIMEOUT
#   2. HTTP 401 / 403                  → AUTH_REJECTED
#   3. HTTP 429                        → RATE_LIMITED
#   4. "SAFETY" / "blocked" in message → CONTENT_FILTERED
#   5. DNS / connection refused        → NETWORK_UNREACHABLE
#   6. anything else                   → UNCLASSIFIED (raw message echoed)
#
#   So a deadline that also carries a network error code is still a
#   TIMEOUT.
#
# INPUT ERRORS ARE DIFFERENT:
#   InvalidRequestError is raised before any network call and is never
#   passed through classify_error().  Callers can tell "you asked wrong"
#   apart from "Gemini said no".
# =============================================================================

import enum
import errno
import logging
import socket

import httpx

logger = logging.getLogger(__name__)


class FailureCategory(enum.Enum):
    TIMEOUT = "timeout"
    AUTH_REJECTED = "auth_rejected"
    RATE_LIMITED = "rate_limited"
    CONTENT_FILTERED = "content_filtered"
    NETWORK_UNREACHABLE = "network_unreachable"
    UNCLASSIFIED = "unclassified"


_MESSAGES = {
    FailureCategory.TIMEOUT: "Gemini API request timed out. Please try again.",
    FailureCategory.AUTH_REJECTED: (
        "Invalid Gemini API key. Please check your GEMINI_API_KEY environment variable."
    ),
    FailureCategory.RATE_LIMITED: (
        "Gemini API rate limit exceeded. Please wait a moment and try again."
    ),
    FailureCategory.CONTENT_FILTERED: (
        "Content blocked by Gemini's safety filters. Try rephrasing your request."
    ),
    FailureCategory.NETWORK_UNREACHABLE: "Failed to connect to Gemini API: {detail}",
    FailureCategory.UNCLASSIFIED: "Gemini API error: {detail}",
}

_NETWORK_ERRNOS = {errno.ECONNREFUSED, errno.EHOSTUNREACH, errno.ENETUNREACH}
_NETWORK_HINTS = ("fetch", "httpx", "getaddrinfo")


class InvalidRequestError(ValueError):
    """Input rejected before reaching the network."""


class DeadlineExceeded(Exception):
    """An upstream operation did not settle within its deadline."""


class GeminiError(Exception):
    """The single failure type surfaced by GeminiClient."""

    def __init__(self, category: FailureCategory, message: str):
        super().__init__(message)
        self.category = category
        self.message = message


def _status_code(exc: BaseException):
    # google.genai.errors.APIError keeps the HTTP status in .code,
    # httpx.HTTPStatusError keeps it on the response.
    code = getattr(exc, "code", None)
    if isinstance(code, int):
        return code
    code = getattr(exc, "status_code", None)
    if isinstance(code, int):
        return code
    response = getattr(exc, "response", None)
    code = getattr(response, "status_code", None)
    return code if isinstance(code, int) else None


def _is_network_failure(exc: BaseException, message: str) -> bool:
    if isinstance(exc, (httpx.ConnectError, ConnectionRefusedError, socket.gaierror)):
        return True
    if getattr(exc, "errno", None) in _NETWORK_ERRNOS:
        return True
    lowered = message.lower()
    return any(hint in lowered for hint in _NETWORK_HINTS)


def categorize(exc: BaseException) -> FailureCategory:
    """Return the failure category for ``exc`` without building an error."""
    if isinstance(exc, DeadlineExceeded):
        return FailureCategory.TIMEOUT

    status = _status_code(exc)
    if status in (401, 403):
        return FailureCategory.AUTH_REJECTED
    if status == 429:
        return FailureCategory.RATE_LIMITED

    message = str(exc)
    if "SAFETY" in message or "blocked" in message:
        return FailureCategory.CONTENT_FILTERED
    if _is_network_failure(exc, message):
        return FailureCategory.NETWORK_UNREACHABLE
    return FailureCategory.UNCLASSIFIED


def classify_error(exc: BaseException) -> GeminiError:
    """Wrap ``exc`` in a GeminiError carrying its category's message."""
    if isinstance(exc, GeminiError):
        return exc

    category = categorize(exc)
    detail = str(exc) or exc.__class__.__name__
    message = _MESSAGES[category].format(detail=detail)
    logger.warning("Gemini call failed (%s): %s", category.value, detail)
    return GeminiError(category, message)
