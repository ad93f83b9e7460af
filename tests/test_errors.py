"""
Tests for failure classification (core/errors.py).
"""

import errno
import socket

import httpx
import pytest

from core.errors import (
    DeadlineExceeded,
    FailureCategory,
    GeminiError,
    categorize,
    classify_error,
)


class FakeAPIError(Exception):
    """Mimics google.genai.errors.APIError: HTTP status kept in ``.code``."""

    def __init__(self, code, message):
        super().__init__(f"{code} {message}")
        self.code = code


class TestCategorize:
    """First matching rule wins."""

    def test_deadline_is_timeout(self):
        assert categorize(DeadlineExceeded("generate exceeded 60s")) is FailureCategory.TIMEOUT

    def test_timeout_wins_over_network_code(self):
        """A deadline that also carries a network errno is still a timeout."""
        exc = DeadlineExceeded("fetch failed: getaddrinfo ENOTFOUND")
        exc.errno = errno.ECONNREFUSED
        assert categorize(exc) is FailureCategory.TIMEOUT

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses(self, status):
        assert categorize(FakeAPIError(status, "PERMISSION_DENIED")) is FailureCategory.AUTH_REJECTED

    def test_rate_limited(self):
        assert categorize(FakeAPIError(429, "RESOURCE_EXHAUSTED")) is FailureCategory.RATE_LIMITED

    def test_auth_wins_over_safety_text(self):
        exc = FakeAPIError(403, "request blocked")
        assert categorize(exc) is FailureCategory.AUTH_REJECTED

    def test_status_from_httpx_response(self):
        request = httpx.Request("POST", "https://generativelanguage.googleapis.com")
        response = httpx.Response(429, request=request)
        exc = httpx.HTTPStatusError("Too Many Requests", request=request, response=response)
        assert categorize(exc) is FailureCategory.RATE_LIMITED

    @pytest.mark.parametrize("message", [
        "Response was blocked due to SAFETY",
        "Prompt blocked by policy",
    ])
    def test_content_filtered(self, message):
        assert categorize(RuntimeError(message)) is FailureCategory.CONTENT_FILTERED

    def test_httpx_connect_error(self):
        assert categorize(httpx.ConnectError("[Errno 111] Connection refused")) is (
            FailureCategory.NETWORK_UNREACHABLE
        )

    def test_dns_failure(self):
        exc = socket.gaierror(socket.EAI_NONAME, "Name or service not known")
        assert categorize(exc) is FailureCategory.NETWORK_UNREACHABLE

    def test_connection_refused_errno(self):
        exc = OSError(errno.ECONNREFUSED, "Connection refused")
        assert categorize(exc) is FailureCategory.NETWORK_UNREACHABLE

    def test_fetch_failed_message(self):
        assert categorize(RuntimeError("fetch failed")) is FailureCategory.NETWORK_UNREACHABLE

    def test_anything_else_is_unclassified(self):
        assert categorize(FakeAPIError(500, "INTERNAL")) is FailureCategory.UNCLASSIFIED


class TestClassifyError:

    def test_timeout_message(self):
        error = classify_error(DeadlineExceeded("late"))
        assert error.category is FailureCategory.TIMEOUT
        assert error.message == "Gemini API request timed out. Please try again."

    def test_auth_message(self):
        error = classify_error(FakeAPIError(401, "API key not valid"))
        assert error.message == (
            "Invalid Gemini API key. Please check your GEMINI_API_KEY environment variable."
        )

    def test_rate_limit_message(self):
        error = classify_error(FakeAPIError(429, "quota"))
        assert error.message == "Gemini API rate limit exceeded. Please wait a moment and try again."

    def test_safety_message(self):
        error = classify_error(RuntimeError("finish_reason=SAFETY"))
        assert error.message == (
            "Content blocked by Gemini's safety filters. Try rephrasing your request."
        )

    def test_network_message_echoes_cause(self):
        error = classify_error(httpx.ConnectError("Connection refused"))
        assert error.message == "Failed to connect to Gemini API: Connection refused"

    def test_unclassified_message_echoes_cause(self):
        error = classify_error(ValueError("unexpected field"))
        assert error.category is FailureCategory.UNCLASSIFIED
        assert error.message == "Gemini API error: unexpected field"

    def test_empty_message_falls_back_to_class_name(self):
        error = classify_error(KeyError())
        assert error.message == "Gemini API error: KeyError"

    def test_gemini_error_passes_through(self):
        original = GeminiError(FailureCategory.RATE_LIMITED, "slow down")
        assert classify_error(original) is original

    def test_str_is_message(self):
        error = classify_error(FakeAPIError(429, "quota"))
        assert str(error) == error.message
