# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Unit tests for the exceptions module.

Tests all exception classes defined in resilient_api_client.exceptions.
"""

import pytest

from resilient_api_client.exceptions import (
    ApiClientError,
    ConfigurationError,
    CredentialSyncError,
    DatabaseHeuristicError,
    HttpError,
    NetworkError,
    ProblemDetailError,
    RequestCancelledError,
    RequestError,
    RequestFailedError,
    RequestTimeoutError,
    StorageConnectionError,
    StorageOperationError,
)
from resilient_api_client.types.problem import ProblemDetail


class TestApiClientError:
    """Tests for the base ApiClientError exception."""

    def test_message_preserved(self):
        assert str(ApiClientError("test message")) == "test message"

    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("x"),
            CredentialSyncError([("auth", RuntimeError("x"))]),
            RequestCancelledError(),
            StorageConnectionError("x"),
            StorageOperationError("x"),
            NetworkError("x"),
        ],
    )
    def test_everything_is_an_api_client_error(self, error):
        with pytest.raises(ApiClientError):
            raise error


class TestRequestFailedErrors:
    """Tests for the typed request errors."""

    @pytest.mark.parametrize(
        "cls,code",
        [
            (NetworkError, "NETWORK_ERROR"),
            (RequestTimeoutError, "TIMEOUT_ERROR"),
            (DatabaseHeuristicError, "DATABASE_ERROR"),
            (RequestError, "REQUEST_ERROR"),
        ],
    )
    def test_default_error_codes(self, cls, code):
        error = cls("message")
        assert error.error_code == code
        assert error.status_code == 0
        assert error.to_dict() == {"statusCode": 0, "message": "message", "error": code}

    def test_explicit_code_wins(self):
        assert RequestError("x", error_code="CONNECTION_ERROR").error_code == "CONNECTION_ERROR"

    def test_http_error_details(self):
        error = HttpError(404, "Not found", "Not Found", details=["missing"])
        assert isinstance(error, RequestFailedError)
        assert error.to_dict() == {
            "statusCode": 404,
            "message": "Not found",
            "error": "Not Found",
            "details": ["missing"],
        }

    def test_http_error_without_details(self):
        assert "details" not in HttpError(500, "boom").to_dict()

    def test_problem_detail_error(self):
        body = {"type": "t", "title": "Title", "status": 400, "extra": True}
        error = ProblemDetailError(ProblemDetail.from_body(body))
        assert error.status_code == 400
        assert error.message == "Title"
        assert error.error_code == "PROBLEM_DETAIL"
        assert error.to_dict() == body


class TestLibraryErrors:
    def test_cancelled_is_not_a_request_failure(self):
        error = RequestCancelledError(attempt=2)
        assert not isinstance(error, RequestFailedError)
        assert error.attempt == 2
        assert str(error) == "Request cancelled"

    def test_credential_sync_error_lists_members(self):
        first, second = RuntimeError("a"), ValueError("b")
        error = CredentialSyncError([("auth", first), ("admin.users", second)])
        assert error.failures == [("auth", first), ("admin.users", second)]
        assert "auth, admin.users" in str(error)
