"""Unit tests for middleware helpers."""

import pytest

from inferdev.api.middleware.error_handler import status_code_for
from inferdev.api.middleware.logging_middleware import session_id_from_path
from inferdev.api.middleware.request_id import is_valid_request_id
from inferdev.utils.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    InferDevError,
    NoQuestionsAvailableError,
    ResourceNotFoundError,
    ResponseShapeError,
    SurveyStateError,
    ValidationError,
)


class TestStatusCodes:
    """Test error to HTTP status mapping."""

    @pytest.mark.parametrize("error,expected", [
        (ValidationError("bad"), 400),
        (ResourceNotFoundError("gone"), 404),
        (SurveyStateError("wrong step"), 409),
        (NoQuestionsAvailableError(), 409),
        (ExternalServiceError("down"), 502),
        (ResponseShapeError("html"), 502),
        (ConfigurationError("unset"), 503),
        (InferDevError("other"), 500),
    ])
    def test_mapping(self, error, expected):
        assert status_code_for(error) == expected


class TestRequestHelpers:
    """Test request ID validation and path parsing."""

    def test_request_id_validation(self):
        assert is_valid_request_id("0b7d4c3e-2a61-4f0e-9a57-1f1d2b3c4d5e")
        assert not is_valid_request_id(None)
        assert not is_valid_request_id("short")
        assert not is_valid_request_id("<script>alert(1)</script>")

    def test_session_id_from_path(self):
        assert session_id_from_path("/api/v1/survey/sessions/abc123/answers") == "abc123"
        assert session_id_from_path("/api/v1/survey/sessions") is None
        assert session_id_from_path("/api/v1/catalog/jobs") is None
