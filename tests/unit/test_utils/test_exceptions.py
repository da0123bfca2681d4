"""Unit tests for application exceptions."""

from inferdev.utils.exceptions import (
    ExternalServiceError,
    NoQuestionsAvailableError,
    ResponseShapeError,
    ValidationError,
    create_error_response,
)


class TestErrorResponse:
    """Test the error envelope."""

    def test_validation_error_lists_messages(self):
        error = ValidationError("Please select your IT major.", field="itMajorDetail", validation_errors=["a", "b"])

        response = create_error_response(error, request_id="req-1")

        assert response["error"]["code"] == "VALIDATION_ERROR"
        assert response["error"]["request_id"] == "req-1"
        assert response["error"]["validation_errors"] == ["a", "b"]
        assert response["error"]["details"]["field"] == "itMajorDetail"

    def test_details_can_be_left_out(self):
        error = NoQuestionsAvailableError(stage=2, track="backend")

        response = create_error_response(error, include_details=False)

        assert response["error"]["code"] == "NO_QUESTIONS_AVAILABLE"
        assert "details" not in response["error"]

    def test_response_shape_error_is_external(self):
        error = ResponseShapeError("not json", status_code=200, service="recommender")

        assert isinstance(error, ExternalServiceError)
        assert error.error_code == "UNEXPECTED_RESPONSE"
        assert error.details == {"service": "recommender", "status_code": 200}

    def test_str_includes_code(self):
        assert "Code: EXTERNAL_SERVICE_ERROR" in str(ExternalServiceError("down"))
