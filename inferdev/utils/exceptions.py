"""Custom exception classes for InferDev application.

This module defines a hierarchy of custom exceptions for the errors that can
occur while running a survey: invalid input, illegal state transitions,
empty question sets and failures of the external recommendation backend.
"""

from typing import Any, Dict, List, Optional


class InferDevError(Exception):
    """Base exception class for all InferDev application errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """Initialize InferDev error.

        Args:
            message: Error message
            error_code: Application-specific error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary representation.

        Returns:
            Dict[str, Any]: Exception data
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        parts = [self.message]
        if self.error_code:
            parts.append(f"Code: {self.error_code}")
        if self.details:
            parts.append(f"Details: {self.details}")
        return " | ".join(parts)


class ValidationError(InferDevError):
    """Exception for input validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        validation_errors: Optional[List[str]] = None,
        **kwargs
    ):
        """Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            value: Invalid value
            validation_errors: List of specific validation errors
            **kwargs: Additional arguments for parent class
        """
        details = kwargs.get("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        if validation_errors:
            details["validation_errors"] = validation_errors

        kwargs["details"] = details
        kwargs.setdefault("error_code", "VALIDATION_ERROR")
        super().__init__(message, **kwargs)

        self.field = field
        self.value = value
        self.validation_errors = validation_errors or []


class ResourceNotFoundError(InferDevError):
    """Exception for when a requested resource is not found."""

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.get("details", {})
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        kwargs["details"] = details
        kwargs.setdefault("error_code", "NOT_FOUND")
        super().__init__(message, **kwargs)

        self.resource_type = resource_type
        self.resource_id = resource_id


class SurveyError(InferDevError):
    """Exception for survey flow errors."""

    def __init__(
        self,
        message: str,
        session_id: Optional[str] = None,
        step: Optional[str] = None,
        **kwargs
    ):
        """Initialize survey error.

        Args:
            message: Error message
            session_id: Survey session ID
            step: Survey step the session was in
            **kwargs: Additional arguments for parent class
        """
        details = kwargs.get("details", {})
        if session_id:
            details["session_id"] = session_id
        if step:
            details["step"] = step

        kwargs["details"] = details
        super().__init__(message, **kwargs)

        self.session_id = session_id
        self.step = step


class SurveyStateError(SurveyError):
    """Raised when a transition is not permitted from the current step."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", "INVALID_TRANSITION")
        super().__init__(message, **kwargs)


class NoQuestionsAvailableError(SurveyError):
    """Raised when a stage has no questions for the respondent."""

    def __init__(
        self,
        message: str = "No questions available",
        stage: Optional[int] = None,
        track: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.get("details", {})
        if stage is not None:
            details["stage"] = stage
        if track:
            details["track"] = track

        kwargs["details"] = details
        kwargs.setdefault("error_code", "NO_QUESTIONS_AVAILABLE")
        super().__init__(message, **kwargs)

        self.stage = stage
        self.track = track


class ExternalServiceError(InferDevError):
    """Exception for recommendation backend failures."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None,
        **kwargs
    ):
        """Initialize external service error.

        Args:
            message: Error message
            service: External service name
            status_code: HTTP status code if applicable
            response_data: Response data from service
            **kwargs: Additional arguments for parent class
        """
        details = kwargs.get("details", {})
        if service:
            details["service"] = service
        if status_code:
            details["status_code"] = status_code
        if response_data:
            details["response_data"] = response_data

        kwargs["details"] = details
        kwargs.setdefault("error_code", "EXTERNAL_SERVICE_ERROR")
        super().__init__(message, **kwargs)

        self.service = service
        self.status_code = status_code
        self.response_data = response_data


class ResponseShapeError(ExternalServiceError):
    """Backend answered with something that is not the expected JSON."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", "UNEXPECTED_RESPONSE")
        super().__init__(message, **kwargs)


class ConfigurationError(InferDevError):
    """Exception for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs
    ):
        details = kwargs.get("details", {})
        if config_key:
            details["config_key"] = config_key
        if config_value is not None:
            details["config_value"] = str(config_value)

        kwargs["details"] = details
        kwargs.setdefault("error_code", "CONFIGURATION_ERROR")
        super().__init__(message, **kwargs)

        self.config_key = config_key
        self.config_value = config_value


def create_error_response(
    error: InferDevError,
    request_id: Optional[str] = None,
    include_details: bool = True
) -> Dict[str, Any]:
    """Create standardized error response dictionary.

    Args:
        error: InferDev error instance
        request_id: Request ID for tracking
        include_details: Whether to include error details

    Returns:
        Dict[str, Any]: Error response dictionary
    """
    response: Dict[str, Any] = {
        "error": {
            "code": error.error_code or error.__class__.__name__,
            "message": error.message,
            "request_id": request_id,
        }
    }

    if include_details and error.details:
        response["error"]["details"] = error.details

    if isinstance(error, ValidationError) and error.validation_errors:
        response["error"]["validation_errors"] = error.validation_errors

    return response


__all__ = [
    "InferDevError",
    "ValidationError",
    "ResourceNotFoundError",
    "SurveyError",
    "SurveyStateError",
    "NoQuestionsAvailableError",
    "ExternalServiceError",
    "ResponseShapeError",
    "ConfigurationError",
    "create_error_response",
]
