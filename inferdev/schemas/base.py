"""Base Pydantic schemas for InferDev API.

This module provides base schemas, response envelopes, and common data
structures used across all API endpoints.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

# Generic type variable for data
DataType = TypeVar('DataType')


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = {
        "use_enum_values": True,
        "validate_assignment": True,
        "arbitrary_types_allowed": False,
        "str_strip_whitespace": True,
        "populate_by_name": True,
    }


class ResponseMetadata(BaseSchema):
    """Metadata included in API responses."""

    request_id: Optional[str] = Field(None, description="Unique request identifier")
    timestamp: datetime = Field(default_factory=_utc_now, description="Response timestamp")
    version: str = Field(default="1.0", description="API version")


class BaseResponse(BaseSchema, Generic[DataType]):
    """Base response schema for all API endpoints."""

    success: bool = Field(..., description="Whether the request was successful")
    message: Optional[str] = Field(None, description="Human-readable message")
    data: Optional[DataType] = Field(None, description="Response data")
    meta: Optional[ResponseMetadata] = Field(None, description="Response metadata")


class SuccessResponse(BaseResponse[DataType]):
    """Success response schema."""

    success: bool = Field(default=True, description="Always true for success responses")

    @classmethod
    def create(
        cls,
        data: DataType,
        message: Optional[str] = None,
        meta: Optional[ResponseMetadata] = None
    ) -> "SuccessResponse[DataType]":
        """Create a success response.

        Args:
            data: Response data
            message: Optional success message
            meta: Optional metadata

        Returns:
            SuccessResponse: Success response instance
        """
        return cls(
            success=True,
            data=data,
            message=message,
            meta=meta or ResponseMetadata()
        )


class ErrorDetail(BaseSchema):
    """Individual error detail."""

    code: Optional[str] = Field(None, description="Error code")
    message: str = Field(..., description="Error message")
    request_id: Optional[str] = Field(None, description="Request identifier")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    validation_errors: Optional[List[str]] = Field(None, description="Per-field messages")


class ErrorResponse(BaseSchema):
    """Error envelope returned by every failing endpoint."""

    error: ErrorDetail = Field(..., description="Error information")


class HealthCheckResponse(BaseSchema):
    """Health check response schema."""

    status: str = Field(..., description="Overall health status")
    timestamp: datetime = Field(default_factory=_utc_now, description="Check timestamp")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")
    services: Dict[str, Dict[str, Any]] = Field(default_factory=dict, description="Dependency health")


def create_success_response(
    data: Any,
    message: Optional[str] = None,
    request_id: Optional[str] = None
) -> SuccessResponse:
    """Create a success response with metadata.

    Args:
        data: Response data
        message: Optional success message
        request_id: Optional request ID

    Returns:
        SuccessResponse: Success response
    """
    meta = ResponseMetadata()
    if request_id:
        meta.request_id = request_id

    return SuccessResponse.create(data=data, message=message, meta=meta)
