from typing import Any, Dict, Optional, Union
from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError


class BaseAPIError(Exception):
    """Base exception class for API errors"""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(BaseAPIError):
    """Raised when input validation fails"""
    def __init__(
        self,
        message: str = "Validation error",
        error_code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code=error_code,
            details=details
        )


class InvalidIdentifierError(ValidationError):
    """Raised when a value cannot be used as an entity identifier"""
    def __init__(self, value: Any, reason: str = "unsupported identifier representation"):
        self.value = value
        super().__init__(
            message=f"Invalid identifier {value!r}: {reason}",
            error_code="INVALID_IDENTIFIER",
            details={"value": repr(value), "type": type(value).__name__}
        )


class UnknownFieldError(ValidationError):
    """Raised when a lookup names a field outside an entity's declared schema"""
    def __init__(self, entity_type: str, field: str):
        self.entity_type = entity_type
        self.field = field
        super().__init__(
            message=f"{entity_type} has no field '{field}'",
            error_code="UNKNOWN_FIELD",
            details={"entity_type": entity_type, "field": field}
        )


class HopResolutionError(BaseAPIError):
    """Base class for failures at one hop of a relationship traversal"""
    def __init__(
        self,
        message: str,
        hop: int,
        entity_type: str,
        key: Any,
        status_code: int,
        error_code: str
    ):
        self.hop = hop
        self.entity_type = entity_type
        self.key = key
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details={"hop": hop, "entity_type": entity_type, "key": key}
        )


class ReferenceNotFoundError(HopResolutionError):
    """Raised when a hop matches no record"""
    def __init__(self, hop: int, entity_type: str, key: Any, message: Optional[str] = None):
        super().__init__(
            message=message or f"Hop {hop}: no {entity_type} matches {key!r}",
            hop=hop,
            entity_type=entity_type,
            key=key,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="REFERENCE_NOT_FOUND"
        )


class AmbiguousReferenceError(HopResolutionError):
    """Raised when a hop that must be unique matches several records"""
    def __init__(self, hop: int, entity_type: str, key: Any, message: Optional[str] = None):
        super().__init__(
            message=message or f"Hop {hop}: several {entity_type} records match {key!r}",
            hop=hop,
            entity_type=entity_type,
            key=key,
            status_code=status.HTTP_409_CONFLICT,
            error_code="AMBIGUOUS_REFERENCE"
        )


class StoreUnavailableError(BaseAPIError):
    """Raised when the backing store cannot be read"""
    def __init__(self, cause: Union[BaseException, str], hop: Optional[int] = None):
        self.cause = cause
        self.hop = hop
        details: Dict[str, Any] = {"cause": str(cause)}
        if hop is not None:
            details["hop"] = hop
        super().__init__(
            message="Identity store unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="STORE_UNAVAILABLE",
            details=details
        )


class ResolutionCancelled(BaseAPIError):
    """Raised when a caller cancels a resolution between hops"""
    def __init__(self, path: str, hop: int):
        self.path = path
        self.hop = hop
        super().__init__(
            message=f"Resolution of '{path}' cancelled before hop {hop}",
            error_code="RESOLUTION_CANCELLED",
            details={"path": path, "hop": hop}
        )


def get_error_message(
    error: Union[Exception, HTTPException, str],
    default_message: str = "An unexpected error occurred",
    include_details: bool = True
) -> Dict[str, Any]:
    """
    Formats errors into the API error envelope.

    Args:
        error: The exception that was raised or error message string
        default_message: Fallback message if error type is not recognized
        include_details: Whether to include error details in response

    Returns:
        Dict containing formatted error response with message, code, and optional details
    """
    error_response = {
        "success": False,
        "error_code": "INTERNAL_ERROR",
        "message": default_message,
        "status_code": 500
    }

    if isinstance(error, str):
        error_response.update({
            "message": error,
            "error_code": "GENERAL_ERROR"
        })
        return error_response

    if isinstance(error, HTTPException):
        error_response.update({
            "error_code": "HTTP_ERROR",
            "message": str(error.detail),
            "status_code": error.status_code
        })

    elif isinstance(error, BaseAPIError):
        error_response.update({
            "error_code": error.error_code,
            "message": error.message,
            "status_code": error.status_code
        })

        if include_details and error.details:
            error_response["details"] = error.details

    elif isinstance(error, SQLAlchemyError):
        error_response.update({
            "error_code": "DB_ERROR",
            "message": "Database error occurred",
            "status_code": 500
        })

    elif isinstance(error, ValueError):
        error_response.update({
            "error_code": "VALIDATION_ERROR",
            "message": str(error),
            "status_code": 422
        })

    if include_details:
        error_response["error_type"] = error.__class__.__name__

    return error_response
