"""
┌──────────────────────────────────────────────────────────────┐
│                    Exception Handling Flow                   │
│                                                              │
│  [Error] → [Classify] → [Log] → [Response] → [Client]        │
│                                                              │
│  Error Types: Validation → Not Found → Cache Backend         │
│  HTTP Status: 400 → 404 → 503                                │
└──────────────────────────────────────────────────────────────┘

Exception classes for Ambient.Impact Core

Unknown components and missing library/template files are not errors: the
registry returns None for those so callers can loop over definitions and
skip silently. The classes below cover programming mistakes and failures of
external collaborators.
"""

from typing import Any, Dict, Optional
import structlog

logger = structlog.get_logger()


class AmbientImpactException(Exception):
    """
    Base exception class for Ambient.Impact Core.

    Features:
    - Structured error context
    - HTTP status code mapping
    - Optional error codes
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        """Initialize base exception."""
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code

        logger.error(
            "AmbientImpact exception occurred",
            error_type=self.__class__.__name__,
            message=message,
            error_code=error_code,
            status_code=status_code,
            details=details
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for an HTTP error response."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(AmbientImpactException):
    """Validation error for input/configuration validation."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        error_code: str = "VALIDATION_ERROR"
    ):
        """Initialize validation error."""
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["invalid_value"] = str(value)

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=400
        )
        self.field = field
        self.value = value


class InvalidMarkupError(ValidationError, TypeError):
    """
    Raised when markup processing receives something that is not markup.

    This indicates a mistake in the calling code rather than a data-driven
    condition, so it is raised instead of being signalled with a sentinel.
    """

    def __init__(self, value: Any):
        super().__init__(
            message=(
                "The markup parameter must either be a string or an "
                "instance of TranslatableMarkup"
            ),
            field="markup",
            value=type(value).__name__,
            error_code="INVALID_MARKUP",
        )


class NotFoundError(AmbientImpactException):
    """Resource not found error."""

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        error_code: str = "NOT_FOUND"
    ):
        """Initialize not found error."""
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=404
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ComponentNotFoundError(NotFoundError):
    """Raised by the HTTP layer when a requested component id is unknown."""

    def __init__(self, component_id: str):
        super().__init__(
            message=f"Component not found: {component_id}",
            resource_type="component",
            resource_id=component_id,
            error_code="COMPONENT_NOT_FOUND",
        )


class CacheBackendError(AmbientImpactException):
    """Cache backend failure."""

    def __init__(
        self,
        message: str,
        cid: Optional[str] = None,
        error_code: str = "CACHE_BACKEND_ERROR"
    ):
        details = {}
        if cid:
            details["cid"] = cid

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=503
        )
        self.cid = cid
