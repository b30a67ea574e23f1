"""
Custom exception classes for the room catalog.

Provides specific exceptions for failed calls to the layouts API and
for rejected form input.
"""

from typing import Any, Dict, List, Optional


class CatalogServiceException(Exception):
    """
    Base exception for all room catalog errors.

    All custom exceptions should inherit from this class
    for consistent error handling.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize catalog exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class LayoutsApiError(CatalogServiceException):
    """
    Exception raised when a call to the layouts API fails.

    Covers timeouts, connection failures, non-2xx responses and
    bodies that cannot be decoded.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize layouts API error.

        Args:
            message: Error message
            status_code: HTTP status code if a response was received
            details: Additional context about the error
        """
        self.status_code = status_code
        super().__init__(message, details)


class LayoutNotFoundException(LayoutsApiError):
    """Exception raised when the API has no record for a layout id."""

    def __init__(
        self,
        layout_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.layout_id = layout_id
        super().__init__(
            f"Layout '{layout_id}' was not found",
            status_code=404,
            details=details,
        )


class ValidationException(CatalogServiceException):
    """
    Exception raised when a single form field fails validation.

    Used for blank required fields and non-numeric measurements.
    """

    def __init__(
        self,
        field_name: str,
        value: Any,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize validation exception.

        Args:
            field_name: Name of the field that failed validation
            value: The invalid value
            reason: Explanation of why validation failed
            details: Additional context about the error
        """
        self.field_name = field_name
        self.value = value
        self.reason = reason
        message = f"Validation failed for '{field_name}': {reason}"
        super().__init__(message, details)


class FormValidationError(CatalogServiceException):
    """Raised when one or more fields of a submitted layout form are invalid."""

    def __init__(self, errors: List[ValidationException]) -> None:
        self.errors = errors
        fields = ", ".join(error.field_name for error in errors)
        super().__init__(
            f"Invalid form fields: {fields}",
            details={"fields": [error.field_name for error in errors]},
        )

    @property
    def field_errors(self) -> Dict[str, str]:
        """Map each invalid field to its reason."""
        return {error.field_name: error.reason for error in self.errors}
