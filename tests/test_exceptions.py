"""
Tests for custom exception classes.

Tests all custom exception types to ensure proper initialization
and error message formatting.
"""

from room_catalog.exceptions import (
    CatalogServiceException,
    FormValidationError,
    LayoutNotFoundException,
    LayoutsApiError,
    ValidationException,
)


def test_catalog_service_exception_basic() -> None:
    exc = CatalogServiceException("Test error")

    assert exc.message == "Test error"
    assert exc.details == {}
    assert str(exc) == "Test error"


def test_catalog_service_exception_with_details() -> None:
    details = {"code": "ERR001", "context": "test_context"}
    exc = CatalogServiceException("Test error", details=details)

    assert exc.details == details


def test_layouts_api_error() -> None:
    """
    Test LayoutsApiError keeps the upstream status code.

    Verifies it is part of the catalog exception hierarchy.
    """
    exc = LayoutsApiError("Layouts API returned error: 503", status_code=503)

    assert isinstance(exc, CatalogServiceException)
    assert exc.status_code == 503
    assert exc.details == {}


def test_layouts_api_error_without_response() -> None:
    exc = LayoutsApiError("Cannot connect to the layouts API", details={"error_type": "request_error"})

    assert exc.status_code is None
    assert exc.details["error_type"] == "request_error"


def test_layout_not_found_exception() -> None:
    exc = LayoutNotFoundException("17")

    assert isinstance(exc, LayoutsApiError)
    assert exc.layout_id == "17"
    assert exc.status_code == 404
    assert exc.message == "Layout '17' was not found"


def test_validation_exception() -> None:
    exc = ValidationException("price", "abc", "Enter a number")

    assert exc.field_name == "price"
    assert exc.value == "abc"
    assert exc.reason == "Enter a number"
    assert exc.message == "Validation failed for 'price': Enter a number"


def test_form_validation_error_collects_fields() -> None:
    exc = FormValidationError(
        [
            ValidationException("roomName", "", "This field is required"),
            ValidationException("width", "x", "Enter a number"),
        ]
    )

    assert exc.message == "Invalid form fields: roomName, width"
    assert exc.field_errors == {
        "roomName": "This field is required",
        "width": "Enter a number",
    }
    assert exc.details == {"fields": ["roomName", "width"]}
