"""
Create/edit form handling for layouts.

Converts submitted form fields into the payload expected by the layouts
API and the other way round for prefilling the edit form.
"""

import math
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import FormValidationError, ValidationException
from .models import Layout, LayoutPayload, Number

REQUIRED_FIELDS = ("roomName", "width", "length", "price")
NUMERIC_FIELDS = ("width", "length", "price")

FORM_FIELDS = (
    "roomName",
    "width",
    "length",
    "image",
    "notes",
    "price",
    "discount",
    "available",
)


def parse_number(value: Any) -> Optional[Number]:
    """
    Parse a form value as a number.

    Integral values come back as ``int`` so the API stores ``12`` rather
    than ``12.0``. Returns ``None`` for blank or non-numeric input.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value or "").strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None

    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def parse_available(value: Any) -> bool:
    """Only the select's ``"true"`` option (or a real ``True``) means in stock."""
    return value is True or value == "true"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def validate_form(form: Mapping[str, Any]) -> None:
    """
    Check required and numeric fields.

    Raises:
        FormValidationError: listing every invalid field
    """
    errors: List[ValidationException] = []

    for field_name in REQUIRED_FIELDS:
        value = form.get(field_name)
        if not _text(value).strip():
            errors.append(ValidationException(field_name, value, "This field is required"))
        elif field_name in NUMERIC_FIELDS and parse_number(value) is None:
            errors.append(ValidationException(field_name, value, "Enter a number"))

    if errors:
        raise FormValidationError(errors)


def build_payload(form: Mapping[str, Any]) -> LayoutPayload:
    """
    Validate a submitted form and coerce it into an API payload.

    Measurements and price become numbers, a blank or invalid discount
    becomes 0 and availability becomes a boolean.

    Args:
        form: Submitted form fields keyed by their API names

    Returns:
        Payload ready to be sent with POST or PUT

    Raises:
        FormValidationError: If a required field is blank or not numeric
    """
    validate_form(form)

    return LayoutPayload(
        roomName=_text(form.get("roomName")),
        width=parse_number(form.get("width")),
        length=parse_number(form.get("length")),
        image=_text(form.get("image")),
        notes=_text(form.get("notes")),
        price=parse_number(form.get("price")),
        discount=parse_number(form.get("discount")) or 0,
        available=parse_available(form.get("available")),
    )


def empty_form() -> Dict[str, Any]:
    """Values for a blank create form. Availability starts as in stock."""
    form: Dict[str, Any] = {name: "" for name in FORM_FIELDS}
    form["available"] = True
    return form


def form_from_layout(layout: Layout) -> Dict[str, Any]:
    """Prefill values for editing an existing layout."""
    return {
        "roomName": layout.room_name or "",
        "width": "" if layout.width is None else layout.width,
        "length": "" if layout.length is None else layout.length,
        "image": layout.image or "",
        "notes": layout.notes or "",
        "price": "" if layout.price is None else layout.price,
        "discount": layout.discount or 0,
        "available": layout.available is not False,
    }


def form_from_submission(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Echo submitted values back into the form after a failed save."""
    values: Dict[str, Any] = {name: _text(form.get(name)) for name in FORM_FIELDS}
    values["available"] = parse_available(form.get("available"))
    return values
