"""
Room Catalog Tests - Test Configuration.

Provides the test environment and sample layout records shaped like the
hosted API's responses.
"""

import os
from typing import Any, Dict, List

import pytest

# Settings are read at import time, so the environment is set before any
# room_catalog module is imported by the test modules.
os.environ.setdefault("LAYOUTS_API_URL", "http://test-layouts-api/api/layouts")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("ENABLE_TRACING", "false")

from room_catalog.models import Layout  # noqa: E402

TEST_API_URL = os.environ["LAYOUTS_API_URL"]


@pytest.fixture
def api_url() -> str:
    return TEST_API_URL


@pytest.fixture
def raw_layouts() -> List[Dict[str, Any]]:
    """
    Layout records as returned by GET on the collection.

    Covers a discounted record, one without a discount, one explicitly out
    of stock and one without any availability flag.
    """
    return [
        {
            "id": "1",
            "roomName": "Master Bedroom",
            "width": 14,
            "length": 16,
            "image": "https://images.example.com/bedroom.jpg",
            "notes": "King size bed with wardrobe",
            "price": 1000,
            "discount": 10,
            "available": True,
        },
        {
            "id": "2",
            "roomName": "living room",
            "width": 18,
            "length": 20,
            "image": "",
            "notes": "",
            "price": 2500,
            "discount": 0,
            "available": False,
        },
        {
            "id": "3",
            "roomName": "Kids Bedroom",
            "width": 10,
            "length": 12,
            "price": 999,
            "discount": 33,
        },
        {
            "id": "4",
            "roomName": "Étude",
            "width": 8,
            "length": 10,
            "price": 500,
            "available": True,
        },
    ]


@pytest.fixture
def layouts(raw_layouts: List[Dict[str, Any]]) -> List[Layout]:
    return [Layout.model_validate(item) for item in raw_layouts]


@pytest.fixture
def valid_form() -> Dict[str, str]:
    """Form fields as submitted by the create/edit page."""
    return {
        "roomName": "Guest Room",
        "width": "12",
        "length": "14.5",
        "image": "https://images.example.com/guest.jpg",
        "notes": "Single bed",
        "price": "1500",
        "discount": "15",
        "available": "true",
    }
