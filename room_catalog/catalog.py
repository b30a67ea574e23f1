"""
Derived values for the layout list and detail views.

Discount math, stock status, search filtering and sorting over the
in-memory copy of the collection fetched for a single page render.
"""

import math
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .models import Layout, Number


class SortKey(str, Enum):
    """Fields the list page can be sorted by."""

    ROOM_NAME = "roomName"
    PRICE = "price"
    DISCOUNT = "discount"
    FINAL_PRICE = "finalPrice"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortOption:
    """A sort key together with its direction."""

    key: SortKey
    direction: SortDirection

    @property
    def value(self) -> str:
        """The ``<key>-<direction>`` form used by the sort dropdown."""
        return f"{self.key.value}-{self.direction.value}"


SORT_CHOICES: List[Tuple[str, str]] = [
    ("roomName-asc", "Name ↑"),
    ("roomName-desc", "Name ↓"),
    ("price-asc", "Price ↑"),
    ("price-desc", "Price ↓"),
    ("discount-asc", "Discount ↑"),
    ("discount-desc", "Discount ↓"),
    ("finalPrice-asc", "Final Price ↑"),
    ("finalPrice-desc", "Final Price ↓"),
]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def final_price(price: Optional[Number], discount: Optional[Number] = 0) -> Optional[Number]:
    """
    Price after the discount percentage is applied.

    Rounds to the nearest integer with halves going up. Without a positive
    discount the price is returned unchanged.

    Args:
        price: MRP of the layout
        discount: Discount percentage, ``None`` counts as 0

    Returns:
        The discounted and rounded price, or ``price`` itself
    """
    if price is None:
        return None
    if discount and discount > 0:
        return _round_half_up(price - (price * discount) / 100)
    return price


def layout_final_price(layout: Layout) -> Optional[Number]:
    return final_price(layout.price, layout.discount or 0)


def has_discount(layout: Layout) -> bool:
    return bool(layout.discount and layout.discount > 0)


def is_available(layout: Layout) -> bool:
    """A layout is out of stock only when its flag is explicitly ``False``."""
    return layout.available is not False


def stock_label(layout: Layout) -> str:
    return "In Stock" if is_available(layout) else "Out of Stock"


def filter_layouts(layouts: Iterable[Layout], query: Optional[str]) -> List[Layout]:
    """
    Keep layouts whose room name contains the query, ignoring case.

    A blank query keeps everything. Only the blank check strips
    whitespace; the match itself uses the query as typed.
    """
    layouts = list(layouts)
    if not query or not query.strip():
        return layouts

    needle = query.lower()
    return [
        layout
        for layout in layouts
        if layout.room_name is not None and needle in layout.room_name.lower()
    ]


def _collation_key(text: Optional[str]) -> str:
    # Base-letter comparison: drop accents and case
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return stripped.casefold()


def _sort_value(layout: Layout, key: SortKey):
    if key is SortKey.ROOM_NAME:
        return _collation_key(layout.room_name)
    if key is SortKey.FINAL_PRICE:
        return layout_final_price(layout) or 0
    if key is SortKey.PRICE:
        return layout.price or 0
    return layout.discount or 0


def sort_layouts(
    layouts: Iterable[Layout],
    option: Optional[SortOption],
) -> List[Layout]:
    """
    Return a sorted copy of ``layouts``.

    ``sorted`` is stable for both directions, so layouts with equal keys
    keep their original relative order even when descending.
    """
    layouts = list(layouts)
    if option is None:
        return layouts

    return sorted(
        layouts,
        key=lambda layout: _sort_value(layout, option.key),
        reverse=option.direction is SortDirection.DESC,
    )


def parse_sort_option(value: Optional[str]) -> Optional[SortOption]:
    """
    Parse a dropdown value such as ``price-desc``.

    Empty or unrecognised values mean the list stays unsorted.
    """
    if not value:
        return None

    key, _, direction = value.partition("-")
    try:
        return SortOption(SortKey(key), SortDirection(direction))
    except ValueError:
        return None


def apply_view(
    layouts: Iterable[Layout],
    query: Optional[str] = None,
    sort: Optional[str] = None,
) -> List[Layout]:
    """Filter by ``query`` then order by the ``sort`` dropdown value."""
    return sort_layouts(filter_layouts(layouts, query), parse_sort_option(sort))
