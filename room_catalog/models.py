"""Pydantic models for layout records exchanged with the layouts API."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class Layout(BaseModel):
    """
    A furnished room listing as stored by the external collection.

    Field names follow the API's camelCase keys through aliases. Optional
    fields stay ``None`` when the service omits them so that callers can
    tell a missing ``available`` flag from an explicit ``False``.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    id: str
    room_name: Optional[str] = Field(None, alias="roomName")
    width: Optional[Number] = None
    length: Optional[Number] = None
    image: Optional[str] = None
    notes: Optional[str] = None
    price: Optional[Number] = Field(None, description="MRP, the undiscounted price")
    discount: Optional[Number] = Field(None, description="Discount percentage")
    available: Optional[bool] = None


class LayoutPayload(BaseModel):
    """Request body for creating or fully replacing a layout."""

    model_config = ConfigDict(populate_by_name=True)

    room_name: str = Field(..., alias="roomName", min_length=1)
    width: Number
    length: Number
    image: Optional[str] = None
    notes: Optional[str] = None
    price: Number
    discount: Number = 0
    available: bool = True

    def to_api(self) -> dict:
        """Serialize with the API's field names."""
        return self.model_dump(by_alias=True)
