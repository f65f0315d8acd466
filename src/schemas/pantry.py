"""Pantry schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import ExpiryStatus


class PantryItemCreate(BaseModel):
    """Add an item to the pantry."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    shelf_life: int = Field(..., ge=1, le=3650, description="Shelf life in days")


class ExpiryInfo(BaseModel):
    """Expiry state of an item as of today."""

    expiry_date: date
    remaining_days: int
    status: ExpiryStatus
    label: str


class PantryItemResponse(BaseModel):
    """Pantry item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    shelf_life: int
    added_date: date
    created_at: datetime
    expiry: ExpiryInfo


class PantryAlertResponse(BaseModel):
    """An entry of the expiry alert panel."""

    item_id: int
    name: str
    status: ExpiryStatus
    remaining_days: int
    label: str
    message: str
