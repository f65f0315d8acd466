"""Product photo scan schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class ItemScanResponse(BaseModel):
    """Status and result of a product photo scan."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    status: str
    error_message: str | None = None
    item_found: bool | None = None
    barcode: str | None = None
    product_name: str | None = None
    expiry_date: date | None = None
    suggested_shelf_life: int | None = None
    processed_at: datetime | None = None
    created_at: datetime


class ItemScanCreateResponse(BaseModel):
    """Response when uploading a product photo."""

    id: int
    status: str
    message: str
