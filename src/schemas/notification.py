"""Notification-related Pydantic schemas."""

from datetime import date

from pydantic import BaseModel


class ExpiringItemResponse(BaseModel):
    """An item that would be mentioned in the expiry email."""

    name: str
    remaining_days: int
    phrase: str


class ExpiryEmailPreview(BaseModel):
    """The expiry email the user would receive on `day`."""

    day: date
    expiring_items: list[ExpiringItemResponse]
    subject: str | None = None
    body: str | None = None
