"""Notification API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_current_user, get_pantry_store, get_today
from src.models.user import User
from src.schemas.notification import ExpiringItemResponse, ExpiryEmailPreview
from src.services.expiry import ALERT_THRESHOLD_DAYS
from src.services.notification_selector import (
    UserItems,
    build_expiry_email,
    select_notifications,
)
from src.services.pantry_store import PantryStore

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("/preview", response_model=ExpiryEmailPreview)
def preview_expiry_email(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[PantryStore, Depends(get_pantry_store)],
    today: Annotated[date, Depends(get_today)],
) -> ExpiryEmailPreview:
    """Show the expiry email the daily check would send the current user today."""
    user_items = UserItems(user_id=current_user.id, items=store.list_items(current_user.id))
    candidates = select_notifications([user_items], today, ALERT_THRESHOLD_DAYS)

    if not candidates:
        return ExpiryEmailPreview(day=today, expiring_items=[])

    candidate = candidates[0]
    payload = build_expiry_email(candidate, current_user.email)
    return ExpiryEmailPreview(
        day=today,
        expiring_items=[
            ExpiringItemResponse(
                name=item.name,
                remaining_days=item.remaining_days,
                phrase=item.phrase,
            )
            for item in candidate.expiring_items
        ],
        subject=payload.subject,
        body=payload.body,
    )
