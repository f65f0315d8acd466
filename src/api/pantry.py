"""Pantry API endpoints."""

import base64
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from src.api.dependencies import (
    get_current_user,
    get_item_scan_service,
    get_pantry_store,
    get_today,
)
from src.database import get_db
from src.models.enums import ExpiryStatus, ScanStatus
from src.models.item_scan import ItemScan
from src.models.pantry import PantryItem
from src.models.user import User
from src.schemas.item_scan import ItemScanCreateResponse, ItemScanResponse
from src.schemas.pantry import (
    ExpiryInfo,
    PantryAlertResponse,
    PantryItemCreate,
    PantryItemResponse,
)
from src.services.errors import AIServiceUnavailableError
from src.services.expiry import (
    ExpiryClassification,
    build_alerts,
    classify,
    filter_by_status,
    sort_by_expiry,
)
from src.services.item_scan_service import ItemScanService
from src.services.pantry_store import PantryStore

router = APIRouter(prefix="/api/v1/pantry", tags=["pantry"])


def to_item_response(item: PantryItem, expiry: ExpiryClassification) -> PantryItemResponse:
    """Serialize an item together with its expiry state."""
    return PantryItemResponse(
        id=item.id,
        user_id=item.user_id,
        name=item.name,
        shelf_life=item.shelf_life,
        added_date=item.added_date,
        created_at=item.created_at,
        expiry=ExpiryInfo(
            expiry_date=expiry.expiry_date,
            remaining_days=expiry.remaining_days,
            status=expiry.status,
            label=expiry.label,
        ),
    )


@router.get("", response_model=list[PantryItemResponse])
def list_pantry_items(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[PantryStore, Depends(get_pantry_store)],
    today: Annotated[date, Depends(get_today)],
    status_filter: Annotated[list[ExpiryStatus] | None, Query(alias="status")] = None,
):
    """List the user's pantry, soonest to expire first.

    Pass `status` (repeatable) to only return items in those expiry buckets.
    """
    classified = sort_by_expiry(store.list_items(current_user.id), today)
    if status_filter:
        classified = filter_by_status(classified, status_filter)
    return [to_item_response(c.item, c.expiry) for c in classified]


@router.post("", response_model=PantryItemResponse, status_code=status.HTTP_201_CREATED)
def create_pantry_item(
    item_data: PantryItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[PantryStore, Depends(get_pantry_store)],
    today: Annotated[date, Depends(get_today)],
):
    """Add an item to the pantry; it counts as added today."""
    item = store.add_item(
        current_user.id,
        name=item_data.name,
        shelf_life=item_data.shelf_life,
        added_date=today,
    )
    return to_item_response(item, classify(item, today))


@router.get("/alerts", response_model=list[PantryAlertResponse])
def list_pantry_alerts(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[PantryStore, Depends(get_pantry_store)],
    today: Annotated[date, Depends(get_today)],
):
    """Items needing attention (nearing expiry, expiring soon or expired), most urgent first."""
    return [
        PantryAlertResponse(
            item_id=alert.item.id,
            name=alert.item.name,
            status=alert.expiry.status,
            remaining_days=alert.expiry.remaining_days,
            label=alert.expiry.label,
            message=alert.message,
        )
        for alert in build_alerts(store.list_items(current_user.id), today)
    ]


# --- Product photo scanning ---


ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
MAX_IMAGE_BYTES = 10 * 1024 * 1024


@router.post("/scan", response_model=ItemScanCreateResponse)
async def scan_item(
    file: Annotated[UploadFile, File(description="Product photo (JPEG, PNG, GIF, or WebP)")],
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    scan_service: Annotated[ItemScanService, Depends(get_item_scan_service)],
):
    """Upload a product photo to read its name, barcode and expiry date.

    The photo is processed asynchronously using Claude Vision.
    Poll the status endpoint to check when processing is complete.

    Note: This endpoint must remain async because UploadFile.read() is async.
    """
    from src.tasks.item_scan import process_item_scan

    if not scan_service.is_configured:
        raise AIServiceUnavailableError("Product photo scanning is not configured")

    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type. Allowed types: {', '.join(sorted(ALLOWED_IMAGE_TYPES))}",
        )

    image_data = await file.read()

    if len(image_data) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File too large. Maximum size is 10MB.",
        )

    scan = ItemScan(user_id=current_user.id, status=ScanStatus.PENDING.value)
    db.add(scan)
    db.commit()
    db.refresh(scan)

    image_data_b64 = base64.b64encode(image_data).decode("utf-8")
    process_item_scan.delay(scan.id, image_data_b64, file.content_type)

    return ItemScanCreateResponse(
        id=scan.id,
        status=ScanStatus.PENDING.value,
        message="Photo uploaded successfully. Processing in background.",
    )


@router.get("/scan/{scan_id}", response_model=ItemScanResponse)
def get_item_scan(
    scan_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the status and results of a product photo scan."""
    scan = (
        db.query(ItemScan)
        .filter(
            ItemScan.id == scan_id,
            ItemScan.user_id == current_user.id,
        )
        .first()
    )

    if not scan:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item scan not found",
        )

    return scan


@router.get("/{item_id}", response_model=PantryItemResponse)
def get_pantry_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[PantryStore, Depends(get_pantry_store)],
    today: Annotated[date, Depends(get_today)],
):
    """Get a specific pantry item."""
    item = store.get_item(current_user.id, item_id)
    return to_item_response(item, classify(item, today))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pantry_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[PantryStore, Depends(get_pantry_store)],
):
    """Remove an item from the pantry."""
    store.remove_item(current_user.id, item_id)
