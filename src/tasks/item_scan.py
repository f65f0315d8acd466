"""Celery task for product photo scanning."""

import asyncio
import base64
import logging
from datetime import UTC, datetime

from src.celery_app import app as celery_app
from src.config import get_settings
from src.database import SessionLocal
from src.models.enums import ScanStatus
from src.models.item_scan import ItemScan
from src.services.errors import AIServiceUnavailableError
from src.services.expiry import today_in
from src.services.item_scan_service import ItemScanService, shelf_life_from_expiry

logger = logging.getLogger(__name__)


@celery_app.task(name="tasks.process_item_scan")
def process_item_scan(scan_id: int, image_data_b64: str, media_type: str) -> dict:
    """Extract product details from a photo using Claude Vision.

    Args:
        scan_id: ID of the ItemScan record
        image_data_b64: Base64-encoded image data
        media_type: MIME type of the image

    Returns:
        Dict with processing results
    """
    db = SessionLocal()
    try:
        scan = db.query(ItemScan).filter(ItemScan.id == scan_id).first()
        if not scan:
            logger.error(f"ItemScan {scan_id} not found")
            return {"error": "Scan not found"}

        scan.status = ScanStatus.PROCESSING.value
        db.commit()

        image_data = base64.b64decode(image_data_b64)

        service = ItemScanService()
        try:
            # Run async function in sync context
            details = asyncio.run(service.extract_item_details(image_data, media_type))
        except (AIServiceUnavailableError, ValueError) as e:
            logger.error(f"Failed to scan item photo: {e}")
            scan.status = ScanStatus.FAILED.value
            scan.error_message = str(e)
            db.commit()
            return {"error": str(e)}

        today = today_in(get_settings().app_timezone)

        scan.status = ScanStatus.COMPLETED.value
        scan.item_found = details.item_found
        scan.barcode = details.barcode
        scan.product_name = details.product_name
        scan.expiry_date = details.expiry_date
        scan.suggested_shelf_life = shelf_life_from_expiry(details.expiry_date, today)
        scan.processed_at = datetime.now(UTC)
        db.commit()

        return {
            "status": ScanStatus.COMPLETED.value,
            "item_found": details.item_found,
            "product_name": details.product_name,
            "suggested_shelf_life": scan.suggested_shelf_life,
        }

    except Exception as e:
        logger.exception(f"Error processing item scan {scan_id}")
        try:
            db.rollback()
            scan = db.query(ItemScan).filter(ItemScan.id == scan_id).first()
            if scan:
                scan.status = ScanStatus.FAILED.value
                scan.error_message = str(e)
                db.commit()
        except Exception as db_error:
            logger.error(f"Failed to update scan status: {db_error}")
        return {"error": str(e)}
    finally:
        db.close()
