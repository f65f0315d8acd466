"""Celery task for the daily expiry email check."""

import logging
from datetime import date

from sqlalchemy.orm import Session

from src.celery_app import app as celery_app
from src.config import get_settings
from src.database import SessionLocal
from src.services.errors import StoreUnavailableError
from src.services.expiry import ALERT_THRESHOLD_DAYS, today_in
from src.services.notification_selector import build_expiry_email, select_notifications
from src.services.notification_service import NotificationService
from src.services.pantry_store import PantryStore

logger = logging.getLogger(__name__)


def run_expiry_check(
    db: Session,
    notification_service: NotificationService | None = None,
    today: date | None = None,
) -> dict:
    """Queue an expiry email for every user with items expiring soon.

    Each user is handled on their own: a missing address or an error while
    queueing is recorded and the run moves on to the next user. Running this
    twice on the same day queues the same emails twice.

    Returns:
        dict with run statistics
    """
    notification_service = notification_service or NotificationService(db)
    if today is None:
        today = today_in(get_settings().app_timezone)

    users = PantryStore(db).list_users_with_items()
    candidates = select_notifications(users, today, ALERT_THRESHOLD_DAYS)

    stats = {
        "date": today.isoformat(),
        "users_checked": len(users),
        "candidates": len(candidates),
        "queued": 0,
        "skipped_no_contact": 0,
        "failed": 0,
        "failures": [],
    }

    for candidate in candidates:
        try:
            address = notification_service.get_contact_address(candidate.user_id)
            if not address:
                logger.info(f"User {candidate.user_id} has no email, cannot send alert")
                stats["skipped_no_contact"] += 1
                continue

            payload = build_expiry_email(candidate, address)
            notification_service.queue_mail(payload, user_id=candidate.user_id)
            stats["queued"] += 1
            logger.info(
                f"Expiry alert queued for user {candidate.user_id} "
                f"({len(candidate.expiring_items)} items)"
            )
        except Exception as e:
            logger.exception(f"Failed to process pantry for user {candidate.user_id}")
            db.rollback()
            stats["failed"] += 1
            stats["failures"].append({"user_id": candidate.user_id, "error": str(e)})

    return stats


@celery_app.task(name="tasks.daily_expiry_check")
def daily_expiry_check() -> dict:
    """Run the expiry check; scheduled once a day via celery-beat."""
    logger.info("Running daily expiry check...")
    db: Session = SessionLocal()

    try:
        stats = run_expiry_check(db)
        logger.info(f"Daily expiry check complete: {stats}")
        return stats

    except StoreUnavailableError as e:
        logger.error(f"Daily expiry check aborted: {e}")
        return {"error": str(e)}

    finally:
        db.close()
