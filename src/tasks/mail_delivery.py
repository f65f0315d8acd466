"""Celery task delivering queued email."""

import logging
from datetime import UTC, datetime

from src.celery_app import app as celery_app
from src.database import SessionLocal
from src.models import MailMessage
from src.models.enums import MailStatus
from src.services.errors import MailDeliveryError
from src.services.notification_selector import MailPayload
from src.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="tasks.deliver_mail", max_retries=3)
def deliver_mail(self, message_id: int) -> dict:
    """Send one mail-queue record over SMTP.

    Args:
        message_id: ID of the MailMessage record

    Returns:
        dict with the delivery outcome
    """
    db = SessionLocal()
    try:
        message = db.query(MailMessage).filter(MailMessage.id == message_id).first()
        if not message:
            logger.error(f"MailMessage {message_id} not found")
            return {"error": "Mail message not found"}

        if message.status == MailStatus.SENT.value:
            return {"status": MailStatus.SENT.value, "skipped": True}

        payload = MailPayload(
            recipients=list(message.recipients),
            subject=message.subject,
            body=message.body,
        )

        try:
            NotificationService(db).send_mail(payload)
        except MailDeliveryError as e:
            if self.request.retries < self.max_retries:
                raise self.retry(exc=e, countdown=60) from e

            message.status = MailStatus.FAILED.value
            message.error_message = e.message
            db.commit()
            return {"status": MailStatus.FAILED.value, "error": e.message}

        message.status = MailStatus.SENT.value
        message.error_message = None
        message.sent_at = datetime.now(UTC)
        db.commit()
        return {"status": MailStatus.SENT.value}

    finally:
        db.close()
