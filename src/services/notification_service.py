"""Notification service: contact lookup, mail queueing and SMTP delivery."""

import logging
import smtplib
from email.message import EmailMessage

from sqlalchemy.orm import Session

from src.config import get_settings
from src.models import MailMessage, User
from src.models.enums import MailStatus
from src.services.errors import MailDeliveryError
from src.services.notification_selector import MailPayload

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for resolving contacts and sending email alerts."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()
        if not self.settings.smtp_configured:
            logger.info("SMTP host not configured, queued mail will not be delivered")

    def get_contact_address(self, user_id: int) -> str | None:
        """Email address for a user, or None if there is nowhere to send to."""
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user or not user.email:
            return None
        return user.email

    def queue_mail(
        self,
        payload: MailPayload,
        user_id: int | None = None,
        dispatch: bool = True,
    ) -> MailMessage:
        """
        Store a mail-queue record and hand it to the delivery task.

        Delivery retries are the delivery task's business, not the caller's.
        """
        message = MailMessage(
            user_id=user_id,
            recipients=list(payload.recipients),
            subject=payload.subject,
            body=payload.body,
            status=MailStatus.QUEUED.value,
        )
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)

        if dispatch:
            from src.tasks.mail_delivery import deliver_mail

            deliver_mail.delay(message.id)

        logger.info(f"Queued mail {message.id} to {', '.join(payload.recipients)}")
        return message

    def send_mail(self, payload: MailPayload) -> None:
        """
        Send an HTML email over SMTP.

        Raises MailDeliveryError if SMTP is not configured or the server refuses.
        """
        if not self.settings.smtp_configured:
            raise MailDeliveryError("SMTP host not configured")

        msg = EmailMessage()
        msg["Subject"] = payload.subject
        msg["From"] = self.settings.mail_from
        msg["To"] = ", ".join(payload.recipients)
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(payload.body, subtype="html")

        try:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=30) as s:
                if self.settings.smtp_use_tls:
                    s.starttls()
                if self.settings.smtp_username and self.settings.smtp_password:
                    s.login(self.settings.smtp_username, self.settings.smtp_password)
                s.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send mail to {msg['To']}: {e}")
            raise MailDeliveryError(f"Failed to send mail: {e}") from e

        logger.info(f"Mail sent to {msg['To']}")
