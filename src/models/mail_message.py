"""Outbound mail queue model."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from src.database import Base
from src.models.mixins import TimestampMixin


class MailMessage(Base, TimestampMixin):
    """Queued email; written by the expiry check and consumed by the delivery task."""

    __tablename__ = "mail_queue"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    recipients = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
    subject = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="queued")  # queued, sent, failed
    error_message = Column(Text, nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
