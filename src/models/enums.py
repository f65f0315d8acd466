"""Enums for model fields and derived values."""

from enum import Enum


class ExpiryStatus(str, Enum):
    """Expiry bucket of a pantry item, most relaxed first."""

    FRESH = "fresh"
    NEARING_EXPIRY = "nearing-expiry"
    EXPIRES_SOON = "expires-soon"
    EXPIRED = "expired"

    @property
    def needs_attention(self) -> bool:
        """Check if this status belongs in the alert panel."""
        return self != ExpiryStatus.FRESH


class ScanStatus(str, Enum):
    """Processing state of an uploaded product photo."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class MailStatus(str, Enum):
    """Delivery state of a queued email."""

    QUEUED = "queued"
    SENT = "sent"
    FAILED = "failed"
