"""Selection of users to email about soon-to-expire items.

This module only decides who gets an email and what it says. Queueing and
delivery live in ``notification_service``.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from html import escape

from src.services.expiry import ALERT_THRESHOLD_DAYS, ShelfLifeItem, classify, day_phrase

logger = logging.getLogger(__name__)

EXPIRY_EMAIL_SUBJECT = "You have items expiring soon in your Pantry!"


@dataclass(frozen=True)
class UserItems:
    """A user and the items in their pantry."""

    user_id: int
    items: Sequence[ShelfLifeItem] = field(default_factory=tuple)


@dataclass(frozen=True)
class ExpiringItem:
    """One line of an expiry email."""

    name: str
    remaining_days: int

    @property
    def phrase(self) -> str:
        return day_phrase(self.remaining_days)


@dataclass(frozen=True)
class NotificationCandidate:
    """A user who should be emailed in this run, with the items to mention."""

    user_id: int
    expiring_items: tuple[ExpiringItem, ...]


@dataclass(frozen=True)
class MailPayload:
    """What gets handed to mail dispatch."""

    recipients: list[str]
    subject: str
    body: str


def select_notifications(
    users: Iterable[UserItems],
    today: date | datetime,
    alert_threshold_days: int = ALERT_THRESHOLD_DAYS,
) -> list[NotificationCandidate]:
    """Pick users with at least one item expiring within the alert window.

    Only items with ``0 <= remaining_days <= alert_threshold_days`` qualify;
    already-expired items are left out. Users with an empty pantry, or with
    nothing in the window, produce no candidate. Output follows the input
    order of users and of each user's items. A user whose items cannot be
    classified is logged and skipped; the other users are still selected.
    """
    candidates = []
    for user in users:
        if not user.items:
            continue

        expiring = []
        try:
            for item in user.items:
                remaining_days = classify(item, today).remaining_days
                if 0 <= remaining_days <= alert_threshold_days:
                    expiring.append(ExpiringItem(name=item.name, remaining_days=remaining_days))
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Skipping user {user.user_id}, unreadable pantry item: {e}")
            continue

        if expiring:
            candidates.append(
                NotificationCandidate(user_id=user.user_id, expiring_items=tuple(expiring))
            )

    return candidates


def build_expiry_email(candidate: NotificationCandidate, recipient: str) -> MailPayload:
    """Render the expiry alert email for one candidate."""
    lines = "".join(
        f"<li><b>{escape(item.name)}</b>: {item.phrase}</li>"
        for item in candidate.expiring_items
    )
    body = (
        "<h1>PantryPal Expiry Alert!</h1>"
        "<p>Hello! You have some items in your pantry that are expiring soon:</p>"
        f"<ul>{lines}</ul>"
        "<p>Log in to PantryPal to manage your items and prevent food waste!</p>"
    )
    return MailPayload(recipients=[recipient], subject=EXPIRY_EMAIL_SUBJECT, body=body)
