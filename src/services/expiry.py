"""Expiry computation and alert classification for pantry items.

Everything here is pure: the same item, shelf life and reference day always
produce the same result. Both the HTTP API and the daily expiry check import
the thresholds from this module so the two never disagree.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Protocol
from zoneinfo import ZoneInfo

from src.config import get_settings
from src.models.enums import ExpiryStatus

# Items with 0..ALERT_THRESHOLD_DAYS remaining are "expires soon" and get emailed
ALERT_THRESHOLD_DAYS = 3
# Items with ALERT_THRESHOLD_DAYS+1..NEARING_EXPIRY_THRESHOLD_DAYS remaining are flagged in the UI only
NEARING_EXPIRY_THRESHOLD_DAYS = 7


class ShelfLifeItem(Protocol):
    """Anything with an added date and a shelf life in days."""

    added_date: date | datetime
    shelf_life: int


@dataclass(frozen=True)
class ExpiryClassification:
    """Derived expiry state of one item on one day."""

    expiry_date: date
    remaining_days: int
    status: ExpiryStatus
    label: str


@dataclass(frozen=True)
class ClassifiedItem:
    """An item paired with its classification."""

    item: Any
    expiry: ExpiryClassification


@dataclass(frozen=True)
class ExpiryAlert:
    """An entry of the alert panel."""

    item: Any
    expiry: ExpiryClassification
    message: str


def normalize_date(value: date | datetime, timezone: str | None = None) -> date:
    """Drop the time of day, keeping only the calendar date.

    Aware datetimes are converted to ``timezone`` first, defaulting to the app
    timezone, so that "today" means the local day rather than the UTC day.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(ZoneInfo(timezone or get_settings().app_timezone))
        return value.date()
    return value


def today_in(timezone: str) -> date:
    """Current calendar date in the given IANA timezone."""
    return datetime.now(ZoneInfo(timezone)).date()


def compute_expiry_date(added_date: date | datetime, shelf_life: int) -> date:
    """Calendar date on which an item expires."""
    return normalize_date(added_date) + timedelta(days=shelf_life)


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole calendar days from ``start`` to ``end``; negative when ``end`` is earlier."""
    return (normalize_date(end) - normalize_date(start)).days


def _plural_days(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"


def day_phrase(remaining_days: int) -> str:
    """Short phrasing for an item that has not expired yet."""
    if remaining_days == 0:
        return "Expires today"
    return f"Expires in {_plural_days(remaining_days)}"


def status_for(remaining_days: int) -> ExpiryStatus:
    """Bucket a remaining-days count."""
    if remaining_days < 0:
        return ExpiryStatus.EXPIRED
    if remaining_days <= ALERT_THRESHOLD_DAYS:
        return ExpiryStatus.EXPIRES_SOON
    if remaining_days <= NEARING_EXPIRY_THRESHOLD_DAYS:
        return ExpiryStatus.NEARING_EXPIRY
    return ExpiryStatus.FRESH


def _label_for(status: ExpiryStatus, remaining_days: int) -> str:
    if status == ExpiryStatus.EXPIRED:
        return f"Expired {_plural_days(-remaining_days)} ago"
    if status == ExpiryStatus.NEARING_EXPIRY:
        return f"{_plural_days(remaining_days)} left"
    return day_phrase(remaining_days)


def classify(item: ShelfLifeItem, today: date | datetime) -> ExpiryClassification:
    """Compute remaining days, status and label for a single item.

    Args:
        item: Object with ``added_date`` and ``shelf_life`` attributes
        today: Reference day; any time component is ignored

    Raises:
        ValueError: If the shelf life is below one day
    """
    if item.shelf_life < 1:
        raise ValueError(f"shelf_life must be at least 1 day, got {item.shelf_life}")

    expiry_date = compute_expiry_date(item.added_date, item.shelf_life)
    remaining_days = days_between(today, expiry_date)
    status = status_for(remaining_days)

    return ExpiryClassification(
        expiry_date=expiry_date,
        remaining_days=remaining_days,
        status=status,
        label=_label_for(status, remaining_days),
    )


def classify_items(items: Iterable[ShelfLifeItem], today: date | datetime) -> list[ClassifiedItem]:
    """Classify every item, keeping the input order."""
    return [ClassifiedItem(item=item, expiry=classify(item, today)) for item in items]


def sort_by_expiry(items: Iterable[ShelfLifeItem], today: date | datetime) -> list[ClassifiedItem]:
    """Soonest-to-expire first; expired items lead since their count is negative.

    The sort is stable, so items with equal remaining days keep their input order.
    """
    return sorted(classify_items(items, today), key=lambda c: c.expiry.remaining_days)


def filter_by_status(
    classified: Iterable[ClassifiedItem], statuses: Iterable[ExpiryStatus]
) -> list[ClassifiedItem]:
    """Keep classified items whose status is one of ``statuses``."""
    wanted = set(statuses)
    return [c for c in classified if c.expiry.status in wanted]


def _alert_message(expiry: ExpiryClassification, added_date: date) -> str:
    added = f"Added on {added_date.strftime('%b %d, %Y')}."
    if expiry.status == ExpiryStatus.EXPIRED:
        return f"{expiry.label}. {added}"
    if expiry.status == ExpiryStatus.EXPIRES_SOON:
        return f"{expiry.label}! Use very soon. {added}"
    return f"Nearing expiry: {expiry.label}. Plan to use it. {added}"


def build_alerts(items: Iterable[ShelfLifeItem], today: date | datetime) -> list[ExpiryAlert]:
    """Alert panel entries: every non-fresh item, most urgent first."""
    return [
        ExpiryAlert(
            item=c.item,
            expiry=c.expiry,
            message=_alert_message(c.expiry, normalize_date(c.item.added_date)),
        )
        for c in sort_by_expiry(items, today)
        if c.expiry.status.needs_attention
    ]
