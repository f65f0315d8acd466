"""Tests for expiry computation and alert classification."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import pytest

from src.models.enums import ExpiryStatus
from src.services.expiry import (
    ALERT_THRESHOLD_DAYS,
    NEARING_EXPIRY_THRESHOLD_DAYS,
    build_alerts,
    classify,
    compute_expiry_date,
    day_phrase,
    days_between,
    filter_by_status,
    normalize_date,
    sort_by_expiry,
)

TODAY = date(2024, 3, 15)


@dataclass
class Item:
    name: str
    added_date: date | datetime
    shelf_life: int


def item_with_remaining(days: int, name: str = "Milk") -> Item:
    """An item that has exactly `days` remaining as of TODAY."""
    return Item(name=name, added_date=TODAY - timedelta(days=10), shelf_life=10 + days)


class TestDateHelpers:
    """Tests for calendar date helpers."""

    def test_normalize_drops_time(self):
        assert normalize_date(datetime(2024, 1, 1, 23, 59, 59)) == date(2024, 1, 1)

    def test_normalize_keeps_plain_date(self):
        assert normalize_date(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_normalize_converts_aware_datetime_to_timezone(self):
        # 03:00 UTC is still the previous evening in Toronto
        value = datetime(2024, 1, 2, 3, 0, tzinfo=UTC)
        assert normalize_date(value, "America/Toronto") == date(2024, 1, 1)

    def test_normalize_defaults_to_app_timezone(self):
        value = datetime(2024, 1, 2, 3, 0, tzinfo=UTC)
        with patch("src.services.expiry.get_settings") as mock_settings:
            mock_settings.return_value = MagicMock(app_timezone="America/Toronto")
            assert normalize_date(value) == date(2024, 1, 1)

    def test_classify_reads_aware_today_in_app_timezone(self):
        item = Item(name="Milk", added_date=date(2024, 1, 1), shelf_life=7)
        # 02:00 in Tokyo on the 8th is still the 7th in UTC
        today = datetime(2024, 1, 8, 2, 0, tzinfo=ZoneInfo("Asia/Tokyo"))
        with patch("src.services.expiry.get_settings") as mock_settings:
            mock_settings.return_value = MagicMock(app_timezone="UTC")
            assert classify(item, today).remaining_days == 1

    def test_expiry_date_rolls_over_month_and_year(self):
        assert compute_expiry_date(date(2023, 12, 30), 5) == date(2024, 1, 4)
        assert compute_expiry_date(date(2024, 2, 28), 1) == date(2024, 2, 29)

    def test_days_between_ignores_time_of_day(self):
        start = datetime(2024, 1, 1, 23, 0)
        end = datetime(2024, 1, 2, 1, 0)
        assert days_between(start, end) == 1

    def test_days_between_negative_when_end_is_earlier(self):
        assert days_between(date(2024, 1, 5), date(2024, 1, 3)) == -2


class TestClassify:
    """Tests for single-item classification."""

    @pytest.mark.parametrize(
        ("remaining", "expected"),
        [
            (-1, ExpiryStatus.EXPIRED),
            (0, ExpiryStatus.EXPIRES_SOON),
            (3, ExpiryStatus.EXPIRES_SOON),
            (4, ExpiryStatus.NEARING_EXPIRY),
            (7, ExpiryStatus.NEARING_EXPIRY),
            (8, ExpiryStatus.FRESH),
        ],
    )
    def test_boundaries(self, remaining, expected):
        result = classify(item_with_remaining(remaining), TODAY)
        assert result.remaining_days == remaining
        assert result.status == expected

    def test_expires_today(self):
        """Added 2024-01-01 with a 7 day shelf life, checked on 2024-01-08."""
        result = classify(Item("Bread", date(2024, 1, 1), 7), date(2024, 1, 8))
        assert result.remaining_days == 0
        assert result.status == ExpiryStatus.EXPIRES_SOON
        assert result.label == "Expires today"
        assert result.expiry_date == date(2024, 1, 8)

    def test_nearing_expiry_scenario(self):
        """Added 2024-01-01 with a 10 day shelf life, checked on 2024-01-05."""
        result = classify(Item("Cheese", date(2024, 1, 1), 10), date(2024, 1, 5))
        assert result.remaining_days == 6
        assert result.status == ExpiryStatus.NEARING_EXPIRY
        assert result.label == "6 days left"

    def test_labels(self):
        assert classify(item_with_remaining(1), TODAY).label == "Expires in 1 day"
        assert classify(item_with_remaining(3), TODAY).label == "Expires in 3 days"
        assert classify(item_with_remaining(-1), TODAY).label == "Expired 1 day ago"
        assert classify(item_with_remaining(-5), TODAY).label == "Expired 5 days ago"
        assert classify(item_with_remaining(30), TODAY).label == "Expires in 30 days"

    def test_time_of_day_is_ignored(self):
        item = Item("Eggs", datetime(2024, 1, 1, 22, 30), 7)
        morning = classify(item, datetime(2024, 1, 8, 0, 5))
        evening = classify(item, datetime(2024, 1, 8, 23, 55))
        assert morning.remaining_days == evening.remaining_days == 0

    def test_deterministic(self):
        item = Item("Yogurt", date(2024, 1, 1), 14)
        assert classify(item, TODAY) == classify(item, TODAY)

    def test_remaining_days_decreases_by_one_per_day(self):
        item = Item("Apples", date(2024, 1, 1), 30)
        previous = classify(item, date(2024, 1, 1)).remaining_days
        for offset in range(1, 40):
            current = classify(item, date(2024, 1, 1) + timedelta(days=offset)).remaining_days
            assert current == previous - 1
            previous = current

    def test_rejects_shelf_life_below_one(self):
        with pytest.raises(ValueError):
            classify(Item("Bad", date(2024, 1, 1), 0), TODAY)

    def test_thresholds(self):
        assert ALERT_THRESHOLD_DAYS == 3
        assert NEARING_EXPIRY_THRESHOLD_DAYS == 7

    def test_day_phrase(self):
        assert day_phrase(0) == "Expires today"
        assert day_phrase(1) == "Expires in 1 day"
        assert day_phrase(2) == "Expires in 2 days"


class TestSorting:
    """Tests for soonest-first ordering."""

    def test_sorts_ascending_with_expired_first(self):
        items = [
            item_with_remaining(10, "Rice"),
            item_with_remaining(-3, "Milk"),
            item_with_remaining(2, "Bread"),
            item_with_remaining(5, "Cheese"),
        ]
        result = sort_by_expiry(items, TODAY)
        assert [c.item.name for c in result] == ["Milk", "Bread", "Cheese", "Rice"]
        days = [c.expiry.remaining_days for c in result]
        assert days == sorted(days)

    def test_ties_keep_insertion_order(self):
        items = [
            item_with_remaining(2, "First"),
            item_with_remaining(1, "Other"),
            item_with_remaining(2, "Second"),
            item_with_remaining(2, "Third"),
        ]
        result = sort_by_expiry(items, TODAY)
        assert [c.item.name for c in result] == ["Other", "First", "Second", "Third"]

    def test_empty(self):
        assert sort_by_expiry([], TODAY) == []
        assert build_alerts([], TODAY) == []

    def test_filter_by_status(self):
        classified = sort_by_expiry(
            [item_with_remaining(-1, "A"), item_with_remaining(2, "B"), item_with_remaining(20, "C")],
            TODAY,
        )
        fresh = filter_by_status(classified, [ExpiryStatus.FRESH])
        assert [c.item.name for c in fresh] == ["C"]


class TestAlerts:
    """Tests for the alert panel."""

    def test_only_non_fresh_items_most_urgent_first(self):
        items = [
            item_with_remaining(20, "Rice"),
            item_with_remaining(6, "Cheese"),
            item_with_remaining(-2, "Milk"),
            item_with_remaining(1, "Bread"),
        ]
        alerts = build_alerts(items, TODAY)
        assert [a.item.name for a in alerts] == ["Milk", "Bread", "Cheese"]
        assert [a.expiry.status for a in alerts] == [
            ExpiryStatus.EXPIRED,
            ExpiryStatus.EXPIRES_SOON,
            ExpiryStatus.NEARING_EXPIRY,
        ]

    def test_messages(self):
        items = [
            Item("Milk", date(2024, 3, 1), 10),  # expired 4 days ago
            Item("Bread", date(2024, 3, 14), 3),  # 2 days left
            Item("Cheese", date(2024, 3, 14), 6),  # 5 days left
        ]
        messages = {a.item.name: a.message for a in build_alerts(items, TODAY)}
        assert messages["Milk"] == "Expired 4 days ago. Added on Mar 01, 2024."
        assert messages["Bread"] == "Expires in 2 days! Use very soon. Added on Mar 14, 2024."
        assert messages["Cheese"] == (
            "Nearing expiry: 5 days left. Plan to use it. Added on Mar 14, 2024."
        )
