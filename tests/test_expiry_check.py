"""Tests for the daily expiry check task."""

from datetime import date, timedelta
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from src.models import MailMessage
from src.models.pantry import PantryItem
from src.services.notification_service import NotificationService
from src.tasks.expiry_check import daily_expiry_check, run_expiry_check

TODAY = date(2024, 6, 1)


def add_item(db, user, name, remaining_days):
    """Insert an item with `remaining_days` left as of TODAY."""
    item = PantryItem(
        user_id=user.id,
        name=name,
        shelf_life=10 + remaining_days,
        added_date=TODAY - timedelta(days=10),
    )
    db.add(item)
    db.commit()
    return item


@pytest.fixture
def mock_delivery():
    with patch("src.tasks.mail_delivery.deliver_mail.delay") as mock_task:
        yield mock_task


def test_queues_mail_for_users_with_expiring_items(db, make_user, mock_delivery):
    """Only the user with an item inside the alert window gets mail."""
    alice = make_user("alice@example.com")
    bob = make_user("bob@example.com")
    make_user("carol@example.com")  # empty pantry
    add_item(db, alice, "Milk", 2)
    add_item(db, alice, "Rice", 10)
    add_item(db, bob, "Old Bread", -2)

    stats = run_expiry_check(db, today=TODAY)

    assert stats["users_checked"] == 3
    assert stats["candidates"] == 1
    assert stats["queued"] == 1
    assert stats["failed"] == 0

    messages = db.query(MailMessage).all()
    assert len(messages) == 1
    message = messages[0]
    assert message.user_id == alice.id
    assert message.recipients == ["alice@example.com"]
    assert message.status == "queued"
    assert "<b>Milk</b>: Expires in 2 days" in message.body
    assert "Rice" not in message.body
    mock_delivery.assert_called_once_with(message.id)


def test_no_pantries(db, mock_delivery):
    """An empty database is a successful run with nothing queued."""
    stats = run_expiry_check(db, today=TODAY)

    assert stats["users_checked"] == 0
    assert stats["queued"] == 0
    mock_delivery.assert_not_called()


def test_missing_contact_is_skipped(db, make_user, mock_delivery):
    """A user without an address is skipped, others are still processed."""
    alice = make_user("alice@example.com")
    bob = make_user("bob@example.com")
    add_item(db, alice, "Milk", 1)
    add_item(db, bob, "Eggs", 0)

    service = NotificationService(db)
    real_lookup = service.get_contact_address
    service.get_contact_address = lambda user_id: None if user_id == alice.id else real_lookup(user_id)

    stats = run_expiry_check(db, notification_service=service, today=TODAY)

    assert stats["skipped_no_contact"] == 1
    assert stats["queued"] == 1
    assert db.query(MailMessage).one().recipients == ["bob@example.com"]


def test_failure_is_isolated_per_user(db, make_user, mock_delivery):
    """An error for one user is recorded without stopping the batch."""
    alice = make_user("alice@example.com")
    bob = make_user("bob@example.com")
    add_item(db, alice, "Milk", 1)
    add_item(db, bob, "Eggs", 3)

    service = NotificationService(db)
    real_lookup = service.get_contact_address

    def flaky_lookup(user_id):
        if user_id == alice.id:
            raise RuntimeError("directory timeout")
        return real_lookup(user_id)

    service.get_contact_address = flaky_lookup

    stats = run_expiry_check(db, notification_service=service, today=TODAY)

    assert stats["failed"] == 1
    assert stats["failures"] == [{"user_id": alice.id, "error": "directory timeout"}]
    assert stats["queued"] == 1
    assert db.query(MailMessage).one().user_id == bob.id


def test_rerun_queues_again(db, make_user, mock_delivery):
    """Running twice on the same day re-notifies."""
    alice = make_user("alice@example.com")
    add_item(db, alice, "Milk", 1)

    run_expiry_check(db, today=TODAY)
    run_expiry_check(db, today=TODAY)

    assert db.query(MailMessage).count() == 2


def test_task_reports_store_failure():
    """A store outage aborts the run with an error instead of an empty result."""
    broken_session = MagicMock()
    broken_session.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))

    with patch("src.tasks.expiry_check.SessionLocal", return_value=broken_session):
        result = daily_expiry_check()

    assert "error" in result
    broken_session.close.assert_called_once()


def test_task_runs_with_session(db, make_user, mock_delivery):
    """The Celery task opens a session and returns run statistics."""
    alice = make_user("alice@example.com")
    add_item(db, alice, "Milk", 1)

    with (
        patch("src.tasks.expiry_check.SessionLocal", return_value=db),
        patch("src.tasks.expiry_check.today_in", return_value=TODAY),
    ):
        result = daily_expiry_check()

    assert result["queued"] == 1
    assert result["date"] == TODAY.isoformat()
