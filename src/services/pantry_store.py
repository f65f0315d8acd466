"""Item store backed by the pantry_items table."""

import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from src.config import get_settings
from src.models.pantry import PantryItem
from src.models.user import User
from src.services.errors import PantryItemNotFoundError, StoreUnavailableError
from src.services.expiry import today_in
from src.services.notification_selector import UserItems

logger = logging.getLogger(__name__)


class PantryStore:
    """Per-user pantry reads and keyed writes.

    Adds and removes touch a single row, so two devices editing the same
    pantry never overwrite each other's changes. Database errors surface as
    StoreUnavailableError, never as an empty result.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_users_with_items(self) -> list[UserItems]:
        """Every user with their items, in user id then insertion order."""
        try:
            users = (
                self.db.query(User).options(selectinload(User.pantry_items)).order_by(User.id).all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load pantries: {e}")
            raise StoreUnavailableError("Could not load pantries") from e

        return [UserItems(user_id=user.id, items=list(user.pantry_items)) for user in users]

    def list_items(self, user_id: int) -> list[PantryItem]:
        """A user's items in insertion order."""
        try:
            return (
                self.db.query(PantryItem)
                .filter(PantryItem.user_id == user_id)
                .order_by(PantryItem.id)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load pantry for user {user_id}: {e}")
            raise StoreUnavailableError("Could not load pantry items") from e

    def get_item(self, user_id: int, item_id: int) -> PantryItem:
        """Fetch one item owned by the user."""
        try:
            item = (
                self.db.query(PantryItem)
                .filter(PantryItem.id == item_id, PantryItem.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load pantry item {item_id}: {e}")
            raise StoreUnavailableError("Could not load pantry item") from e

        if item is None:
            raise PantryItemNotFoundError("Pantry item not found")
        return item

    def add_item(
        self,
        user_id: int,
        name: str,
        shelf_life: int,
        added_date: date | None = None,
    ) -> PantryItem:
        """Insert a new item; the added date defaults to today in the app timezone."""
        if added_date is None:
            added_date = today_in(get_settings().app_timezone)

        item = PantryItem(
            user_id=user_id,
            name=name,
            shelf_life=shelf_life,
            added_date=added_date,
        )
        try:
            self.db.add(item)
            self.db.commit()
            self.db.refresh(item)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to add pantry item for user {user_id}: {e}")
            raise StoreUnavailableError("Failed to add item to pantry") from e

        logger.info(f"Added pantry item {item.id} for user {user_id}")
        return item

    def remove_item(self, user_id: int, item_id: int) -> None:
        """Delete one item owned by the user."""
        item = self.get_item(user_id, item_id)
        try:
            self.db.delete(item)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to remove pantry item {item_id}: {e}")
            raise StoreUnavailableError("Failed to remove item from pantry") from e

        logger.info(f"Removed pantry item {item_id} for user {user_id}")
