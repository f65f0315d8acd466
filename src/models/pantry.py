"""Pantry item model for tracking perishable food at home."""

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class PantryItem(Base, TimestampMixin):
    """A food item logged by a user, with the shelf life it had when added.

    Items are never edited in place; they are created and later removed.
    Ids increase with insertion, so ordering by id is insertion order.
    """

    __tablename__ = "pantry_items"
    __table_args__ = (
        CheckConstraint("shelf_life >= 1 AND shelf_life <= 3650", name="ck_pantry_shelf_life"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    shelf_life = Column(Integer, nullable=False)  # days
    added_date = Column(Date, nullable=False)  # calendar day, no time component

    # Relationships
    user = relationship("User", back_populates="pantry_items")
