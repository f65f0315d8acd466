"""User model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Account that owns a pantry; `email` doubles as the alert contact address."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)

    pantry_items = relationship(
        "PantryItem",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="PantryItem.id",
    )
