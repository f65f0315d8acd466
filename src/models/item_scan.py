"""ItemScan model for tracking product photo uploads and AI extraction."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class ItemScan(Base, TimestampMixin):
    """A product photo submitted for extraction and the validated result."""

    __tablename__ = "item_scans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(
        String(20), nullable=False, default="pending"
    )  # pending, processing, completed, failed
    error_message = Column(Text, nullable=True)

    # Extraction result (already validated; malformed dates never land here)
    item_found = Column(Boolean, nullable=True)
    barcode = Column(String(64), nullable=True)
    product_name = Column(String(100), nullable=True)
    expiry_date = Column(Date, nullable=True)
    suggested_shelf_life = Column(Integer, nullable=True)

    processed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", backref="item_scans")
