"""SQLAlchemy models."""

from src.models.item_scan import ItemScan
from src.models.mail_message import MailMessage
from src.models.pantry import PantryItem
from src.models.user import User

__all__ = [
    "User",
    "PantryItem",
    "ItemScan",
    "MailMessage",
]
