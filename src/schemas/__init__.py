"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from src.schemas.item_scan import ItemScanCreateResponse, ItemScanResponse
from src.schemas.notification import ExpiringItemResponse, ExpiryEmailPreview
from src.schemas.pantry import (
    ExpiryInfo,
    PantryAlertResponse,
    PantryItemCreate,
    PantryItemResponse,
)
from src.schemas.recipe import RecipeSuggestionResponse, RecipeSuggestRequest, RecipeSuggestResponse

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "PantryItemCreate",
    "PantryItemResponse",
    "PantryAlertResponse",
    "ExpiryInfo",
    "ItemScanResponse",
    "ItemScanCreateResponse",
    "RecipeSuggestRequest",
    "RecipeSuggestResponse",
    "RecipeSuggestionResponse",
    "ExpiringItemResponse",
    "ExpiryEmailPreview",
]
