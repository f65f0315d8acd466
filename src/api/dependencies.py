"""FastAPI dependencies for authentication, services and the reference day."""

from datetime import date
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.config import get_settings
from src.database import get_db
from src.models.user import User
from src.services.auth import decode_access_token
from src.services.expiry import today_in
from src.services.item_scan_service import ItemScanService
from src.services.pantry_store import PantryStore
from src.services.recipe_suggestion_service import RecipeSuggestionService

security = HTTPBearer()


def _credentials_error(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    payload = decode_access_token(credentials.credentials)
    if payload is None or payload.get("sub") is None:
        raise _credentials_error()

    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if user is None:
        raise _credentials_error("User not found")

    return user


def get_today() -> date:
    """Reference day for expiry calculations, in the app timezone."""
    return today_in(get_settings().app_timezone)


def get_pantry_store(
    db: Annotated[Session, Depends(get_db)],
) -> PantryStore:
    """Get the pantry item store."""
    return PantryStore(db)


def get_recipe_suggestion_service() -> RecipeSuggestionService:
    """Get recipe suggestion service instance."""
    return RecipeSuggestionService()


def get_item_scan_service() -> ItemScanService:
    """Get product photo scan service instance."""
    return ItemScanService()
