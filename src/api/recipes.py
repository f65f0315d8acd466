"""Recipe suggestion API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import (
    get_current_user,
    get_pantry_store,
    get_recipe_suggestion_service,
    get_today,
)
from src.models.user import User
from src.schemas.recipe import RecipeSuggestionResponse, RecipeSuggestRequest, RecipeSuggestResponse
from src.services.errors import PantryEmptyError, RecipeSuggestionError
from src.services.expiry import sort_by_expiry
from src.services.pantry_store import PantryStore
from src.services.recipe_suggestion_service import RecipeSuggestionService

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])

NO_RECIPES_MESSAGE = (
    "No recipes could be generated with the current pantry items. "
    "Try adding more diverse ingredients."
)


@router.post("/suggest", response_model=RecipeSuggestResponse)
async def suggest_recipes(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[PantryStore, Depends(get_pantry_store)],
    service: Annotated[RecipeSuggestionService, Depends(get_recipe_suggestion_service)],
    today: Annotated[date, Depends(get_today)],
    request: RecipeSuggestRequest | None = None,
):
    """Suggest recipes from the pantry.

    Without `item_names` the whole pantry is used, soonest-to-expire first so
    the model favours food that is about to go off.
    """
    request = request or RecipeSuggestRequest()
    if request.item_names is not None:
        names = request.item_names
    else:
        names = [c.item.name for c in sort_by_expiry(store.list_items(current_user.id), today)]

    try:
        recipes = await service.suggest_recipes(names, max_recipes=request.max_recipes)
    except PantryEmptyError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from None
    except RecipeSuggestionError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from None

    return RecipeSuggestResponse(
        recipes=[RecipeSuggestionResponse.model_validate(r) for r in recipes],
        message=None if recipes else NO_RECIPES_MESSAGE,
    )
