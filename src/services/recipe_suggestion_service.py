"""Recipe suggestions generated from pantry contents."""

import json
import logging
from dataclasses import dataclass, field

from src.services.errors import (
    AIServiceUnavailableError,
    PantryEmptyError,
    RecipeSuggestionError,
)
from src.services.llm import LLMService
from src.services.llm_prompts import (
    RECIPE_SUGGESTION_SYSTEM_PROMPT,
    get_recipe_suggestion_prompt,
)

logger = logging.getLogger(__name__)

EMPTY_PANTRY_MESSAGE = "Your pantry is empty. Please add some items to get recipe suggestions."


@dataclass
class RecipeSuggestion:
    """A recipe proposed by the model."""

    name: str
    ingredients: list[str] = field(default_factory=list)
    instructions: str = ""


class RecipeSuggestionService:
    """Service for asking the LLM what to cook with the pantry."""

    def __init__(self, llm_service: LLMService | None = None):
        self.llm_service = llm_service or LLMService()

    async def suggest_recipes(
        self, item_names: list[str], max_recipes: int = 3
    ) -> list[RecipeSuggestion]:
        """Suggest recipes that use the given pantry items.

        Returns an empty list when the model has no suggestion. Raises
        PantryEmptyError for empty input and RecipeSuggestionError when the
        model fails or answers with something that is not JSON.
        """
        names = [n.strip() for n in item_names if n and n.strip()]
        if not names:
            raise PantryEmptyError(EMPTY_PANTRY_MESSAGE)

        prompt = get_recipe_suggestion_prompt(names, max_recipes=max_recipes)
        try:
            result = await self.llm_service.generate_json(
                prompt=prompt,
                system_prompt=RECIPE_SUGGESTION_SYSTEM_PROMPT,
                temperature=0.7,
            )
        except (AIServiceUnavailableError, json.JSONDecodeError, KeyError) as e:
            logger.error(f"Recipe suggestion failed: {e}")
            raise RecipeSuggestionError(f"Failed to generate recipes: {str(e)[:100]}") from e

        recipes = _parse_recipes(result)
        logger.info(f"Suggested {len(recipes)} recipes from {len(names)} pantry items")
        return recipes[:max_recipes]


def _parse_recipes(result: object) -> list[RecipeSuggestion]:
    """Keep only well-formed recipes from the model output."""
    if isinstance(result, dict):
        raw = result.get("recipes")
    else:
        raw = result
    if not isinstance(raw, list):
        logger.warning(f"Unexpected recipe payload: {result!r}")
        return []

    recipes = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            continue

        ingredients = entry.get("ingredients") or []
        if not isinstance(ingredients, list):
            ingredients = []
        instructions = entry.get("instructions") or ""
        if isinstance(instructions, list):
            instructions = "\n".join(str(step) for step in instructions)

        recipes.append(
            RecipeSuggestion(
                name=name.strip(),
                ingredients=[str(i) for i in ingredients if str(i).strip()],
                instructions=str(instructions),
            )
        )
    return recipes
