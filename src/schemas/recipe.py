"""Recipe suggestion schemas."""

from pydantic import BaseModel, Field


class RecipeSuggestRequest(BaseModel):
    """Ask for recipe ideas; defaults to everything in the pantry."""

    item_names: list[str] | None = Field(None, max_length=100)
    max_recipes: int = Field(3, ge=1, le=10)


class RecipeSuggestionResponse(BaseModel):
    """A suggested recipe."""

    model_config = {"from_attributes": True}

    name: str
    ingredients: list[str]
    instructions: str


class RecipeSuggestResponse(BaseModel):
    """Recipe suggestions; `message` explains an empty result."""

    recipes: list[RecipeSuggestionResponse]
    message: str | None = None
