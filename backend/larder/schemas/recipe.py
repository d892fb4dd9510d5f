"""Schemas for GET /recipes."""

from typing import Any, List

from pydantic import BaseModel


class RecipeSearchResponse(BaseModel):
    """Spoonacular `results` relayed without reshaping."""
    recipes: List[Any]
