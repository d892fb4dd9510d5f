"""
Larder Backend — Pantry Schemas
================================

What:  Request/response models for ingredients, calorie entries, the
       shopping list and the leaderboard.

Row models mirror the table columns one-to-one (including `user_id`),
because list endpoints return the caller's rows as stored.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

# Free-text fields; clients also send bare numbers ("2" or 2, 20250110).
FreeText = Union[str, int, float]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class IngredientCreate(BaseModel):
    name: Optional[FreeText] = None
    quantity: Optional[FreeText] = None
    expiry: Optional[FreeText] = None


class CalorieEntryCreate(BaseModel):
    food: Optional[FreeText] = None
    calories: Optional[int] = None


class ShoppingItemCreate(BaseModel):
    name: Optional[FreeText] = None
    quantity: Optional[FreeText] = None


# ══════════════════════════════════════════════════════════════════════════
# Row Models
# ══════════════════════════════════════════════════════════════════════════


class IngredientOut(BaseModel):
    id: int
    name: str
    quantity: str
    expiry: Optional[FreeText] = None
    user_id: int

    model_config = {"from_attributes": True}


class CalorieEntryOut(BaseModel):
    id: int
    food: str
    calories: int
    user_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ShoppingItemOut(BaseModel):
    id: int
    name: str
    quantity: str
    user_id: int

    model_config = {"from_attributes": True}


class LeaderboardEntry(BaseModel):
    username: str
    points: int


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class IngredientCreated(BaseModel):
    message: str = "Ingredient added"
    ingredient_id: int = Field(alias="ingredientId")

    model_config = {"populate_by_name": True}


class IngredientListResponse(BaseModel):
    ingredients: List[IngredientOut]


class IngredientNamesResponse(BaseModel):
    """Names joined with "," and no spaces, e.g. `"eggs,milk,flour"`."""
    ingredients: str


class CalorieEntryCreated(BaseModel):
    message: str = "Calories logged."
    entry_id: int = Field(alias="entryId")

    model_config = {"populate_by_name": True}


class CalorieEntryListResponse(BaseModel):
    entries: List[CalorieEntryOut] = Field(description="Newest first")


class ShoppingItemCreated(BaseModel):
    message: str = "Item added"
    item_id: int = Field(alias="itemId")

    model_config = {"populate_by_name": True}


class ShoppingListResponse(BaseModel):
    items: List[ShoppingItemOut]


class LeaderboardResponse(BaseModel):
    leaderboard: List[LeaderboardEntry] = Field(description="At most five users, highest score first")
