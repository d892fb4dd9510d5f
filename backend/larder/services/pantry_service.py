"""
Larder Backend — Pantry Service
================================

What:  Ingredients, calorie log, shopping list and leaderboard.
How:   Each operation checks required fields for presence, runs exactly
       one repository call scoped to the caller, and shapes the result.
       Persistence failures become InternalError with the operation's
       own message; the driver error is logged and never returned.
Who:   The ingredient, calorie, shopping-list and leaderboard routes.

Presence checks follow truthiness: "" and 0 count as missing, so a
calorie entry of 0 is rejected the same way as an absent one.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError

from larder.exceptions import InternalError, ValidationError
from larder.repository import Repository
from larder.schemas.auth import Identity
from larder.schemas.common import MessageResponse
from larder.schemas.pantry import (
    CalorieEntryCreated,
    CalorieEntryListResponse,
    CalorieEntryOut,
    FreeText,
    IngredientCreated,
    IngredientListResponse,
    IngredientNamesResponse,
    IngredientOut,
    LeaderboardEntry,
    LeaderboardResponse,
    ShoppingItemCreated,
    ShoppingItemOut,
    ShoppingListResponse,
)

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 5

# Signed 64-bit INTEGER range; ids outside it cannot match a row.
ROW_ID_MIN = -(2**63)
ROW_ID_MAX = 2**63 - 1


@contextmanager
def _persistence(failure_message: str, operation: str, user_id: Optional[int] = None) -> Iterator[None]:
    """
    Translate driver errors raised in the block into InternalError.

    OverflowError covers integers outside the column range, which the
    driver rejects before SQLAlchemy sees the statement.
    """
    try:
        yield
    except (SQLAlchemyError, OverflowError) as e:
        logger.error("%s failed for user_id=%s: %s", operation, user_id, str(e))
        raise InternalError(
            message=failure_message,
            context={"operation": operation, "db_error": type(e).__name__},
        ) from e


class PantryService:
    """Per-user pantry data plus the public leaderboard."""

    def __init__(self, repository: Repository):
        self.repository = repository

    # ── Ingredients ───────────────────────────────────────────────────────

    async def add_ingredient(
        self,
        identity: Identity,
        name: Optional[FreeText],
        quantity: Optional[FreeText],
        expiry: Optional[FreeText] = None,
    ) -> IngredientCreated:
        if not name or not quantity:
            raise ValidationError(message="Missing fields")

        with _persistence("Failed to add ingredient", "add_ingredient", identity.id):
            row = await self.repository.add_ingredient(
                user_id=identity.id,
                name=str(name),
                quantity=str(quantity),
                expiry=str(expiry) if expiry else None,
            )
        return IngredientCreated(ingredient_id=row.id)

    async def list_ingredients(self, identity: Identity) -> IngredientListResponse:
        with _persistence("Failed to fetch ingredients", "list_ingredients", identity.id):
            rows = await self.repository.list_ingredients(identity.id)
        return IngredientListResponse(
            ingredients=[IngredientOut.model_validate(row) for row in rows]
        )

    async def ingredient_names(self, identity: Identity) -> IngredientNamesResponse:
        """Names joined with a bare comma, in insertion order."""
        with _persistence("Failed to fetch ingredients", "ingredient_names", identity.id):
            names = await self.repository.list_ingredient_names(identity.id)
        return IngredientNamesResponse(ingredients=",".join(names))

    # ── Calories ──────────────────────────────────────────────────────────

    async def log_calories(
        self,
        identity: Identity,
        food: Optional[FreeText],
        calories: Optional[int],
    ) -> CalorieEntryCreated:
        if not food or not calories:
            raise ValidationError(message="Food and calories are required.")

        with _persistence("Failed to log calories.", "log_calories", identity.id):
            row = await self.repository.add_calorie_entry(
                user_id=identity.id, food=str(food), calories=calories
            )
        return CalorieEntryCreated(entry_id=row.id)

    async def list_calories(self, identity: Identity) -> CalorieEntryListResponse:
        with _persistence("Failed to fetch data.", "list_calories", identity.id):
            rows = await self.repository.list_calorie_entries(identity.id)
        return CalorieEntryListResponse(
            entries=[CalorieEntryOut.model_validate(row) for row in rows]
        )

    # ── Shopping list ─────────────────────────────────────────────────────

    async def list_shopping_items(self, identity: Identity) -> ShoppingListResponse:
        with _persistence("Failed to load shopping list", "list_shopping_items", identity.id):
            rows = await self.repository.list_shopping_items(identity.id)
        return ShoppingListResponse(
            items=[ShoppingItemOut.model_validate(row) for row in rows]
        )

    async def add_shopping_item(
        self,
        identity: Identity,
        name: Optional[FreeText],
        quantity: Optional[FreeText],
    ) -> ShoppingItemCreated:
        if not name or not quantity:
            raise ValidationError(message="Missing fields")

        with _persistence("Failed to add item", "add_shopping_item", identity.id):
            row = await self.repository.add_shopping_item(
                user_id=identity.id, name=str(name), quantity=str(quantity)
            )
        return ShoppingItemCreated(item_id=row.id)

    async def delete_shopping_item(self, identity: Identity, item_id: int) -> MessageResponse:
        """
        Delete one of the caller's items.

        The affected row count is logged but not checked: a missing or
        foreign id still answers "Item deleted".
        """
        if not ROW_ID_MIN <= item_id <= ROW_ID_MAX:
            logger.debug("delete_shopping_item id=%s is out of range; nothing to remove", item_id)
            return MessageResponse(message="Item deleted")

        with _persistence("Failed to delete item", "delete_shopping_item", identity.id):
            removed = await self.repository.delete_shopping_item(
                user_id=identity.id, item_id=item_id
            )
        logger.debug("delete_shopping_item id=%s removed %d row(s)", item_id, removed)
        return MessageResponse(message="Item deleted")

    # ── Leaderboard ───────────────────────────────────────────────────────

    async def leaderboard(self) -> LeaderboardResponse:
        with _persistence("Failed to retrieve leaderboard", "leaderboard"):
            users = await self.repository.top_users_by_score(LEADERBOARD_SIZE)
        return LeaderboardResponse(
            leaderboard=[
                LeaderboardEntry(username=user.username, points=user.score)
                for user in users
            ]
        )
