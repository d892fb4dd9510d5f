"""
Larder Backend — Shopping List Routes
======================================

What:  The caller's shopping list. Token required on every route.

Deletion matches on `id AND user_id`. Deleting an id that does not exist,
or belongs to someone else, removes nothing and still answers
{"message": "Item deleted"}.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from larder.dependencies import get_pantry_service, require_identity
from larder.schemas.auth import Identity
from larder.schemas.common import ErrorResponse, MessageResponse
from larder.schemas.pantry import ShoppingItemCreate, ShoppingItemCreated, ShoppingListResponse
from larder.services.pantry_service import PantryService

router = APIRouter(prefix="/shopping-list", tags=["Shopping List"])


@router.get(
    "",
    response_model=ShoppingListResponse,
    responses={500: {"description": "Failed to load shopping list", "model": ErrorResponse}},
    summary="List the caller's shopping items",
)
async def list_items(
    identity: Identity = Depends(require_identity),
    pantry: PantryService = Depends(get_pantry_service),
) -> ShoppingListResponse:
    return await pantry.list_shopping_items(identity)


@router.post(
    "",
    response_model=ShoppingItemCreated,
    responses={
        400: {"description": "Missing fields", "model": ErrorResponse},
        500: {"description": "Failed to add item", "model": ErrorResponse},
    },
    summary="Add a shopping item",
)
async def add_item(
    body: Optional[ShoppingItemCreate] = None,
    identity: Identity = Depends(require_identity),
    pantry: PantryService = Depends(get_pantry_service),
) -> ShoppingItemCreated:
    body = body or ShoppingItemCreate()
    return await pantry.add_shopping_item(identity, name=body.name, quantity=body.quantity)


@router.delete(
    "/{item_id}",
    response_model=MessageResponse,
    responses={500: {"description": "Failed to delete item", "model": ErrorResponse}},
    summary="Delete one of the caller's shopping items",
)
async def delete_item(
    item_id: int,
    identity: Identity = Depends(require_identity),
    pantry: PantryService = Depends(get_pantry_service),
) -> MessageResponse:
    return await pantry.delete_shopping_item(identity, item_id)
