"""
Larder Backend — Ingredient Routes
===================================

What:  The caller's ingredient inventory.
Auth:  All three routes require a token; rows are scoped to its user id.

Endpoints:
    POST /ingredients       add one ingredient
    GET  /getIngredients    full rows
    GET  /ingredients-list  names only, comma-joined (feeds recipe search)
"""

from typing import Optional

from fastapi import APIRouter, Depends

from larder.dependencies import get_pantry_service, require_identity
from larder.schemas.auth import Identity
from larder.schemas.common import ErrorResponse
from larder.schemas.pantry import (
    IngredientCreate,
    IngredientCreated,
    IngredientListResponse,
    IngredientNamesResponse,
)
from larder.services.pantry_service import PantryService

router = APIRouter(tags=["Ingredients"])

_AUTH_ERRORS = {
    401: {"description": "Invalid token", "model": ErrorResponse},
    403: {"description": "Token missing", "model": ErrorResponse},
    500: {"description": "Persistence failure", "model": ErrorResponse},
}


@router.post(
    "/ingredients",
    response_model=IngredientCreated,
    responses={400: {"description": "Missing fields", "model": ErrorResponse}, **_AUTH_ERRORS},
    summary="Add an ingredient",
)
async def add_ingredient(
    body: Optional[IngredientCreate] = None,
    identity: Identity = Depends(require_identity),
    pantry: PantryService = Depends(get_pantry_service),
) -> IngredientCreated:
    body = body or IngredientCreate()
    return await pantry.add_ingredient(
        identity, name=body.name, quantity=body.quantity, expiry=body.expiry
    )


@router.get(
    "/getIngredients",
    response_model=IngredientListResponse,
    responses=_AUTH_ERRORS,
    summary="List the caller's ingredients",
)
async def list_ingredients(
    identity: Identity = Depends(require_identity),
    pantry: PantryService = Depends(get_pantry_service),
) -> IngredientListResponse:
    return await pantry.list_ingredients(identity)


@router.get(
    "/ingredients-list",
    response_model=IngredientNamesResponse,
    responses=_AUTH_ERRORS,
    summary="Comma-joined ingredient names",
)
async def ingredient_names(
    identity: Identity = Depends(require_identity),
    pantry: PantryService = Depends(get_pantry_service),
) -> IngredientNamesResponse:
    return await pantry.ingredient_names(identity)
