"""Calorie log routes: POST /calories and GET /calories (newest first). Token required."""

from typing import Optional

from fastapi import APIRouter, Depends

from larder.dependencies import get_pantry_service, require_identity
from larder.schemas.auth import Identity
from larder.schemas.common import ErrorResponse
from larder.schemas.pantry import (
    CalorieEntryCreate,
    CalorieEntryCreated,
    CalorieEntryListResponse,
)
from larder.services.pantry_service import PantryService

router = APIRouter(tags=["Calories"])


@router.post(
    "/calories",
    response_model=CalorieEntryCreated,
    responses={
        400: {"description": "Food and calories are required", "model": ErrorResponse},
        500: {"description": "Persistence failure", "model": ErrorResponse},
    },
    summary="Log a food and its calories",
)
async def log_calories(
    body: Optional[CalorieEntryCreate] = None,
    identity: Identity = Depends(require_identity),
    pantry: PantryService = Depends(get_pantry_service),
) -> CalorieEntryCreated:
    body = body or CalorieEntryCreate()
    return await pantry.log_calories(identity, food=body.food, calories=body.calories)


@router.get(
    "/calories",
    response_model=CalorieEntryListResponse,
    responses={500: {"description": "Persistence failure", "model": ErrorResponse}},
    summary="List the caller's calorie entries, newest first",
)
async def list_calories(
    identity: Identity = Depends(require_identity),
    pantry: PantryService = Depends(get_pantry_service),
) -> CalorieEntryListResponse:
    return await pantry.list_calories(identity)
