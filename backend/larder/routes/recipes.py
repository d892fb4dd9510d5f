"""Recipe search proxy: GET /recipes?query=... relayed to Spoonacular. No token required."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from larder.dependencies import get_recipe_service
from larder.schemas.common import ErrorResponse
from larder.schemas.recipe import RecipeSearchResponse
from larder.services.recipe_service import RecipeService

router = APIRouter(tags=["Recipes"])


@router.get(
    "/recipes",
    response_model=RecipeSearchResponse,
    responses={
        400: {"description": "Missing query", "model": ErrorResponse},
        500: {"description": "Failed to fetch recipes", "model": ErrorResponse},
    },
    summary="Search recipes",
)
async def search_recipes(
    query: Optional[str] = Query(
        default=None,
        description="Free text, e.g. the output of /ingredients-list",
    ),
    recipe_service: RecipeService = Depends(get_recipe_service),
) -> RecipeSearchResponse:
    return await recipe_service.search(query)
