"""Public leaderboard: top five users by score. No token required."""

from fastapi import APIRouter, Depends

from larder.dependencies import get_pantry_service
from larder.schemas.common import ErrorResponse
from larder.schemas.pantry import LeaderboardResponse
from larder.services.pantry_service import PantryService

router = APIRouter(tags=["Leaderboard"])


@router.get(
    "/leaderboard",
    response_model=LeaderboardResponse,
    responses={500: {"description": "Failed to retrieve leaderboard", "model": ErrorResponse}},
    summary="Top five users by score",
)
async def leaderboard(
    pantry: PantryService = Depends(get_pantry_service),
) -> LeaderboardResponse:
    return await pantry.leaderboard()
