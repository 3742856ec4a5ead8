"""Dashboard statistics endpoint."""

from fastapi import APIRouter, Depends

from quotecraft_api.auth.dependencies import get_current_user
from quotecraft_api.dependencies import get_statistics_service
from quotecraft_api.models.responses import StatisticsResponse
from quotecraft_api.models.user import User
from quotecraft_api.services.statistics_service import StatisticsService

router = APIRouter(prefix="/statistics", tags=["Statistics"])


@router.get(
    "",
    response_model=StatisticsResponse,
    summary="Get Statistics",
    description="Dashboard metrics computed from the user's quotes.",
)
async def get_statistics(
    user: User = Depends(get_current_user),
    statistics_service: StatisticsService = Depends(get_statistics_service),
) -> StatisticsResponse:
    """
    Get dashboard statistics.

    Returns total and monthly quote counts, the monthly limit, the
    approval rate of sent quotes and revenue from approved quotes.
    """
    return await statistics_service.get_statistics(user.id)
