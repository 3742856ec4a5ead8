"""Account management endpoints."""

from fastapi import APIRouter, Depends

from quotecraft_api.auth.dependencies import get_current_user
from quotecraft_api.dependencies import get_quota_guard, get_user_service
from quotecraft_api.models.responses import QuotaResponse
from quotecraft_api.models.user import ProfileUpdate, User, UserResponse
from quotecraft_api.services.quota_service import QuotaGuard
from quotecraft_api.services.user_service import UserService

router = APIRouter(prefix="/account", tags=["Account"])


@router.get(
    "/profile",
    response_model=UserResponse,
    summary="Get Profile",
    description="Get profile details for the authenticated user.",
)
async def get_profile(
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """
    Get profile details.

    Returns the user's contact and business details, lifetime quote
    count, subscription tier and trial deadline.
    """
    return UserResponse.from_user(await user_service.get_profile(user))


@router.patch(
    "/profile",
    response_model=UserResponse,
    summary="Update Profile",
    description="Update the authenticated user's profile details.",
)
async def update_profile(
    request: ProfileUpdate,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """
    Update profile details.

    Only name, business and contact fields can be changed here; email,
    subscription and counters are ignored.
    """
    return UserResponse.from_user(await user_service.update_profile(user, request))


@router.get(
    "/quota",
    response_model=QuotaResponse,
    summary="Get Quota",
    description="Get this month's quote quota for the authenticated user.",
)
async def get_quota(
    user: User = Depends(get_current_user),
    quota_guard: QuotaGuard = Depends(get_quota_guard),
) -> QuotaResponse:
    """
    Get quota information.

    Use this endpoint to check the remaining monthly quotes before
    starting the quote wizard.
    """
    return await quota_guard.get_quota(user.id)
