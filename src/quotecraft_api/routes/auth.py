"""Registration endpoint."""

from fastapi import APIRouter, Depends

from quotecraft_api.dependencies import get_user_service
from quotecraft_api.models.user import RegistrationResponse, UserCreate
from quotecraft_api.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=201,
    summary="Register",
    description="Create an account on a free trial and receive an API key.",
)
async def register(
    request: UserCreate,
    user_service: UserService = Depends(get_user_service),
) -> RegistrationResponse:
    """
    Register a new account.

    Emails are unique ignoring case; a duplicate returns 409. The API key
    in the response is the credential for the `X-API-Key` header.
    """
    user = await user_service.register(request)
    return RegistrationResponse.from_user(user)
