"""FastAPI authentication dependencies."""

from fastapi import Depends, Header

from quotecraft_api.auth.api_keys import ApiKeyAuthService
from quotecraft_api.dependencies import get_store
from quotecraft_api.errors.exceptions import MissingCredentialsError
from quotecraft_api.models.user import User
from quotecraft_api.storage.base import QuoteStore


async def get_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> str:
    """Extract API key from header."""
    if x_api_key is None:
        raise MissingCredentialsError()
    return x_api_key


def get_auth_service(store: QuoteStore = Depends(get_store)) -> ApiKeyAuthService:
    """Get the auth service for the application's store."""
    return ApiKeyAuthService(store)


async def get_current_user(
    api_key: str = Depends(get_api_key),
    auth_service: ApiKeyAuthService = Depends(get_auth_service),
) -> User:
    """
    Get the current authenticated user.

    This dependency validates the API key and returns the associated user.
    """
    return await auth_service.validate_api_key(api_key)
