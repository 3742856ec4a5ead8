"""API key authentication backed by the quote store."""

from quotecraft_api.errors.exceptions import InvalidAPIKeyError
from quotecraft_api.models.user import User
from quotecraft_api.storage.base import QuoteStore


class ApiKeyAuthService:
    """Resolves API keys issued at registration to users."""

    def __init__(self, store: QuoteStore):
        self._store = store

    async def validate_api_key(self, api_key: str) -> User:
        """
        Validate an API key and return the associated user.

        Raises:
            InvalidAPIKeyError: If the API key is unknown
        """
        user = await self._store.get_user_by_api_key(api_key)
        if user is None:
            raise InvalidAPIKeyError()
        return user
