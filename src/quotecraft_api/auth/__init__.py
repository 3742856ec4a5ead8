"""Authentication module."""

from quotecraft_api.auth.api_keys import ApiKeyAuthService
from quotecraft_api.auth.dependencies import get_current_user

__all__ = ["ApiKeyAuthService", "get_current_user"]
