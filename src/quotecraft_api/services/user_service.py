"""User registration and profile management."""

import logging
from datetime import UTC, datetime, timedelta

from quotecraft_api.config import Settings, SubscriptionTier
from quotecraft_api.errors.exceptions import UserNotFoundError
from quotecraft_api.models.user import ProfileUpdate, User, UserCreate
from quotecraft_api.storage.base import QuoteStore, new_api_key, new_user_id

logger = logging.getLogger(__name__)


class UserService:
    """Service for user accounts."""

    def __init__(self, store: QuoteStore, settings: Settings):
        self._store = store
        self._settings = settings

    async def register(self, data: UserCreate) -> User:
        """
        Register a new user on a free trial.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken, ignoring case
        """
        now = datetime.now(UTC)
        user = User(
            id=new_user_id(),
            email=data.email,
            api_key=new_api_key(),
            first_name=data.first_name,
            last_name=data.last_name,
            business_name=data.business_name,
            quotes_created_count=0,
            subscription_tier=SubscriptionTier.FREE,
            subscription_end_date=now + timedelta(days=self._settings.trial_days),
            created_at=now,
        )
        user = await self._store.create_user(user)
        logger.info("Registered user %s", user.id)
        return user

    async def get_profile(self, user: User) -> User:
        """Get the latest stored copy of the user."""
        current = await self._store.get_user(user.id)
        if current is None:
            raise UserNotFoundError(user.id)
        return current

    async def update_profile(self, user: User, update: ProfileUpdate) -> User:
        """Update the user's editable profile fields."""
        updated = await self._store.update_user(user.id, update.changes())
        if updated is None:
            raise UserNotFoundError(user.id)
        return updated
