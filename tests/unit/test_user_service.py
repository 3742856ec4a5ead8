"""Tests for user registration and profiles."""

from datetime import UTC, datetime, timedelta

import pytest

from quotecraft_api.config import Settings, SubscriptionTier
from quotecraft_api.errors.exceptions import EmailAlreadyRegisteredError, UserNotFoundError
from quotecraft_api.models.user import ProfileUpdate, UserCreate
from quotecraft_api.services.user_service import UserService


@pytest.fixture
def service(store):
    return UserService(store, Settings(trial_days=14))


class TestRegister:
    """Tests for registration."""

    @pytest.mark.asyncio
    async def test_new_user_on_trial(self, service):
        user = await service.register(UserCreate(email="new@example.com", first_name="Dana"))

        assert user.id.startswith("user_")
        assert user.api_key.startswith("qc_")
        assert user.first_name == "Dana"
        assert user.quotes_created_count == 0
        assert user.subscription_tier == SubscriptionTier.FREE
        assert user.subscription_end_date - user.created_at == timedelta(days=14)
        assert user.is_trial_active()

    @pytest.mark.asyncio
    async def test_duplicate_email_ignoring_case(self, service):
        await service.register(UserCreate(email="new@example.com"))

        with pytest.raises(EmailAlreadyRegisteredError) as exc_info:
            await service.register(UserCreate(email="NEW@Example.COM"))
        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_trial_expires(self, service):
        user = await service.register(UserCreate(email="new@example.com"))
        later = datetime.now(UTC) + timedelta(days=15)
        assert user.is_trial_active(later) is False


class TestProfile:
    """Tests for profile read and update."""

    @pytest.mark.asyncio
    async def test_update_profile(self, service, user):
        updated = await service.update_profile(
            user, ProfileUpdate(business_name="Studio", phone="+972-50-000-0000")
        )

        assert updated.business_name == "Studio"
        assert updated.phone == "+972-50-000-0000"
        assert updated.email == user.email

    @pytest.mark.asyncio
    async def test_profile_reflects_counter(self, service, store, user, quote_data):
        await store.create_quote(user.id, quote_data)

        profile = await service.get_profile(user)
        assert profile.quotes_created_count == 1

    @pytest.mark.asyncio
    async def test_unknown_user(self, service, make_user):
        with pytest.raises(UserNotFoundError):
            await service.get_profile(make_user("user_ghost", "ghost@example.com"))
