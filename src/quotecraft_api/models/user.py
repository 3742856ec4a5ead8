"""User models."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field

from quotecraft_api.config import SubscriptionTier


class User(BaseModel):
    """User model."""

    id: str = Field(..., description="Unique user identifier")
    email: EmailStr = Field(..., description="User email address")
    api_key: str = Field(..., description="User API key")
    first_name: str | None = Field(default=None)
    last_name: str | None = Field(default=None)
    business_name: str | None = Field(default=None)
    phone: str | None = Field(default=None)
    address: str | None = Field(default=None)
    website: str | None = Field(default=None)
    logo_url: str | None = Field(default=None)
    quotes_created_count: int = Field(default=0, ge=0, description="Lifetime quote counter")
    subscription_tier: SubscriptionTier = Field(default=SubscriptionTier.FREE)
    subscription_end_date: datetime | None = Field(default=None, description="Trial deadline")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"from_attributes": True}

    def is_trial_active(self, now: datetime | None = None) -> bool:
        """Whether the free trial is still running."""
        if self.subscription_end_date is None:
            return False
        return (now or datetime.now(UTC)) <= self.subscription_end_date


class UserCreate(BaseModel):
    """Registration request."""

    email: EmailStr
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    business_name: str | None = Field(default=None, max_length=200)


class ProfileUpdate(BaseModel):
    """Profile fields a user may change."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    business_name: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)
    website: str | None = Field(default=None, max_length=500)
    logo_url: str | None = Field(default=None, max_length=1000)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class UserResponse(BaseModel):
    """Public view of a user, without credentials."""

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    business_name: str | None = None
    phone: str | None = None
    address: str | None = None
    website: str | None = None
    logo_url: str | None = None
    quotes_created_count: int
    subscription_tier: SubscriptionTier
    subscription_end_date: datetime | None = None
    created_at: datetime
    trial_active: bool = False

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        """Create response from user model."""
        return cls.model_validate(
            {**user.model_dump(exclude={"api_key"}), "trial_active": user.is_trial_active()}
        )


class RegistrationResponse(UserResponse):
    """Returned once at registration; carries the API key."""

    api_key: str

    @classmethod
    def from_user(cls, user: User) -> "RegistrationResponse":
        return cls.model_validate({**user.model_dump(), "trial_active": user.is_trial_active()})
