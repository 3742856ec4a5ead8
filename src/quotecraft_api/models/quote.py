"""Quote models."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator


class QuoteStatus(str, Enum):
    """Quote lifecycle status."""

    DRAFT = "draft"
    PENDING = "pending"
    SENT = "sent"  # reserved
    VIEWED = "viewed"  # reserved
    APPROVED = "approved"
    REJECTED = "rejected"


# Valid state transitions for quotes
QUOTE_TRANSITIONS: dict[QuoteStatus, set[QuoteStatus]] = {
    QuoteStatus.DRAFT: {QuoteStatus.PENDING, QuoteStatus.SENT},
    QuoteStatus.PENDING: {
        QuoteStatus.DRAFT,
        QuoteStatus.SENT,
        QuoteStatus.VIEWED,
        QuoteStatus.APPROVED,
        QuoteStatus.REJECTED,
    },
    QuoteStatus.SENT: {QuoteStatus.VIEWED, QuoteStatus.APPROVED, QuoteStatus.REJECTED},
    QuoteStatus.VIEWED: {QuoteStatus.APPROVED, QuoteStatus.REJECTED},
    QuoteStatus.APPROVED: set(),
    QuoteStatus.REJECTED: set(),
}


def can_transition(from_status: QuoteStatus, to_status: QuoteStatus) -> bool:
    """Check if a quote status transition is valid."""
    if from_status == to_status:
        return True
    return to_status in QUOTE_TRANSITIONS.get(from_status, set())


class Quote(BaseModel):
    """Stored quote record."""

    id: str = Field(..., description="Unique quote identifier")
    user_id: str = Field(..., description="ID of the user who owns this quote")
    client_name: str = Field(..., min_length=1)
    client_email: str | None = Field(default=None)
    project_description: str | None = Field(default=None)
    estimated_hours: int | None = Field(default=None, ge=0)
    price: int | None = Field(default=None, ge=0)
    include_vat: bool = Field(default=True)
    template_style: str = Field(default="professional")
    generated_text: str | None = Field(default=None)
    additional_details: dict[str, Any] | None = Field(default=None)
    status: QuoteStatus = Field(default=QuoteStatus.DRAFT)

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    sent_at: datetime | None = Field(default=None)

    # Not generated yet
    pdf_url: str | None = Field(default=None)

    model_config = {"from_attributes": True}


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("Client name is required")
    return value.strip()


class QuoteCreate(BaseModel):
    """Fields accepted when creating a quote."""

    client_name: str = Field(..., min_length=1, max_length=200)
    client_email: EmailStr | None = Field(default=None)
    project_description: str | None = Field(default=None, max_length=5000)
    estimated_hours: int | None = Field(default=None, ge=0)
    price: int | None = Field(default=None, ge=0)
    include_vat: bool = Field(default=True)
    template_style: str | None = Field(default=None, max_length=50)
    generated_text: str | None = Field(default=None)
    additional_details: dict[str, Any] | None = Field(default=None)
    status: QuoteStatus | None = Field(
        default=None,
        description="Initial status, draft when omitted",
    )

    @field_validator("client_name")
    @classmethod
    def validate_client_name(cls, v: str) -> str:
        return _not_blank(v)


class QuoteUpdate(BaseModel):
    """
    Partial quote update.

    Only fields present in the request are applied; an explicit null
    overwrites the stored value for nullable fields.
    """

    client_name: str | None = Field(default=None, min_length=1, max_length=200)
    client_email: EmailStr | None = Field(default=None)
    project_description: str | None = Field(default=None, max_length=5000)
    estimated_hours: int | None = Field(default=None, ge=0)
    price: int | None = Field(default=None, ge=0)
    include_vat: bool | None = Field(default=None)
    template_style: str | None = Field(default=None, max_length=50)
    generated_text: str | None = Field(default=None)
    additional_details: dict[str, Any] | None = Field(default=None)
    status: QuoteStatus | None = Field(default=None)

    @field_validator("client_name", "include_vat", "template_style", "status")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        """These fields are required on the stored record and can't be cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("client_name")
    @classmethod
    def validate_client_name(cls, v: str) -> str:
        return _not_blank(v)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly set in this update."""
        return self.model_dump(exclude_unset=True)
