"""Pydantic models for the QuoteCraft API."""

from quotecraft_api.models.quote import (
    Quote,
    QuoteCreate,
    QuoteStatus,
    QuoteUpdate,
    can_transition,
)
from quotecraft_api.models.responses import (
    ErrorDetail,
    ErrorResponse,
    QuotaResponse,
    StatisticsResponse,
)
from quotecraft_api.models.user import ProfileUpdate, User, UserCreate, UserResponse

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "ProfileUpdate",
    "QuotaResponse",
    "Quote",
    "QuoteCreate",
    "QuoteStatus",
    "QuoteUpdate",
    "StatisticsResponse",
    "User",
    "UserCreate",
    "UserResponse",
    "can_transition",
]
