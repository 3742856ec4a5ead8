"""Standard API response models."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(default=None, description="Additional error details")
    request_id: str | None = Field(default=None, description="Request ID for tracking")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall health status")
    version: str = Field(..., description="API version")
    components: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Component health status"
    )
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class StatisticsResponse(BaseModel):
    """Dashboard metrics, serialized in camelCase for the dashboard client."""

    total_quotes: int = Field(..., description="All quotes owned by the user")
    monthly_quotes: int = Field(..., description="Quotes created this calendar month")
    monthly_limit: int = Field(..., description="Monthly quote ceiling")
    success_rate: int = Field(..., description="Approved / non-draft quotes, in percent")
    total_revenue: int = Field(..., description="Sum of approved quote prices")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuotaResponse(BaseModel):
    """Monthly quota information."""

    user_id: str
    limit: int
    used: int
    remaining: int
    period_start: datetime
    period_end: datetime


class QuoteTextRequest(BaseModel):
    """Input for quote body text generation."""

    client_name: str = Field(..., min_length=1)
    hours: int = Field(..., ge=1)
    price: int = Field(..., ge=0)
    description: str = Field(..., min_length=1)
    template_style: str = Field(default="professional")


class QuoteTextResponse(BaseModel):
    """Generated quote body text."""

    text: str
