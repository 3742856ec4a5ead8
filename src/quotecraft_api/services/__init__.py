"""Services module."""

from quotecraft_api.services.quota_service import QuotaGuard, month_bounds
from quotecraft_api.services.quote_service import QuoteService
from quotecraft_api.services.statistics_service import StatisticsService, compute_statistics
from quotecraft_api.services.text_generation import generate_quote_text
from quotecraft_api.services.user_service import UserService

__all__ = [
    "QuotaGuard",
    "QuoteService",
    "StatisticsService",
    "UserService",
    "compute_statistics",
    "generate_quote_text",
    "month_bounds",
]
