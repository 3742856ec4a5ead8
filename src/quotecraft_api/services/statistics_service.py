"""Dashboard statistics derived from a user's quotes."""

import math
from collections.abc import Iterable
from datetime import datetime

from quotecraft_api.config import Settings
from quotecraft_api.models.quote import Quote, QuoteStatus
from quotecraft_api.models.responses import StatisticsResponse
from quotecraft_api.services.quota_service import month_bounds
from quotecraft_api.storage.base import QuoteStore


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def compute_statistics(
    quotes: Iterable[Quote],
    now: datetime | None = None,
    monthly_limit: int = 50,
) -> StatisticsResponse:
    """
    Compute dashboard metrics from a collection of quotes.

    Success rate is approved quotes over every quote that left draft,
    as a rounded percentage (0 when nothing was sent). Revenue sums the
    prices of approved quotes, counting a missing price as 0.
    """
    quotes = list(quotes)
    start, end = month_bounds(now)

    monthly = sum(1 for q in quotes if start <= q.created_at <= end)
    sent = [q for q in quotes if q.status != QuoteStatus.DRAFT]
    approved = [q for q in quotes if q.status == QuoteStatus.APPROVED]

    success_rate = _round_half_up(100 * len(approved) / len(sent)) if sent else 0

    return StatisticsResponse(
        total_quotes=len(quotes),
        monthly_quotes=monthly,
        monthly_limit=monthly_limit,
        success_rate=success_rate,
        total_revenue=sum(q.price or 0 for q in approved),
    )


class StatisticsService:
    """Computes statistics on demand; nothing is cached."""

    def __init__(self, store: QuoteStore, settings: Settings):
        self._store = store
        self._settings = settings

    async def get_statistics(self, user_id: str) -> StatisticsResponse:
        quotes = await self._store.get_quotes_by_user_id(user_id)
        return compute_statistics(quotes, monthly_limit=self._settings.monthly_quote_limit)
