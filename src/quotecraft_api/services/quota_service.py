"""Monthly quota enforcement for quote creation."""

import logging
from datetime import datetime, timedelta

from quotecraft_api.config import Settings
from quotecraft_api.errors.exceptions import QuotaExceededError
from quotecraft_api.models.quote import Quote, QuoteCreate
from quotecraft_api.models.responses import QuotaResponse
from quotecraft_api.storage.base import QuoteStore

logger = logging.getLogger(__name__)


def month_bounds(reference: datetime | None = None) -> tuple[datetime, datetime]:
    """
    Get the calendar month containing ``reference`` in server-local time.

    Returns:
        Tuple of (first moment of the first day, last moment of the last day)
    """
    local = (reference or datetime.now()).astimezone()
    if local.month == 12:
        next_year, next_month = local.year + 1, 1
    else:
        next_year, next_month = local.year, local.month + 1

    # Each end takes its own UTC offset; they differ across a DST change
    start = datetime(local.year, local.month, 1).astimezone()
    next_start = datetime(next_year, next_month, 1).astimezone()
    return start, next_start - timedelta(microseconds=1)


class QuotaGuard:
    """Admission control for quote creation, limited per user per month."""

    def __init__(self, store: QuoteStore, settings: Settings):
        self._store = store
        self._settings = settings

    @property
    def limit(self) -> int:
        return self._settings.monthly_quote_limit

    async def get_quota(self, user_id: str) -> QuotaResponse:
        """Current month's usage against the limit."""
        start, end = month_bounds()
        used = await self._store.get_quote_count(user_id, start, end)
        return QuotaResponse(
            user_id=user_id,
            limit=self.limit,
            used=used,
            remaining=max(0, self.limit - used),
            period_start=start,
            period_end=end,
        )

    async def check(self, user_id: str) -> None:
        """
        Advisory check without reserving a slot.

        Raises:
            QuotaExceededError: If the month's quota is already used up
        """
        quota = await self.get_quota(user_id)
        if quota.used >= quota.limit:
            raise self._exceeded(quota.used, quota.period_end)

    async def create_within_quota(self, user_id: str, data: QuoteCreate) -> Quote:
        """
        Create a quote if the user still has room this month.

        Counting and creating happen in one store operation, so concurrent
        requests can't push the user past the limit.

        Raises:
            QuotaExceededError: If the month's quota is already used up
        """
        start, end = month_bounds()
        quote, used = await self._store.create_quote_within_limit(
            user_id, data, self.limit, start, end
        )
        if quote is None:
            logger.warning(
                "Monthly quota reached for user %s (%d/%d)",
                user_id,
                used,
                self.limit,
            )
            raise self._exceeded(used, end)
        return quote

    def _exceeded(self, used: int, period_end: datetime) -> QuotaExceededError:
        reset_at = (period_end + timedelta(microseconds=1)).isoformat()
        return QuotaExceededError(
            limit=self.limit,
            used=used,
            reset_at=reset_at,
            upgrade_url=self._settings.upgrade_url,
        )
