"""Storage interface shared by all quote store backends."""

import secrets
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from quotecraft_api.models.quote import Quote, QuoteCreate, QuoteStatus
from quotecraft_api.models.user import User

# Passed as the limit to create without a quota check
UNLIMITED = -1


def new_quote_id() -> str:
    return f"quote_{uuid.uuid4().hex[:12]}"


def new_user_id() -> str:
    return f"user_{uuid.uuid4().hex[:12]}"


def new_api_key() -> str:
    return f"qc_{secrets.token_urlsafe(24)}"


class MonotonicClock:
    """
    Wall clock that never returns the same instant twice.

    Record timestamps come from here so that every mutation strictly
    advances ``updated_at``, even when two writes land in the same
    microsecond.
    """

    def __init__(self, source: Callable[[], datetime] | None = None):
        self._source = source or (lambda: datetime.now(UTC))
        self._last: datetime | None = None

    def now(self) -> datetime:
        now = self._source()
        if self._last is not None and now <= self._last:
            now = self._last + timedelta(microseconds=1)
        self._last = now
        return now


def build_quote(
    quote_id: str,
    user_id: str,
    data: QuoteCreate,
    now: datetime,
    default_template_style: str = "professional",
) -> Quote:
    """Build a new quote record with creation defaults applied."""
    fields = data.model_dump(exclude={"status", "template_style"})
    status = data.status or QuoteStatus.DRAFT
    return Quote(
        id=quote_id,
        user_id=user_id,
        status=status,
        template_style=data.template_style or default_template_style,
        created_at=now,
        updated_at=now,
        sent_at=now if status == QuoteStatus.PENDING else None,
        pdf_url=None,
        **fields,
    )


class QuoteStore(ABC):
    """
    Persistence for quotes and users.

    One instance is built at application startup and handed to request
    handlers. All reads return ``None`` (or ``False``) on a miss instead of
    raising; callers decide what a miss means.
    """

    def __init__(
        self,
        clock: MonotonicClock | None = None,
        default_template_style: str = "professional",
    ):
        self.clock = clock or MonotonicClock()
        self.default_template_style = default_template_style

    # Quote operations

    @abstractmethod
    async def create_quote(self, user_id: str, data: QuoteCreate) -> Quote:
        """Persist a new quote and bump the owner's lifetime counter."""

    @abstractmethod
    async def create_quote_within_limit(
        self,
        user_id: str,
        data: QuoteCreate,
        limit: int,
        range_start: datetime,
        range_end: datetime,
    ) -> tuple[Quote | None, int]:
        """
        Atomically count the user's quotes created in the range and create
        the new quote only if that count is below ``limit``.

        Returns:
            Tuple of (created quote or None if refused, count before creation)
        """

    @abstractmethod
    async def get_quote(self, quote_id: str) -> Quote | None:
        """Get a quote by ID."""

    @abstractmethod
    async def get_quotes_by_user_id(self, user_id: str, limit: int | None = None) -> list[Quote]:
        """List a user's quotes, most recently updated first."""

    @abstractmethod
    async def update_quote(
        self,
        quote_id: str,
        changes: dict[str, Any],
        expected_status: QuoteStatus | None = None,
    ) -> Quote | None:
        """
        Merge changes onto a quote and touch ``updated_at``.

        Reading the current record, checking ``expected_status`` and writing
        the merged record happen as one atomic step.

        Raises:
            QuoteConflictError: If ``expected_status`` is given and the stored
                status differs
        """

    @abstractmethod
    async def delete_quote(self, quote_id: str) -> bool:
        """Delete a quote, returning whether it existed."""

    @abstractmethod
    async def get_quote_count(
        self,
        user_id: str,
        range_start: datetime | None = None,
        range_end: datetime | None = None,
    ) -> int:
        """
        Count a user's quotes.

        Without a range this is the lifetime counter, which never goes down.
        With a range it counts live quotes whose ``created_at`` falls in
        ``[range_start, range_end]``.
        """

    # User operations

    @abstractmethod
    async def create_user(self, user: User) -> User:
        """
        Store a new user.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken, ignoring case
        """

    @abstractmethod
    async def get_user(self, user_id: str) -> User | None:
        """Get a user by ID."""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> User | None:
        """Get a user by email, ignoring case."""

    @abstractmethod
    async def get_user_by_api_key(self, api_key: str) -> User | None:
        """Get the user an API key belongs to."""

    @abstractmethod
    async def update_user(self, user_id: str, changes: dict[str, Any]) -> User | None:
        """Merge changes onto a user."""

    # Lifecycle

    async def health_check(self) -> dict[str, Any]:
        """Report backend health."""
        return {"status": "up"}

    async def close(self) -> None:
        """Release backend resources."""
