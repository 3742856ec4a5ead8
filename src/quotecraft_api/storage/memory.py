"""In-memory storage implementation."""

import builtins
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from quotecraft_api.errors.exceptions import EmailAlreadyRegisteredError, QuoteConflictError
from quotecraft_api.models.quote import Quote, QuoteCreate, QuoteStatus
from quotecraft_api.models.user import User
from quotecraft_api.storage.base import (
    UNLIMITED,
    MonotonicClock,
    QuoteStore,
    build_quote,
    new_quote_id,
)

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class InMemoryStorage(Generic[T]):
    """Generic in-memory storage using dictionaries."""

    def __init__(self, id_field: str = "id"):
        self._store: dict[str, T] = {}
        self._id_field = id_field

    def get(self, id: str) -> T | None:
        """Get an item by ID."""
        return self._store.get(id)

    def list(
        self,
        limit: int | None = None,
        filter_fn: Callable[[T], bool] | None = None,
        sort_key: str | None = None,
        sort_desc: bool = True,
    ) -> builtins.list[T]:
        """List items with optional filtering, sorting and a head limit."""
        items = list(self._store.values())

        if filter_fn:
            items = [item for item in items if filter_fn(item)]

        if sort_key:
            items.sort(key=lambda x: getattr(x, sort_key), reverse=sort_desc)

        if limit is not None:
            items = items[: max(limit, 0)]

        return items

    def create(self, item: T) -> T:
        """Create a new item."""
        item_id = getattr(item, self._id_field)
        self._store[item_id] = item
        return item

    def update(self, id: str, item: T) -> T | None:
        """Replace an existing item."""
        if id not in self._store:
            return None
        self._store[id] = item
        return item

    def delete(self, id: str) -> bool:
        """Delete an item by ID."""
        if id in self._store:
            del self._store[id]
            return True
        return False

    def count(self, filter_fn: Callable[[T], bool] | None = None) -> int:
        """Count items, optionally filtered."""
        if filter_fn:
            return sum(1 for item in self._store.values() if filter_fn(item))
        return len(self._store)

    def clear(self) -> None:
        """Clear all items."""
        self._store.clear()

    def find_one(self, filter_fn: Callable[[T], bool]) -> T | None:
        """Find a single item matching the filter."""
        for item in self._store.values():
            if filter_fn(item):
                return item
        return None


class MemoryQuoteStore(QuoteStore):
    """
    Quote store kept in process memory.

    None of the methods suspend between reading and writing, so every
    operation (including count-and-create) is atomic on the event loop.
    """

    def __init__(
        self,
        clock: MonotonicClock | None = None,
        default_template_style: str = "professional",
    ):
        super().__init__(clock=clock, default_template_style=default_template_style)
        self.quotes: InMemoryStorage[Quote] = InMemoryStorage[Quote]()
        self.users: InMemoryStorage[User] = InMemoryStorage[User]()

    # Quote operations

    async def create_quote(self, user_id: str, data: QuoteCreate) -> Quote:
        quote, _ = await self.create_quote_within_limit(
            user_id, data, UNLIMITED, datetime.min, datetime.max
        )
        assert quote is not None
        return quote

    async def create_quote_within_limit(
        self,
        user_id: str,
        data: QuoteCreate,
        limit: int,
        range_start: datetime,
        range_end: datetime,
    ) -> tuple[Quote | None, int]:
        used = 0
        if limit != UNLIMITED:
            used = self._count_in_range(user_id, range_start, range_end)
            if used >= limit:
                return None, used

        quote = build_quote(
            new_quote_id(),
            user_id,
            data,
            self.clock.now(),
            self.default_template_style,
        )
        self._increment_quote_counter(user_id)
        self.quotes.create(quote)
        return quote, used

    async def get_quote(self, quote_id: str) -> Quote | None:
        return self.quotes.get(quote_id)

    async def get_quotes_by_user_id(self, user_id: str, limit: int | None = None) -> list[Quote]:
        return self.quotes.list(
            limit=limit,
            filter_fn=lambda q: q.user_id == user_id,
            sort_key="updated_at",
            sort_desc=True,
        )

    async def update_quote(
        self,
        quote_id: str,
        changes: dict[str, Any],
        expected_status: QuoteStatus | None = None,
    ) -> Quote | None:
        quote = self.quotes.get(quote_id)
        if quote is None:
            return None
        if expected_status is not None and quote.status != expected_status:
            raise QuoteConflictError(quote_id, expected_status.value, quote.status.value)
        updated = quote.model_copy(update={**changes, "updated_at": self.clock.now()})
        return self.quotes.update(quote_id, updated)

    async def delete_quote(self, quote_id: str) -> bool:
        return self.quotes.delete(quote_id)

    async def get_quote_count(
        self,
        user_id: str,
        range_start: datetime | None = None,
        range_end: datetime | None = None,
    ) -> int:
        user = self.users.get(user_id)
        if user is None:
            return 0

        if range_start is None or range_end is None:
            return user.quotes_created_count

        return self._count_in_range(user_id, range_start, range_end)

    def _count_in_range(self, user_id: str, range_start: datetime, range_end: datetime) -> int:
        return self.quotes.count(
            lambda q: q.user_id == user_id and range_start <= q.created_at <= range_end
        )

    def _increment_quote_counter(self, user_id: str) -> None:
        user = self.users.get(user_id)
        if user is None:
            logger.warning("Quote created for unknown user %s, counter not updated", user_id)
            return
        self.users.update(
            user_id,
            user.model_copy(update={"quotes_created_count": user.quotes_created_count + 1}),
        )

    # User operations

    async def create_user(self, user: User) -> User:
        if self._find_by_email(user.email) is not None:
            raise EmailAlreadyRegisteredError(user.email)
        return self.users.create(user)

    async def get_user(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        return self._find_by_email(email)

    async def get_user_by_api_key(self, api_key: str) -> User | None:
        return self.users.find_one(lambda u: u.api_key == api_key)

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> User | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        return self.users.update(user_id, user.model_copy(update=changes))

    def _find_by_email(self, email: str) -> User | None:
        email = email.lower()
        return self.users.find_one(lambda u: u.email.lower() == email)

    async def health_check(self) -> dict[str, Any]:
        return {"status": "up", "type": "in-memory", "quotes": self.quotes.count()}

    async def close(self) -> None:
        self.quotes.clear()
        self.users.clear()
