"""Quote service: ownership checks and lifecycle transitions."""

import logging
from typing import Any

from quotecraft_api.config import Settings
from quotecraft_api.errors.exceptions import (
    InvalidStatusTransitionError,
    PermissionDeniedError,
    QuoteConflictError,
    QuoteNotFoundError,
)
from quotecraft_api.models.quote import (
    Quote,
    QuoteCreate,
    QuoteStatus,
    QuoteUpdate,
    can_transition,
)
from quotecraft_api.models.user import User
from quotecraft_api.services.quota_service import QuotaGuard
from quotecraft_api.services.text_generation import QuoteTextGenerator, generate_quote_text
from quotecraft_api.storage.base import QuoteStore

logger = logging.getLogger(__name__)

# Status updates re-read and re-validate this many times on a conflict
UPDATE_ATTEMPTS = 3


class QuoteService:
    """Service for quote CRUD operations and status changes."""

    def __init__(
        self,
        store: QuoteStore,
        settings: Settings,
        quota_guard: QuotaGuard | None = None,
        text_generator: QuoteTextGenerator = generate_quote_text,
    ):
        self._store = store
        self._settings = settings
        self._quota_guard = quota_guard or QuotaGuard(store, settings)
        self._text_generator = text_generator

    async def create_quote(self, data: QuoteCreate, user: User) -> Quote:
        """
        Create a quote for the user, subject to the monthly quota.

        Raises:
            QuotaExceededError: If the user's monthly quota is used up
        """
        quote = await self._quota_guard.create_within_quota(user.id, data)
        logger.info("Created quote %s for user %s", quote.id, user.id)
        return quote

    async def list_quotes(self, user: User, limit: int | None = None) -> list[Quote]:
        """List the user's quotes, most recently updated first."""
        return await self._store.get_quotes_by_user_id(user.id, limit)

    async def get_quote(self, quote_id: str, user: User) -> Quote:
        """
        Get a quote by ID.

        Raises:
            QuoteNotFoundError: If quote doesn't exist
            PermissionDeniedError: If user doesn't own the quote
        """
        quote = await self._store.get_quote(quote_id)

        if quote is None:
            raise QuoteNotFoundError(quote_id)

        if quote.user_id != user.id:
            raise PermissionDeniedError(
                message="You don't have permission to access this quote",
                details={"quote_id": quote_id},
            )

        return quote

    async def update_quote(self, quote_id: str, update: QuoteUpdate, user: User) -> Quote:
        """
        Apply a partial update to a quote.

        Moving to ``pending`` stamps ``sent_at``; other status writes leave
        it alone.

        Raises:
            QuoteNotFoundError: If quote doesn't exist
            PermissionDeniedError: If user doesn't own the quote
            InvalidStatusTransitionError: If the status change isn't allowed
            QuoteConflictError: If the status keeps changing under concurrent
                updates
        """
        attempts = 0
        while True:
            quote = await self.get_quote(quote_id, user)
            changes = update.changes()

            new_status = changes.get("status")
            if new_status is not None:
                self._validate_transition(quote, new_status)
                changes.update(self._status_side_effects(new_status))

            # The transition was checked against this status; the store
            # refuses the write if it has moved on since
            expected = quote.status if new_status is not None else None
            try:
                return await self._apply(quote, changes, expected_status=expected)
            except QuoteConflictError:
                attempts += 1
                if attempts >= UPDATE_ATTEMPTS:
                    raise
                logger.info("Quote %s status changed concurrently, rechecking", quote_id)

    async def send_quote(self, quote_id: str, user: User) -> Quote:
        """Mark a quote as sent to the client (status ``pending``)."""
        return await self.update_quote(quote_id, QuoteUpdate(status=QuoteStatus.PENDING), user)

    async def generate_text(self, quote_id: str, user: User) -> Quote:
        """Fill in the quote's body text from its own fields."""
        quote = await self.get_quote(quote_id, user)
        text = self._text_generator(
            quote.client_name,
            quote.estimated_hours or 0,
            quote.price or 0,
            quote.project_description or "",
            quote.template_style,
        )
        return await self._apply(quote, {"generated_text": text})

    async def delete_quote(self, quote_id: str, user: User) -> bool:
        """
        Delete a quote.

        Raises:
            QuoteNotFoundError: If quote doesn't exist
            PermissionDeniedError: If user doesn't own the quote
        """
        await self.get_quote(quote_id, user)

        deleted = await self._store.delete_quote(quote_id)
        if not deleted:
            raise QuoteNotFoundError(quote_id)

        logger.info("Deleted quote %s for user %s", quote_id, user.id)
        return deleted

    def _validate_transition(self, quote: Quote, new_status: QuoteStatus) -> None:
        if not self._settings.enforce_status_transitions:
            return
        if not can_transition(quote.status, new_status):
            raise InvalidStatusTransitionError(quote.id, quote.status.value, new_status.value)

    def _status_side_effects(self, new_status: QuoteStatus) -> dict[str, Any]:
        if new_status == QuoteStatus.PENDING:
            return {"sent_at": self._store.clock.now()}
        return {}

    async def _apply(
        self,
        quote: Quote,
        changes: dict[str, Any],
        expected_status: QuoteStatus | None = None,
    ) -> Quote:
        updated = await self._store.update_quote(quote.id, changes, expected_status)
        if updated is None:
            # Deleted concurrently
            raise QuoteNotFoundError(quote.id)

        if updated.status != quote.status:
            logger.info(
                "Quote %s status changed: %s -> %s",
                quote.id,
                quote.status.value,
                updated.status.value,
            )
        return updated
