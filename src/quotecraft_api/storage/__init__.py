"""Quote store backends."""

import logging

from quotecraft_api.config import Settings, StorageBackend
from quotecraft_api.storage.base import MonotonicClock, QuoteStore
from quotecraft_api.storage.memory import MemoryQuoteStore

logger = logging.getLogger(__name__)


async def build_store(settings: Settings) -> QuoteStore:
    """Construct the configured store backend (call once at startup)."""
    if settings.storage_backend == StorageBackend.REDIS:
        from quotecraft_api.storage.redis_client import RedisManager
        from quotecraft_api.storage.redis_store import RedisQuoteStore

        manager = RedisManager(settings)
        client = await manager.connect()
        store = RedisQuoteStore(
            client,
            default_template_style=settings.default_template_style,
            manager=manager,
        )
        await store.load_scripts()
        logger.info("Using Redis quote store")
        return store

    logger.info("Using in-memory quote store")
    return MemoryQuoteStore(default_template_style=settings.default_template_style)


__all__ = ["MemoryQuoteStore", "MonotonicClock", "QuoteStore", "build_store"]
