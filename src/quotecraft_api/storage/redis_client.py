"""Redis client management."""

import logging

import redis.asyncio as redis
from redis.asyncio import Redis

from quotecraft_api.config import Settings

logger = logging.getLogger(__name__)


class RedisManager:
    """Manages the Redis connection pool for the application's lifetime."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._pool: redis.ConnectionPool | None = None
        self._redis: Redis | None = None

    async def connect(self) -> Redis:
        """Initialize the connection pool and verify the server answers."""
        if self._redis is not None:
            return self._redis

        # The store expects str replies, not bytes
        self._pool = redis.ConnectionPool.from_url(
            self._settings.redis_url,
            max_connections=self._settings.redis_max_connections,
            decode_responses=True,
        )
        self._redis = Redis(connection_pool=self._pool)

        try:
            await self._redis.ping()  # type: ignore[misc]
        except redis.RedisError as e:
            logger.error("Failed to connect to Redis at %s: %s", self._settings.redis_url, e)
            await self.disconnect()
            raise

        logger.info("Connected to Redis at %s", self._settings.redis_url)
        return self._redis

    async def disconnect(self) -> None:
        """Close the connection pool."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

        if self._pool:
            await self._pool.disconnect()
            self._pool = None
