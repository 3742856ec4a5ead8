"""Redis-backed quote store."""

import logging
import time
from datetime import datetime
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import WatchError

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
from quotecraft_api.storage.lua_scripts import (
    CREATE_QUOTE_SCRIPT,
    DELETE_QUOTE_SCRIPT,
    LuaScripts,
)
from quotecraft_api.storage.redis_client import RedisManager

logger = logging.getLogger(__name__)

# Optimistic update attempts before reporting a conflict
WATCH_RETRIES = 5


def _score(value: datetime) -> float:
    return value.timestamp()


class RedisQuoteStore(QuoteStore):
    """
    Quote store persisted in Redis.

    Layout:
        quote:{id}                     JSON quote record
        user:{id}                      JSON user record
        user:{id}:quote_count          lifetime quote counter
        user:{id}:quotes:created       sorted set of quote ids by created_at
        user:{id}:quotes:updated       sorted set of quote ids by updated_at
        user_email:{email}             user id, email lowercased
        user_api_key:{key}             user id

    Conditional creation and deletion run as Lua scripts so the quota
    count and the write happen in one step. Updates are optimistic:
    WATCH the record, merge, then MULTI/EXEC, retrying when it moved.
    """

    def __init__(
        self,
        redis: Redis,
        clock: MonotonicClock | None = None,
        default_template_style: str = "professional",
        manager: RedisManager | None = None,
    ):
        super().__init__(clock=clock, default_template_style=default_template_style)
        self._redis = redis
        self._manager = manager
        self._scripts = LuaScripts()

    async def load_scripts(self) -> None:
        """Preload Lua scripts so later calls can use EVALSHA."""
        await self._scripts.load(self._redis)
        logger.info("Loaded quote store Lua scripts into Redis")

    # Keys

    @staticmethod
    def _quote_key(quote_id: str) -> str:
        return f"quote:{quote_id}"

    @staticmethod
    def _user_key(user_id: str) -> str:
        return f"user:{user_id}"

    @staticmethod
    def _counter_key(user_id: str) -> str:
        return f"user:{user_id}:quote_count"

    @staticmethod
    def _created_index(user_id: str) -> str:
        return f"user:{user_id}:quotes:created"

    @staticmethod
    def _updated_index(user_id: str) -> str:
        return f"user:{user_id}:quotes:updated"

    @staticmethod
    def _email_key(email: str) -> str:
        return f"user_email:{email.lower()}"

    @staticmethod
    def _api_key_key(api_key: str) -> str:
        return f"user_api_key:{api_key}"

    async def _run_script(self, sha: str | None, script: str, keys: list[str], args: list[Any]) -> Any:
        if sha:
            return await self._redis.evalsha(sha, len(keys), *keys, *args)  # type: ignore[misc]
        return await self._redis.eval(script, len(keys), *keys, *args)  # type: ignore[misc]

    # Quote operations

    async def create_quote(self, user_id: str, data: QuoteCreate) -> Quote:
        quote, _ = await self._create(user_id, data, UNLIMITED, 0.0, 0.0)
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
        return await self._create(user_id, data, limit, _score(range_start), _score(range_end))

    async def _create(
        self,
        user_id: str,
        data: QuoteCreate,
        limit: int,
        range_start: float,
        range_end: float,
    ) -> tuple[Quote | None, int]:
        quote = build_quote(
            new_quote_id(),
            user_id,
            data,
            self.clock.now(),
            self.default_template_style,
        )
        result = await self._run_script(
            self._scripts.create_quote_sha,
            CREATE_QUOTE_SCRIPT,
            keys=[
                self._created_index(user_id),
                self._updated_index(user_id),
                self._quote_key(quote.id),
                self._counter_key(user_id),
                self._user_key(user_id),
            ],
            args=[
                limit,
                range_start,
                range_end,
                quote.id,
                _score(quote.created_at),
                quote.model_dump_json(),
            ],
        )
        created, count = bool(int(result[0])), int(result[1])
        return (quote if created else None), count

    async def get_quote(self, quote_id: str) -> Quote | None:
        raw = await self._redis.get(self._quote_key(quote_id))
        if raw is None:
            return None
        return Quote.model_validate_json(raw)

    async def get_quotes_by_user_id(self, user_id: str, limit: int | None = None) -> list[Quote]:
        if limit is not None and limit <= 0:
            return []
        stop = -1 if limit is None else limit - 1
        quote_ids = await self._redis.zrevrange(self._updated_index(user_id), 0, stop)
        if not quote_ids:
            return []
        raws = await self._redis.mget([self._quote_key(qid) for qid in quote_ids])
        return [Quote.model_validate_json(raw) for raw in raws if raw is not None]

    async def update_quote(
        self,
        quote_id: str,
        changes: dict[str, Any],
        expected_status: QuoteStatus | None = None,
    ) -> Quote | None:
        key = self._quote_key(quote_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            for _ in range(WATCH_RETRIES):
                try:
                    # Any write to the key after WATCH aborts EXEC
                    await pipe.watch(key)
                    raw = await pipe.get(key)
                    if raw is None:
                        return None

                    quote = Quote.model_validate_json(raw)
                    if expected_status is not None and quote.status != expected_status:
                        raise QuoteConflictError(
                            quote_id, expected_status.value, quote.status.value
                        )

                    updated = quote.model_copy(update={**changes, "updated_at": self.clock.now()})
                    pipe.multi()
                    pipe.set(key, updated.model_dump_json())
                    pipe.zadd(
                        self._updated_index(quote.user_id),
                        {quote_id: _score(updated.updated_at)},
                    )
                    await pipe.execute()
                    return updated
                except WatchError:
                    logger.debug("Quote %s changed during update, retrying", quote_id)

        current = await self.get_quote(quote_id)
        if current is None:
            return None
        raise QuoteConflictError(
            quote_id,
            (expected_status or current.status).value,
            current.status.value,
        )

    async def delete_quote(self, quote_id: str) -> bool:
        quote = await self.get_quote(quote_id)
        if quote is None:
            return False

        result = await self._run_script(
            self._scripts.delete_quote_sha,
            DELETE_QUOTE_SCRIPT,
            keys=[
                self._quote_key(quote_id),
                self._created_index(quote.user_id),
                self._updated_index(quote.user_id),
            ],
            args=[quote_id],
        )
        return bool(int(result))

    async def get_quote_count(
        self,
        user_id: str,
        range_start: datetime | None = None,
        range_end: datetime | None = None,
    ) -> int:
        if not await self._redis.exists(self._user_key(user_id)):
            return 0

        if range_start is None or range_end is None:
            count = await self._redis.get(self._counter_key(user_id))
            return int(count or 0)

        return int(
            await self._redis.zcount(
                self._created_index(user_id),
                _score(range_start),
                _score(range_end),
            )
        )

    # User operations

    async def create_user(self, user: User) -> User:
        claimed = await self._redis.set(self._email_key(user.email), user.id, nx=True)
        if not claimed:
            raise EmailAlreadyRegisteredError(user.email)

        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.set(self._user_key(user.id), user.model_dump_json(exclude={"quotes_created_count"}))
            pipe.set(self._counter_key(user.id), user.quotes_created_count)
            pipe.set(self._api_key_key(user.api_key), user.id)
            await pipe.execute()
        return user

    async def get_user(self, user_id: str) -> User | None:
        raw, count = await self._redis.mget([self._user_key(user_id), self._counter_key(user_id)])
        if raw is None:
            return None
        user = User.model_validate_json(raw)
        return user.model_copy(update={"quotes_created_count": int(count or 0)})

    async def get_user_by_email(self, email: str) -> User | None:
        user_id = await self._redis.get(self._email_key(email))
        if user_id is None:
            return None
        return await self.get_user(user_id)

    async def get_user_by_api_key(self, api_key: str) -> User | None:
        user_id = await self._redis.get(self._api_key_key(api_key))
        if user_id is None:
            return None
        return await self.get_user(user_id)

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> User | None:
        user = await self.get_user(user_id)
        if user is None:
            return None
        # The counter lives in its own key
        changes = {k: v for k, v in changes.items() if k != "quotes_created_count"}
        updated = user.model_copy(update=changes)
        await self._redis.set(
            self._user_key(user_id),
            updated.model_dump_json(exclude={"quotes_created_count"}),
            xx=True,
        )
        return updated

    # Lifecycle

    async def health_check(self) -> dict[str, Any]:
        try:
            start = time.perf_counter()
            await self._redis.ping()  # type: ignore[misc]
            latency = (time.perf_counter() - start) * 1000
            return {"status": "up", "type": "redis", "latency_ms": round(latency, 2)}
        except Exception as e:
            return {"status": "error", "type": "redis", "error": str(e), "latency_ms": None}

    async def close(self) -> None:
        if self._manager is not None:
            await self._manager.disconnect()
