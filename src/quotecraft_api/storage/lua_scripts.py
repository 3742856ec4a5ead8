"""Redis Lua scripts for atomic quote operations."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from redis.asyncio import Redis

# Conditional quote creation
# Keys: [created_index, updated_index, quote_key, counter_key, user_key]
# Args: [limit (-1 = unlimited), range_start, range_end, quote_id, created_score, payload]
# Returns: [created (0/1), count_before]
CREATE_QUOTE_SCRIPT = """
local created_index = KEYS[1]
local updated_index = KEYS[2]
local quote_key = KEYS[3]
local counter_key = KEYS[4]
local user_key = KEYS[5]

local limit = tonumber(ARGV[1])
local quote_id = ARGV[4]
local score = ARGV[5]

local count = 0
if limit >= 0 then
    count = redis.call('ZCOUNT', created_index, ARGV[2], ARGV[3])
    if count >= limit then
        return {0, count}
    end
end

redis.call('SET', quote_key, ARGV[6])
redis.call('ZADD', created_index, score, quote_id)
redis.call('ZADD', updated_index, score, quote_id)

-- Lifetime counter only tracks registered users
if redis.call('EXISTS', user_key) == 1 then
    redis.call('INCR', counter_key)
end

return {1, count}
"""

# Quote deletion with index cleanup
# Keys: [quote_key, created_index, updated_index]
# Args: [quote_id]
# Returns: 1 if deleted, 0 if missing
DELETE_QUOTE_SCRIPT = """
local removed = redis.call('DEL', KEYS[1])
if removed == 0 then
    return 0
end
redis.call('ZREM', KEYS[2], ARGV[1])
redis.call('ZREM', KEYS[3], ARGV[1])
return 1
"""


class LuaScripts:
    """Manager for Lua script SHA hashes."""

    def __init__(self) -> None:
        self.create_quote_sha: str | None = None
        self.delete_quote_sha: str | None = None
        self._loaded = False

    async def load(self, redis_client: "Redis") -> None:
        """Load all scripts into Redis and store SHA hashes."""
        if self._loaded:
            return

        self.create_quote_sha = await redis_client.script_load(CREATE_QUOTE_SCRIPT)
        self.delete_quote_sha = await redis_client.script_load(DELETE_QUOTE_SCRIPT)
        self._loaded = True
