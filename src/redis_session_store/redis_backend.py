"""Redis-backed session store."""

import logging
from typing import Callable, List, Optional, Tuple

import redis.asyncio as redis

from .base import SessionStore, drop_message
from .config import make_clock
from .keys import SessionKeys
from .replies import check_bind, check_unbind, check_user_id, classify_all, describe, parse_user_id

logger = logging.getLogger("redis_session_store")


class RedisSessionStore(SessionStore):
    """Session index kept in a hash and two kinds of sorted sets.

    Writes go through MULTI/EXEC so the global recency set, the token map
    and the per-user recency set change together. Connection handling,
    retries and timeouts are left to the ``redis.asyncio`` client.
    """

    def __init__(
        self,
        client: "redis.Redis",
        *,
        log: Optional[Callable[[str], None]] = None,
        keys: Optional[SessionKeys] = None,
        clock: Optional[Callable[[], float]] = None,
        owns_client: bool = False,
    ) -> None:
        self._redis = client
        self._log = log if log is not None else drop_message
        self.keys = keys or SessionKeys()
        self._clock = clock or make_clock()
        self._owns_client = owns_client

    async def lookup(self, token: str) -> Optional[int]:
        raw = await self._redis.hget(self.keys.token_map, token)
        if raw is None:
            return None
        return parse_user_id(raw)

    async def bind(self, token: str, user_id: int) -> None:
        user_id = check_user_id(user_id)
        timestamp = self._clock()
        user_set = self.keys.user_set(user_id)
        commands = [
            ("ZADD", self.keys.global_set),
            ("HSETNX", self.keys.token_map),
            ("ZADD", user_set),
        ]

        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.zadd(self.keys.global_set, {token: timestamp})
            pipe.hsetnx(self.keys.token_map, token, str(user_id))
            pipe.zadd(user_set, {token: timestamp})
            raw_replies = await pipe.execute()

        check_bind(classify_all(commands, raw_replies))
        logger.debug("Bound token %s*** to user %s", token[:8], user_id)

    async def unbind(self, token: str, user_id: int) -> None:
        user_id = check_user_id(user_id)
        user_set = self.keys.user_set(user_id)
        commands = [
            ("ZREM", self.keys.global_set),
            ("HDEL", self.keys.token_map),
            ("ZREM", user_set),
        ]

        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.zrem(self.keys.global_set, token)
            pipe.hdel(self.keys.token_map, token)
            pipe.zrem(user_set, token)
            raw_replies = await pipe.execute()

        replies = classify_all(commands, raw_replies)
        if check_unbind(replies):
            logger.debug("Unbound token %s*** from user %s", token[:8], user_id)
            return

        message = f"Session was deleted between request start and end: {describe(replies)}"
        logger.debug("%s", message)
        self._log(message)

    async def list_user_sessions(self, user_id: int) -> List[Tuple[str, float]]:
        user_id = check_user_id(user_id)
        entries = await self._redis.zrange(self.keys.user_set(user_id), 0, -1, withscores=True)
        return [(_text(token), float(score)) for token, score in entries]

    async def close(self) -> None:
        if self._owns_client:
            await self._redis.aclose()
            logger.debug("Redis connection closed")


def _text(value) -> str:
    return value.decode() if isinstance(value, bytes) else value


__all__ = ["RedisSessionStore"]
