"""In-memory session store for development and testing."""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from .base import SessionStore, drop_message
from .config import make_clock
from .keys import SessionKeys
from .replies import check_bind, check_unbind, check_user_id, classify_all, describe, parse_user_id

logger = logging.getLogger("redis_session_store")


class InMemorySessionStore(SessionStore):
    """Process-local session index with the same reply semantics as Redis.

    Each operation finishes without awaiting, so it cannot interleave with
    other coroutines on the same event loop.
    """

    def __init__(
        self,
        *,
        log: Optional[Callable[[str], None]] = None,
        keys: Optional[SessionKeys] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._log = log if log is not None else drop_message
        self.keys = keys or SessionKeys()
        self._clock = clock or make_clock()
        self._sorted_sets: Dict[str, Dict[str, float]] = {}
        self._hashes: Dict[str, Dict[str, str]] = {}

    async def lookup(self, token: str) -> Optional[int]:
        raw = self._hashes.get(self.keys.token_map, {}).get(token)
        if raw is None:
            return None
        return parse_user_id(raw)

    async def bind(self, token: str, user_id: int) -> None:
        user_id = check_user_id(user_id)
        timestamp = self._clock()
        user_set = self.keys.user_set(user_id)

        raw_replies = [
            self._zadd(self.keys.global_set, token, timestamp),
            self._hsetnx(self.keys.token_map, token, str(user_id)),
            self._zadd(user_set, token, timestamp),
        ]
        commands = [
            ("ZADD", self.keys.global_set),
            ("HSETNX", self.keys.token_map),
            ("ZADD", user_set),
        ]

        check_bind(classify_all(commands, raw_replies))
        logger.debug("Bound token %s*** to user %s in memory", token[:8], user_id)

    async def unbind(self, token: str, user_id: int) -> None:
        user_id = check_user_id(user_id)
        user_set = self.keys.user_set(user_id)

        raw_replies = [
            self._remove(self._sorted_sets, self.keys.global_set, token),
            self._remove(self._hashes, self.keys.token_map, token),
            self._remove(self._sorted_sets, user_set, token),
        ]
        commands = [
            ("ZREM", self.keys.global_set),
            ("HDEL", self.keys.token_map),
            ("ZREM", user_set),
        ]

        replies = classify_all(commands, raw_replies)
        if check_unbind(replies):
            logger.debug("Unbound token %s*** from user %s in memory", token[:8], user_id)
            return

        message = f"Session was deleted between request start and end: {describe(replies)}"
        logger.debug("%s", message)
        self._log(message)

    async def list_user_sessions(self, user_id: int) -> List[Tuple[str, float]]:
        user_id = check_user_id(user_id)
        members = self._sorted_sets.get(self.keys.user_set(user_id), {})
        # Redis orders equal scores lexicographically.
        return sorted(((token, float(score)) for token, score in members.items()), key=lambda item: (item[1], item[0]))

    def _zadd(self, key: str, member: str, score: float) -> int:
        members = self._sorted_sets.setdefault(key, {})
        created = member not in members
        members[member] = score
        return 1 if created else 0

    def _hsetnx(self, key: str, field: str, value: str) -> int:
        fields = self._hashes.setdefault(key, {})
        if field in fields:
            return 0
        fields[field] = value
        return 1

    @staticmethod
    def _remove(structures: Dict[str, Dict], key: str, member: str) -> int:
        entries = structures.get(key)
        if not entries or member not in entries:
            return 0
        del entries[member]
        if not entries:
            structures.pop(key, None)
        return 1


__all__ = ["InMemorySessionStore"]
