"""Abstract session store definitions."""

import abc
import logging
from typing import List, Optional, Tuple

logger = logging.getLogger("redis_session_store")


def drop_message(message: str) -> None:
    """Default diagnostic sink; discards the message."""


class SessionStore(abc.ABC):
    """Maps session tokens to user ids and indexes them by user and recency."""

    @abc.abstractmethod
    async def lookup(self, token: str) -> Optional[int]:
        """Return the user id bound to ``token``, or ``None`` if unbound."""

    @abc.abstractmethod
    async def bind(self, token: str, user_id: int) -> None:
        """Bind a fresh ``token`` to ``user_id``."""

    @abc.abstractmethod
    async def unbind(self, token: str, user_id: int) -> None:
        """Remove ``token`` from the index; tolerates tokens already gone."""

    @abc.abstractmethod
    async def list_user_sessions(self, user_id: int) -> List[Tuple[str, float]]:
        """Return ``(token, timestamp)`` pairs for ``user_id``, oldest first."""

    async def unbind_all(self, user_id: int) -> int:
        """Unbind every session of ``user_id`` and return how many were found.

        Each token is removed in its own transaction, so sessions bound
        while this runs may survive it.
        """
        sessions = await self.list_user_sessions(user_id)
        for token, _timestamp in sessions:
            await self.unbind(token, user_id)

        if sessions:
            logger.info("Unbound %s sessions for user %s", len(sessions), user_id)
        return len(sessions)

    async def close(self) -> None:
        """Release resources owned by the store."""


__all__ = ["SessionStore", "drop_message"]
