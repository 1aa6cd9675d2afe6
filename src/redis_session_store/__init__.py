"""Session store factory and exports."""

import logging
from typing import Callable, Mapping, Optional

import redis.asyncio as redis

from .base import SessionStore
from .config import StoreSettings, load_store_settings, make_clock, redact_redis_url
from .errors import DataIntegrityError, SessionStoreError, TransportError, UnexpectedReplyError
from .keys import SessionKeys
from .memory import InMemorySessionStore
from .redis_backend import RedisSessionStore
from .replies import CommandOutcome, CommandReply, parse_user_id

logger = logging.getLogger("redis_session_store")


def create_session_store(
    env: Optional[Mapping[str, str]] = None,
    *,
    log: Optional[Callable[[str], None]] = None,
) -> SessionStore:
    """Create a session store from environment configuration."""
    settings = load_store_settings(env)
    keys = SessionKeys(prefix=settings.key_prefix)
    clock = make_clock(settings.timestamp_unit)

    if settings.redis_url:
        logger.info("Using Redis session store: %s", redact_redis_url(settings.redis_url))
        client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30,
        )
        return RedisSessionStore(client, log=log, keys=keys, clock=clock, owns_client=True)

    logger.warning("REDIS_URL not set - using in-memory session store; sessions will not be shared or persisted")
    return InMemorySessionStore(log=log, keys=keys, clock=clock)


__all__ = [
    "CommandOutcome",
    "CommandReply",
    "DataIntegrityError",
    "InMemorySessionStore",
    "RedisSessionStore",
    "SessionKeys",
    "SessionStore",
    "SessionStoreError",
    "StoreSettings",
    "TransportError",
    "UnexpectedReplyError",
    "create_session_store",
    "load_store_settings",
    "parse_user_id",
]
