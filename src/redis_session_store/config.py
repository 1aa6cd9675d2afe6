"""Environment helpers for session store configuration."""

from dataclasses import dataclass
import logging
import os
import time
from typing import Callable, Mapping, Optional

logger = logging.getLogger("redis_session_store")

TIMESTAMP_UNITS = {
    "seconds": 1,
    "milliseconds": 1000,
}

DEFAULT_TIMESTAMP_UNIT = "seconds"


@dataclass
class StoreSettings:
    redis_url: Optional[str] = None
    key_prefix: str = ""
    timestamp_unit: str = DEFAULT_TIMESTAMP_UNIT


def load_store_settings(env: Optional[Mapping[str, str]] = None) -> StoreSettings:
    env = env if env is not None else os.environ

    return StoreSettings(
        redis_url=env.get("REDIS_URL") or None,
        key_prefix=_parse_prefix(env.get("SESSION_STORE_KEY_PREFIX")),
        timestamp_unit=_parse_unit(env.get("SESSION_STORE_TIMESTAMP_UNIT")),
    )


def make_clock(unit: str = DEFAULT_TIMESTAMP_UNIT) -> Callable[[], int]:
    """Return a clock producing whole ``unit`` values since the epoch."""
    scale = TIMESTAMP_UNITS[unit]

    def clock() -> int:
        return int(time.time() * scale)

    return clock


def redact_redis_url(redis_url: str) -> str:
    if "@" not in redis_url:
        return redis_url
    credentials, _, host = redis_url.rpartition("@")
    scheme, separator, _ = credentials.partition("://")
    return f"{scheme}://{host}" if separator else host


def _parse_prefix(value: Optional[str]) -> str:
    if value is None:
        return ""
    prefix = value.strip().rstrip(":")
    if prefix != value:
        logger.warning("SESSION_STORE_KEY_PREFIX normalised from %r to %r", value, prefix)
    return prefix


def _parse_unit(value: Optional[str]) -> str:
    if value is None or not value.strip():
        return DEFAULT_TIMESTAMP_UNIT
    unit = value.strip().lower()
    if unit not in TIMESTAMP_UNITS:
        logger.warning(
            "SESSION_STORE_TIMESTAMP_UNIT must be one of %s; using default %s",
            ", ".join(sorted(TIMESTAMP_UNITS)),
            DEFAULT_TIMESTAMP_UNIT,
        )
        return DEFAULT_TIMESTAMP_UNIT
    return unit


__all__ = [
    "DEFAULT_TIMESTAMP_UNIT",
    "StoreSettings",
    "TIMESTAMP_UNITS",
    "load_store_settings",
    "make_clock",
    "redact_redis_url",
]
