"""Errors raised by session stores."""

from typing import Any, Sequence

from redis.exceptions import RedisError

# Client failures propagate unchanged; this name only documents them.
TransportError = RedisError


class SessionStoreError(Exception):
    """Base class for errors detected by the store itself."""


class DataIntegrityError(SessionStoreError):
    """A stored value does not have the shape the store writes."""

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class UnexpectedReplyError(SessionStoreError):
    """A transaction returned replies that do not match the operation."""

    def __init__(self, message: str, replies: Sequence[Any] = ()) -> None:
        super().__init__(message)
        self.replies = tuple(replies)


__all__ = [
    "DataIntegrityError",
    "SessionStoreError",
    "TransportError",
    "UnexpectedReplyError",
]
