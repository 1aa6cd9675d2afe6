"""Typed interpretation of store replies.

Every command queued in a bind or unbind transaction is classified into a
:class:`CommandReply`. Validation then works on named outcomes instead of
raw integers, so the same rules apply to the Redis store and to the
in-memory store.
"""

from dataclasses import dataclass
import enum
import re
from typing import Any, Sequence, Tuple, Union

from .errors import DataIntegrityError, UnexpectedReplyError

_USER_ID_PATTERN = re.compile(r"[1-9][0-9]*")

# Largest value Redis can hold as an integer.
MAX_USER_ID = 2**63 - 1


class CommandOutcome(enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"
    NOOP = "noop"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class CommandReply:
    command: str
    key: str
    raw: Any
    outcome: CommandOutcome

    def __str__(self) -> str:
        return f"{self.command} {self.key} -> {self.outcome.value} ({self.raw!r})"


# Reply value -> outcome, per command. ZADD is sent without CH, so 0 means the
# member already existed and only its score was written.
_OUTCOMES = {
    "ZADD": {1: CommandOutcome.CREATED, 0: CommandOutcome.UPDATED},
    "HSETNX": {1: CommandOutcome.CREATED, 0: CommandOutcome.NOOP},
    "ZREM": {1: CommandOutcome.REMOVED, 0: CommandOutcome.NOOP},
    "HDEL": {1: CommandOutcome.REMOVED, 0: CommandOutcome.NOOP},
}

_RECENCY_WRITE = {CommandOutcome.CREATED, CommandOutcome.UPDATED}
_REMOVAL = {CommandOutcome.REMOVED, CommandOutcome.NOOP}


def classify(command: str, key: str, raw: Any) -> CommandReply:
    """Classify the raw reply of a single command."""
    outcome = CommandOutcome.MALFORMED
    # bool is an int subclass, but no integer reply decodes to one.
    if isinstance(raw, int) and not isinstance(raw, bool):
        outcome = _OUTCOMES[command].get(raw, CommandOutcome.MALFORMED)
    return CommandReply(command=command, key=key, raw=raw, outcome=outcome)


def classify_all(commands: Sequence[Tuple[str, str]], raw_replies: Sequence[Any]) -> Tuple[CommandReply, ...]:
    """Pair queued ``(command, key)`` entries with their replies.

    Raises :class:`UnexpectedReplyError` when the number of replies does
    not match the number of queued commands.
    """
    raw_replies = list(raw_replies or [])
    if len(raw_replies) != len(commands):
        raise UnexpectedReplyError(
            f"Unexpected reply: expected {len(commands)} replies, got {raw_replies!r}",
            raw_replies,
        )
    return tuple(classify(command, key, raw) for (command, key), raw in zip(commands, raw_replies))


def check_bind(replies: Sequence[CommandReply]) -> None:
    """Validate the replies of ZADD, HSETNX, ZADD.

    Recency sets may be refreshed, but the binding itself has to be newly
    created; an existing binding means a stale token was reused.
    """
    global_add, create, user_add = _unpack(replies, ("ZADD", "HSETNX", "ZADD"))

    if create.outcome is CommandOutcome.NOOP:
        raise UnexpectedReplyError(
            f"Unexpected reply: token is already bound ({describe(replies)})",
            replies,
        )

    if (
        create.outcome is not CommandOutcome.CREATED
        or global_add.outcome not in _RECENCY_WRITE
        or user_add.outcome not in _RECENCY_WRITE
    ):
        raise UnexpectedReplyError(f"Unexpected reply: {describe(replies)}", replies)


def check_unbind(replies: Sequence[CommandReply]) -> bool:
    """Validate the replies of ZREM, HDEL, ZREM.

    Returns ``True`` when every removal took effect and ``False`` when at
    least one of them found nothing to remove.
    """
    commands = _unpack(replies, ("ZREM", "HDEL", "ZREM"))

    if any(reply.outcome not in _REMOVAL for reply in commands):
        raise UnexpectedReplyError(f"Unexpected reply: {describe(replies)}", replies)

    return all(reply.outcome is CommandOutcome.REMOVED for reply in commands)


def describe(replies: Sequence[CommandReply]) -> str:
    return ", ".join(str(reply) for reply in replies)


def _unpack(replies: Sequence[CommandReply], expected: Tuple[str, ...]) -> Tuple[CommandReply, ...]:
    replies = tuple(replies)
    if tuple(reply.command for reply in replies) != expected:
        raise UnexpectedReplyError(f"Unexpected reply: {describe(replies)}", replies)
    return replies


def parse_user_id(value: Union[str, bytes]) -> int:
    """Parse a stored user id.

    Only the canonical decimal form of a positive integer is accepted:
    no sign, no leading zeros, no whitespace, at most :data:`MAX_USER_ID`.
    """
    text = value
    if isinstance(value, bytes):
        try:
            text = value.decode("ascii")
        except UnicodeDecodeError:
            raise DataIntegrityError(f"Invalid user id: {value!r}", value) from None

    if not isinstance(text, str) or _USER_ID_PATTERN.fullmatch(text) is None:
        raise DataIntegrityError(f"Invalid user id: {value!r}", value)

    # Length check first: int() refuses very long digit strings.
    if len(text) > len(str(MAX_USER_ID)) or int(text) > MAX_USER_ID:
        raise DataIntegrityError(f"Invalid user id: exceeds {MAX_USER_ID} ({text[:32]!r})", value)

    return int(text)


def check_user_id(user_id: Any) -> int:
    """Reject anything that would not round-trip through :func:`parse_user_id`."""
    if isinstance(user_id, bool) or not isinstance(user_id, int) or not 0 < user_id <= MAX_USER_ID:
        raise ValueError(f"user_id must be a positive integer up to {MAX_USER_ID}, got {user_id!r}")
    return user_id


__all__ = [
    "CommandOutcome",
    "CommandReply",
    "MAX_USER_ID",
    "check_bind",
    "check_unbind",
    "check_user_id",
    "classify",
    "classify_all",
    "describe",
    "parse_user_id",
]
