"""Key layout of the session index."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionKeys:
    """Names of the three structures that make up the session index.

    ``global_set`` scores every live token by last touch, ``token_map``
    binds tokens to user ids and ``user_set(user_id)`` holds the tokens
    of one user.
    """

    prefix: str = ""

    def _key(self, name: str) -> str:
        return f"{self.prefix}:{name}" if self.prefix else name

    @property
    def global_set(self) -> str:
        return self._key("sessions")

    @property
    def token_map(self) -> str:
        return self._key("sessions:user")

    def user_set(self, user_id: int) -> str:
        return self._key(f"users:{user_id}:sessions")


__all__ = ["SessionKeys"]
