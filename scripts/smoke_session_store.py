"""Quick smoke test for the Redis-backed session store.

Run with REDIS_URL set to a reachable Redis instance. Uses a throwaway key
prefix and removes everything it writes.
"""

from __future__ import annotations

import asyncio
import os
import sys
import uuid

from redis_session_store import UnexpectedReplyError, create_session_store


class SmokeFailure(RuntimeError):
    pass


async def run_smoke(redis_url: str) -> None:
    prefix = f"smoke:{uuid.uuid4().hex[:8]}"
    messages: list[str] = []
    store = create_session_store(
        {"REDIS_URL": redis_url, "SESSION_STORE_KEY_PREFIX": prefix},
        log=messages.append,
    )
    token = uuid.uuid4().hex

    print(f"[+] Using key prefix {prefix}")

    try:
        await store.bind(token, 1)
        user_id = await store.lookup(token)
        if user_id != 1:
            raise SmokeFailure(f"Expected user 1 after bind, got {user_id!r}")
        print("[+] Token bound and looked up")

        try:
            await store.bind(token, 1)
        except UnexpectedReplyError:
            print("[+] Second bind of the same token rejected")
        else:
            raise SmokeFailure("Second bind of the same token was accepted")

        await store.unbind(token, 1)
        await store.bind(token, 2)
        if await store.lookup(token) != 2:
            raise SmokeFailure("Rebinding to user 2 did not take effect")
        if await store.list_user_sessions(1):
            raise SmokeFailure("User 1 still lists the token after unbind")
        print("[+] Token moved from user 1 to user 2")

        await store.unbind(token, 2)
        await store.unbind(token, 2)
        if await store.lookup(token) is not None:
            raise SmokeFailure("Token still resolves after unbind")
        if len(messages) != 1:
            raise SmokeFailure(f"Expected one race diagnostic, got {messages!r}")
        print("[+] Repeated unbind tolerated")
    finally:
        await store.close()

    print("[✓] Redis session store smoke test passed")


def main() -> int:
    redis_url = os.environ.get("REDIS_URL")
    if not redis_url:
        print("ERROR: REDIS_URL environment variable not set", file=sys.stderr)
        return 2

    try:
        asyncio.run(run_smoke(redis_url))
    except SmokeFailure as exc:
        print(f"SMOKE FAILURE: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
    except Exception as exc:  # pragma: no cover
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
