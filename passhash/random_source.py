from __future__ import annotations
import asyncio
import os

from .errors import EntropyFailure


def random_bytes(n: int) -> bytes:
    """Return ``n`` cryptographically strong random bytes from the OS CSPRNG."""
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise ValueError(f"Byte count must be a non-negative integer, got {n!r}.")
    try:
        return os.urandom(n)
    except (OSError, NotImplementedError) as e:
        raise EntropyFailure("Random source unavailable.") from e


async def random_bytes_async(n: int) -> bytes:
    return await asyncio.to_thread(random_bytes, n)
