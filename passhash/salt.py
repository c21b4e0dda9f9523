"""
Opaque salt codec.

A salt string bundles everything needed to repeat a derivation::

    <hex-iterations>.<digest>.<base64-salt>    current layout
    <hex-iterations>.<base64-salt>             legacy layout, digest implied

Legacy salts feed the base64 text to PBKDF2 rather than the decoded bytes,
matching how those hashes were originally stored.

Fields are only ever appended, so every older layout keeps decoding. Callers
should treat the string as opaque and pass it back unchanged.
"""
from __future__ import annotations
import asyncio
import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import Optional

from .config import HashConfig
from .digests import LEGACY_DIGEST, SUPPORTED_DIGESTS, is_digest_name
from .errors import InvalidConfiguration, MalformedSalt
from .random_source import random_bytes

DELIMITER = "."

# PBKDF2 takes a 32-bit iteration count.
MAX_ITERATIONS = 0xFFFFFFFF

_HEX_RE = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class SaltParts:
    iterations: int
    digest: str
    salt_bytes: bytes
    payload: str = field(default="", compare=False, repr=False)
    legacy: bool = field(default=False, compare=False)

    @property
    def kdf_salt(self) -> bytes:
        """Salt handed to PBKDF2. Legacy hashes were derived from the base64 text itself."""
        if self.legacy:
            return self.payload.encode("ascii")
        return self.salt_bytes


def _check_iterations(iterations: object, min_iterations: int) -> int:
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise InvalidConfiguration(f"Iterations must be an integer, got {iterations!r}.")
    if iterations < 1:
        raise InvalidConfiguration("Iterations must be positive.")
    if iterations > MAX_ITERATIONS:
        raise InvalidConfiguration(f"Iterations cannot exceed {MAX_ITERATIONS}.")
    if iterations < min_iterations:
        raise InvalidConfiguration(f"Iterations cannot be less than {min_iterations}.")
    return iterations


def encode_salt(
    iterations: int,
    digest: Optional[str],
    salt_bytes: bytes,
    min_iterations: int = 1,
) -> str:
    """
    Format a salt string. ``digest=None`` writes the legacy layout, which
    decodes back with ``LEGACY_DIGEST``.
    """
    _check_iterations(iterations, min_iterations)
    if not isinstance(salt_bytes, (bytes, bytearray)) or len(salt_bytes) == 0:
        raise InvalidConfiguration("Salt bytes must be non-empty bytes.")

    fields = [format(iterations, "x")]
    if digest is not None:
        if digest not in SUPPORTED_DIGESTS:
            raise InvalidConfiguration(f"Unsupported digest: {digest!r}")
        fields.append(digest)
    fields.append(base64.b64encode(bytes(salt_bytes)).decode("ascii"))
    return DELIMITER.join(fields)


def decode_salt(salt: str) -> SaltParts:
    if not isinstance(salt, str) or not salt:
        raise MalformedSalt("Salt must be a non-empty string.")

    head, sep, rest = salt.partition(DELIMITER)
    if not sep:
        raise MalformedSalt("Salt has no iteration field.")
    if not _HEX_RE.fullmatch(head):
        raise MalformedSalt(f"Salt iteration field is not hexadecimal: {head!r}")
    iterations = int(head, 16)
    if iterations < 1:
        raise MalformedSalt("Salt iteration count must be positive.")
    if iterations > MAX_ITERATIONS:
        raise MalformedSalt(f"Salt iteration count exceeds {MAX_ITERATIONS}.")

    digest, sep, payload = rest.partition(DELIMITER)
    legacy = not sep
    if legacy:
        digest, payload = LEGACY_DIGEST, rest
    elif not is_digest_name(digest):
        raise MalformedSalt(f"Salt digest field is not a digest name: {digest!r}")

    try:
        salt_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedSalt("Salt payload is not valid base64.") from e
    if not salt_bytes:
        raise MalformedSalt("Salt payload is empty.")

    return SaltParts(iterations=iterations, digest=digest, salt_bytes=salt_bytes, payload=payload, legacy=legacy)


def generate_salt(config: HashConfig = HashConfig(), iterations: Optional[int] = None) -> str:
    """
    Draw ``config.salt_size`` random bytes and wrap them with the iteration
    count and the configured digest. An explicit ``iterations`` may raise the
    cost but never lower it below ``config.default_iterations``.
    """
    if iterations is None:
        iterations = config.default_iterations
    _check_iterations(iterations, config.default_iterations)
    return encode_salt(iterations, config.digest, random_bytes(config.salt_size))


async def generate_salt_async(config: HashConfig = HashConfig(), iterations: Optional[int] = None) -> str:
    return await asyncio.to_thread(generate_salt, config, iterations)
