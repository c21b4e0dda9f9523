from __future__ import annotations
import asyncio
import base64
import logging
from typing import NamedTuple, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .config import HashConfig
from .digests import resolve_digest
from .errors import DerivationFailure, InvalidSecret
from .salt import decode_salt, generate_salt

logger = logging.getLogger(__name__)


class HashResult(NamedTuple):
    hash: str
    salt: str


def check_secret(secret: object, max_secret_length: Optional[int] = None) -> bytes:
    """Validate a secret and return its UTF-8 encoding."""
    if not isinstance(secret, str) or len(secret) == 0:
        raise InvalidSecret("Secret must be a non-empty string.")
    data = secret.encode("utf-8")
    if max_secret_length is not None and len(data) > max_secret_length:
        raise InvalidSecret(f"Secret exceeds maximum length of {max_secret_length} bytes")
    return data


def derive_key(secret: bytes, salt_bytes: bytes, iterations: int, key_length: int, digest: str) -> str:
    """Run PBKDF2-HMAC once and return the derived key as base64 text."""
    algorithm = resolve_digest(digest)
    try:
        kdf = PBKDF2HMAC(
            algorithm=algorithm,
            length=key_length,
            salt=bytes(salt_bytes),
            iterations=iterations,
        )
        key = kdf.derive(bytes(secret))
    except (UnsupportedAlgorithm, ValueError, TypeError, OverflowError) as e:
        logger.debug("PBKDF2 derivation failed for digest %s: %s", digest, e)
        raise DerivationFailure(f"Key derivation failed: {e}") from e
    return base64.b64encode(key).decode("ascii")


async def derive_key_async(secret: bytes, salt_bytes: bytes, iterations: int, key_length: int, digest: str) -> str:
    return await asyncio.to_thread(derive_key, secret, salt_bytes, iterations, key_length, digest)


def hash_secret(secret: str, salt: Optional[str] = None, config: HashConfig = HashConfig()) -> HashResult:
    """
    Hash ``secret`` with ``salt``, generating a fresh salt from ``config`` when
    none is given. Returns the hash together with the salt; store both.

    The same ``(secret, salt)`` pair always gives the same hash.
    """
    data = check_secret(secret, config.max_secret_length)
    if salt is None:
        salt = generate_salt(config)
    parts = decode_salt(salt)
    hashed = derive_key(data, parts.kdf_salt, parts.iterations, config.key_length, parts.digest)
    return HashResult(hash=hashed, salt=salt)


async def hash_secret_async(
    secret: str, salt: Optional[str] = None, config: HashConfig = HashConfig()
) -> HashResult:
    data = check_secret(secret, config.max_secret_length)
    if salt is None:
        salt = generate_salt(config)
    parts = decode_salt(salt)
    hashed = await derive_key_async(data, parts.kdf_salt, parts.iterations, config.key_length, parts.digest)
    return HashResult(hash=hashed, salt=salt)
