from __future__ import annotations
import base64
import binascii
from dataclasses import replace

from cryptography.hazmat.primitives import constant_time

from .config import HashConfig
from .errors import InvalidHashInput
from .kdf import hash_secret, hash_secret_async
from .salt import decode_salt


def constant_time_equals(a: str, b: str) -> bool:
    """
    Compare two encoded hashes in time independent of where they differ.

    Strings of different length compare unequal straight away; lengths are
    not secret here, only content is.
    """
    return constant_time.bytes_eq(a.encode("utf-8"), b.encode("utf-8"))


def _context_for(salt: str, prior_hash: object, config: HashConfig) -> HashConfig:
    # Output length comes from the stored hash, so hashes made under another
    # key_length still verify.
    if not isinstance(prior_hash, str) or not prior_hash:
        raise InvalidHashInput("Stored hash must be a non-empty string.")
    try:
        raw = base64.b64decode(prior_hash, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidHashInput("Stored hash is not valid base64.") from e
    if not raw:
        raise InvalidHashInput("Stored hash decodes to zero bytes.")
    decode_salt(salt)  # reject a bad salt before deriving
    return replace(config, key_length=len(raw))


def verify(salt: str, prior_hash: str, secret: str, config: HashConfig = HashConfig()) -> bool:
    """
    Re-derive ``secret`` under ``salt`` and compare it with ``prior_hash``.

    Returns ``False`` on mismatch. Raises for a malformed hash, salt or secret
    and for derivation failures.
    """
    context = _context_for(salt, prior_hash, config)
    candidate = hash_secret(secret, salt, context)
    return constant_time_equals(candidate.hash, prior_hash)


async def verify_async(salt: str, prior_hash: str, secret: str, config: HashConfig = HashConfig()) -> bool:
    context = _context_for(salt, prior_hash, config)
    candidate = await hash_secret_async(secret, salt, context)
    return constant_time_equals(candidate.hash, prior_hash)
