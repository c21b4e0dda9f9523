from __future__ import annotations
import re

from cryptography.hazmat.primitives import hashes

from .errors import DerivationFailure


# Digest assumed for salts written before the digest was embedded.
LEGACY_DIGEST = "sha1"

SUPPORTED_DIGESTS: dict[str, type[hashes.HashAlgorithm]] = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha512-224": hashes.SHA512_224,
    "sha512-256": hashes.SHA512_256,
    "sha3-224": hashes.SHA3_224,
    "sha3-256": hashes.SHA3_256,
    "sha3-384": hashes.SHA3_384,
    "sha3-512": hashes.SHA3_512,
}

_NAME_RE = re.compile(r"[a-z0-9_-]+")


def is_digest_name(text: str) -> bool:
    return bool(_NAME_RE.fullmatch(text))


def resolve_digest(name: str) -> hashes.HashAlgorithm:
    try:
        algorithm = SUPPORTED_DIGESTS[name]
    except KeyError:
        raise DerivationFailure(f"Unsupported digest: {name!r}") from None
    return algorithm()
