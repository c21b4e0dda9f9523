from __future__ import annotations
import base64
import json
from typing import Any

from cryptography.hazmat.primitives import hashes


def weak_hash(value: Any = None) -> str:
    """
    Fast SHA-1 fingerprint of ``value`` for cache keys and de-duplication.

    ``value`` is serialized as compact JSON with sorted keys, so equal data
    always gives the same fingerprint. ``None`` hashes the empty input.
    Not suitable for passwords or anything secret.
    """
    if value is None:
        data = b""
    else:
        data = json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")

    hasher = hashes.Hash(hashes.SHA1())
    hasher.update(data)
    return base64.b64encode(hasher.finalize()).decode("ascii")
