from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .digests import SUPPORTED_DIGESTS
from .errors import InvalidConfiguration

RECOMMENDED_MIN_SALT_SIZE = 16


def _check_positive_int(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}.")


@dataclass(frozen=True)
class HashConfig:
    # PBKDF2 iteration count: floor for every salt this configuration generates.
    # (Use find_optimal_iterations to tune it for the target hardware.)
    default_iterations: int = 310_000
    digest: str = "sha256"
    salt_size: int = 32   # random bytes per salt
    key_length: int = 32  # bytes of derived output
    max_secret_length: Optional[int] = None  # UTF-8 bytes, None = unlimited

    def __post_init__(self) -> None:
        _check_positive_int("default_iterations", self.default_iterations)
        _check_positive_int("salt_size", self.salt_size)
        _check_positive_int("key_length", self.key_length)
        if self.max_secret_length is not None:
            _check_positive_int("max_secret_length", self.max_secret_length)
        if self.digest not in SUPPORTED_DIGESTS:
            raise InvalidConfiguration(
                f"Unsupported digest {self.digest!r}; expected one of {', '.join(SUPPORTED_DIGESTS)}."
            )
