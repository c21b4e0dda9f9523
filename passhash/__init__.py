from .calibrate import find_optimal_iterations, find_optimal_iterations_async
from .config import HashConfig
from .digests import LEGACY_DIGEST, SUPPORTED_DIGESTS
from .errors import (
    CalibrationBusy,
    CalibrationError,
    CalibrationInfeasible,
    CalibrationTimeout,
    DerivationFailure,
    EntropyFailure,
    InvalidConfiguration,
    InvalidHashInput,
    InvalidSecret,
    MalformedSalt,
    PassHashError,
)
from .hasher import PasswordHasher
from .kdf import HashResult, derive_key, hash_secret
from .random_source import random_bytes
from .salt import SaltParts, decode_salt, encode_salt, generate_salt
from .verify import verify
from .weak import weak_hash

__version__ = "1.0.0"
