from __future__ import annotations
import logging
import threading
from typing import Any, Optional

from . import calibrate
from .config import RECOMMENDED_MIN_SALT_SIZE, HashConfig
from .errors import CalibrationBusy
from .kdf import HashResult, hash_secret, hash_secret_async
from .random_source import random_bytes, random_bytes_async
from .salt import generate_salt, generate_salt_async
from .verify import verify, verify_async
from .weak import weak_hash

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    Salted PBKDF2 hashing bound to one ``HashConfig``.

        hasher = PasswordHasher(HashConfig(default_iterations=600_000))
        hashed, salt = hasher.hash("correct horse")
        hasher.verify(salt, hashed, "correct horse")  # True

    Hashing and verification hold no shared state and may run concurrently.
    Calibration is single-flight per instance.
    """

    def __init__(self, config: Optional[HashConfig] = None) -> None:
        self.config = config if config is not None else HashConfig()
        self._calibration_lock = threading.Lock()
        if self.config.salt_size < RECOMMENDED_MIN_SALT_SIZE:
            logger.warning(
                "salt_size of %d bytes is below the recommended %d bytes",
                self.config.salt_size,
                RECOMMENDED_MIN_SALT_SIZE,
            )

    def weak_hash(self, value: Any = None) -> str:
        return weak_hash(value)

    def random_bytes(self, n: int) -> bytes:
        return random_bytes(n)

    async def random_bytes_async(self, n: int) -> bytes:
        return await random_bytes_async(n)

    def generate_salt(self, iterations: Optional[int] = None) -> str:
        return generate_salt(self.config, iterations)

    async def generate_salt_async(self, iterations: Optional[int] = None) -> str:
        return await generate_salt_async(self.config, iterations)

    def hash(self, secret: str, salt: Optional[str] = None) -> HashResult:
        return hash_secret(secret, salt, self.config)

    async def hash_async(self, secret: str, salt: Optional[str] = None) -> HashResult:
        return await hash_secret_async(secret, salt, self.config)

    def verify(self, salt: str, prior_hash: str, secret: str) -> bool:
        return verify(salt, prior_hash, secret, self.config)

    async def verify_async(self, salt: str, prior_hash: str, secret: str) -> bool:
        return await verify_async(salt, prior_hash, secret, self.config)

    def find_optimal_iterations(
        self,
        target_ms: float,
        tolerance: float = calibrate.DEFAULT_TOLERANCE,
        probe_secret: str = calibrate.DEFAULT_PROBE_SECRET,
        **options: Any,
    ) -> int:
        """
        Return the iteration count that hashes in about ``target_ms`` here.
        ``self.config`` is not changed; build a new config to apply it.
        """
        if not self._calibration_lock.acquire(blocking=False):
            raise CalibrationBusy("A calibration is already running on this hasher.")
        try:
            return calibrate.find_optimal_iterations(self.config, target_ms, tolerance, probe_secret, **options)
        finally:
            self._calibration_lock.release()

    async def find_optimal_iterations_async(
        self,
        target_ms: float,
        tolerance: float = calibrate.DEFAULT_TOLERANCE,
        probe_secret: str = calibrate.DEFAULT_PROBE_SECRET,
        **options: Any,
    ) -> int:
        if not self._calibration_lock.acquire(blocking=False):
            raise CalibrationBusy("A calibration is already running on this hasher.")
        try:
            return await calibrate.find_optimal_iterations_async(
                self.config, target_ms, tolerance, probe_secret, **options
            )
        finally:
            self._calibration_lock.release()
