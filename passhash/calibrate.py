"""
Iteration-count calibration.

Searches for the PBKDF2 iteration count whose derivation time lands within
``target_ms * (1 ± tolerance)`` on this machine. Probes run on a local
trial count; the caller's configuration is left alone and the result
is returned for the caller to apply. Only the PBKDF2 call is timed; secret
checks and salt decoding add microseconds next to it.
"""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Callable, Generator, Optional

from .config import HashConfig
from .errors import CalibrationInfeasible, CalibrationTimeout, InvalidConfiguration
from .kdf import check_secret, derive_key, derive_key_async
from .random_source import random_bytes
from .salt import MAX_ITERATIONS

logger = logging.getLogger(__name__)

# Floor for a measured duration, keeps the scaling ratio finite.
MIN_MEASURED_MS = 0.01

DEFAULT_TOLERANCE = 0.1
DEFAULT_MAX_ATTEMPTS = 32
DEFAULT_PROBE_SECRET = "calibration-probe"


@dataclass
class IterationSearch:
    target_ms: float
    tolerance: float
    trial: int
    attempts: int = 0

    @property
    def margin_ms(self) -> float:
        return self.target_ms * self.tolerance

    def accept(self, measured_ms: float) -> bool:
        """
        Record one measurement of ``self.trial``. Returns True when it is within
        the margin, otherwise rescales ``self.trial`` for the next probe.
        """
        self.attempts += 1
        if abs(measured_ms - self.target_ms) <= self.margin_ms:
            return True

        ratio = max(measured_ms, MIN_MEASURED_MS) / self.target_ms
        next_trial = min(round(self.trial / ratio), MAX_ITERATIONS)
        if next_trial < 1:
            raise CalibrationInfeasible(
                f"No iteration count reaches {self.target_ms} ms; "
                f"{self.trial} iterations already took {measured_ms:.3f} ms."
            )
        self.trial = next_trial
        return False


def _check_arguments(target_ms: float, tolerance: float, max_attempts: int) -> None:
    if isinstance(target_ms, bool) or not isinstance(target_ms, (int, float)) or not target_ms > 0:
        raise InvalidConfiguration(f"Target duration must be a positive number of milliseconds, got {target_ms!r}.")
    if not 0 < tolerance < 1:
        raise InvalidConfiguration(f"Tolerance must be between 0 and 1, got {tolerance!r}.")
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise InvalidConfiguration(f"max_attempts must be a positive integer, got {max_attempts!r}.")


def _probe_inputs(config: HashConfig, probe_secret: str) -> tuple[bytes, bytes]:
    return check_secret(probe_secret), random_bytes(config.salt_size)


class _Budget:
    def __init__(self, max_attempts: int, timeout: Optional[float], clock: Callable[[], float]):
        self.max_attempts = max_attempts
        self.clock = clock
        self.deadline = None if timeout is None else clock() + timeout

    def check(self, search: IterationSearch) -> None:
        if search.attempts >= self.max_attempts:
            raise CalibrationTimeout(f"Calibration did not converge within {self.max_attempts} attempts.")
        if self.deadline is not None and self.clock() >= self.deadline:
            raise CalibrationTimeout("Calibration exceeded its time limit.")


def _search(
    config: HashConfig,
    target_ms: float,
    tolerance: float,
    max_attempts: int,
    timeout: Optional[float],
    clock: Callable[[], float],
) -> Generator[int, float, int]:
    # Yields the iteration count to derive next and receives its duration in
    # ms. The first count is the untimed warm-up; its duration is discarded.
    search = IterationSearch(target_ms=target_ms, tolerance=tolerance, trial=config.default_iterations)
    budget = _Budget(max_attempts, timeout, clock)
    yield search.trial

    while True:
        budget.check(search)
        measured_ms = yield search.trial
        logger.debug("calibration probe: %d iterations took %.3f ms", search.trial, measured_ms)
        if search.accept(measured_ms):
            logger.info(
                "calibrated %s to %d iterations for %s ms after %d probes",
                config.digest, search.trial, target_ms, search.attempts,
            )
            return search.trial


def find_optimal_iterations(
    config: HashConfig,
    target_ms: float,
    tolerance: float = DEFAULT_TOLERANCE,
    probe_secret: str = DEFAULT_PROBE_SECRET,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    timeout: Optional[float] = None,
    clock: Callable[[], float] = time.perf_counter,
) -> int:
    _check_arguments(target_ms, tolerance, max_attempts)
    secret, salt_bytes = _probe_inputs(config, probe_secret)
    steps = _search(config, target_ms, tolerance, max_attempts, timeout, clock)

    iterations = next(steps)
    try:
        while True:
            start = clock()
            derive_key(secret, salt_bytes, iterations, config.key_length, config.digest)
            iterations = steps.send((clock() - start) * 1000)
    except StopIteration as done:
        return done.value


async def find_optimal_iterations_async(
    config: HashConfig,
    target_ms: float,
    tolerance: float = DEFAULT_TOLERANCE,
    probe_secret: str = DEFAULT_PROBE_SECRET,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    timeout: Optional[float] = None,
    clock: Callable[[], float] = time.perf_counter,
) -> int:
    """Same search as find_optimal_iterations; cancellable between probes."""
    _check_arguments(target_ms, tolerance, max_attempts)
    secret, salt_bytes = _probe_inputs(config, probe_secret)
    steps = _search(config, target_ms, tolerance, max_attempts, timeout, clock)

    iterations = next(steps)
    try:
        while True:
            start = clock()
            await derive_key_async(secret, salt_bytes, iterations, config.key_length, config.digest)
            iterations = steps.send((clock() - start) * 1000)
    except StopIteration as done:
        return done.value
