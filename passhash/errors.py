from __future__ import annotations


class PassHashError(Exception):
    """Base class for every error raised by passhash."""


class InvalidConfiguration(PassHashError, ValueError):
    pass


class InvalidSecret(PassHashError, ValueError):
    pass


class InvalidHashInput(PassHashError, ValueError):
    pass


class MalformedSalt(PassHashError, ValueError):
    pass


class EntropyFailure(PassHashError, RuntimeError):
    pass


class DerivationFailure(PassHashError, RuntimeError):
    pass


class CalibrationError(PassHashError, RuntimeError):
    pass


class CalibrationInfeasible(CalibrationError):
    pass


class CalibrationTimeout(CalibrationError):
    pass


class CalibrationBusy(CalibrationError):
    pass
