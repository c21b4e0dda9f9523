import dataclasses
import logging

import pytest

from passhash import HashConfig, InvalidConfiguration, PasswordHasher


def test_defaults():
    cfg = HashConfig()
    assert cfg.default_iterations >= 10_000
    assert cfg.digest == "sha256"
    assert cfg.salt_size >= 16
    assert cfg.key_length == 32
    assert cfg.max_secret_length is None


@pytest.mark.parametrize(
    "field,value",
    [
        ("default_iterations", 0),
        ("default_iterations", -1),
        ("default_iterations", 1.5),
        ("default_iterations", True),
        ("salt_size", 0),
        ("key_length", "32"),
        ("max_secret_length", 0),
        ("digest", "md4"),
        ("digest", "SHA256"),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(InvalidConfiguration):
        HashConfig(**{field: value})


def test_frozen():
    cfg = HashConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.default_iterations = 1


def test_small_salt_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="passhash.hasher"):
        PasswordHasher(HashConfig(salt_size=8))
    assert "below the recommended" in caplog.text


def test_recommended_salt_is_quiet(caplog):
    with caplog.at_level(logging.WARNING, logger="passhash.hasher"):
        PasswordHasher(HashConfig(salt_size=16))
    assert caplog.records == []
