import pytest

from passhash import HashConfig, PasswordHasher


@pytest.fixture
def config():
    # low cost so the suite stays fast
    return HashConfig(default_iterations=256, salt_size=16, key_length=32)


@pytest.fixture
def hasher(config):
    return PasswordHasher(config)
