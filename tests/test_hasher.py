import asyncio
import base64
import re

import pytest

from passhash import HashConfig, InvalidConfiguration, InvalidSecret, PasswordHasher, decode_salt


def test_end_to_end():
    hasher = PasswordHasher(HashConfig(default_iterations=256, salt_size=128))

    salt = hasher.generate_salt()
    assert re.fullmatch(r"100\.sha256\.[A-Za-z0-9+/]{171}=", salt)

    hashed, salt = hasher.hash("password")
    assert len(base64.b64decode(hashed)) == hasher.config.key_length
    assert hasher.verify(salt, hashed, "password") is True
    assert hasher.verify(salt, hashed, "wrong") is False


def test_default_config():
    assert PasswordHasher().config == HashConfig()


def test_rehash_with_same_salt(hasher):
    first = hasher.hash("password")
    second = hasher.hash("password", first.salt)
    assert second == first


def test_generate_salt_minimum(hasher):
    with pytest.raises(InvalidConfiguration):
        hasher.generate_salt(hasher.config.default_iterations - 1)
    assert decode_salt(hasher.generate_salt(hasher.config.default_iterations)).iterations == 256


def test_secret_length_limit():
    hasher = PasswordHasher(HashConfig(default_iterations=256, max_secret_length=8))
    with pytest.raises(InvalidSecret):
        hasher.hash("123456789")
    hashed, salt = hasher.hash("12345678")
    assert hasher.verify(salt, hashed, "12345678")


def test_weak_hash_and_random(hasher):
    assert hasher.weak_hash(["value"]) == hasher.weak_hash(["value"])
    assert hasher.weak_hash(["a"]) != hasher.weak_hash(["b"])
    assert len(hasher.random_bytes(10)) == 10


def test_async_surface(hasher):
    async def scenario():
        salt = await hasher.generate_salt_async()
        hashed, same_salt = await hasher.hash_async("password", salt)
        assert same_salt == salt
        ok = await hasher.verify_async(salt, hashed, "password")
        bad = await hasher.verify_async(salt, hashed, "password!")
        noise = await hasher.random_bytes_async(12)
        return salt, hashed, ok, bad, noise

    salt, hashed, ok, bad, noise = asyncio.run(scenario())
    assert ok is True
    assert bad is False
    assert len(noise) == 12
    assert hasher.hash("password", salt).hash == hashed


def test_concurrent_hashes_are_independent(hasher):
    async def scenario():
        return await asyncio.gather(*(hasher.hash_async(f"secret-{i}") for i in range(8)))

    results = asyncio.run(scenario())
    for i, (hashed, salt) in enumerate(results):
        assert hasher.verify(salt, hashed, f"secret-{i}")
        assert not hasher.verify(salt, hashed, f"secret-{i + 1}")
