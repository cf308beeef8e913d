# tests/test_security.py
"""Tests for password hashing and session token generation."""

import pytest

from forum_core.core import security
from forum_core.core.errors import HashingFailure


def test_hash_and_verify_roundtrip() -> None:
    digest = security.hash_password("correct horse", rounds=4)

    assert digest != "correct horse"
    assert security.verify_password(digest, "correct horse")
    assert not security.verify_password(digest, "wrong horse")


def test_hashes_are_salted() -> None:
    assert security.hash_password("same", rounds=4) != security.hash_password("same", rounds=4)


def test_verify_rejects_malformed_digest() -> None:
    assert security.verify_password("not-a-bcrypt-digest", "whatever") is False


def test_invalid_cost_factor_raises_hashing_failure() -> None:
    with pytest.raises(HashingFailure):
        security.hash_password("secret", rounds=99)


def test_long_passwords_are_truncated_consistently() -> None:
    long_password = "x" * 100
    digest = security.hash_password(long_password, rounds=4)

    assert security.verify_password(digest, long_password)
    assert security.verify_password(digest, "x" * 72)


def test_session_tokens_are_unique_and_url_safe() -> None:
    tokens = {security.generate_session_token() for _ in range(200)}

    assert len(tokens) == 200
    for token in tokens:
        assert len(token) >= 22
        assert all(ch.isalnum() or ch in "-_" for ch in token)
