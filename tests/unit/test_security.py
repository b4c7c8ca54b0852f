# Password hashing and access-token round trips.

from __future__ import annotations

import jwt

from app.core.config import settings
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_and_verify_password() -> None:
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed) is True
    assert verify_password("wrong horse", hashed) is False


def test_verify_against_malformed_hash_is_false() -> None:
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_token_carries_claims_and_expiry() -> None:
    token = create_access_token({"sub": "user-1", "role": "editor"})

    payload = decode_access_token(token)

    assert payload is not None
    assert payload["sub"] == "user-1"
    assert payload["role"] == "editor"
    assert payload["exp"] - payload["iat"] == settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60


def test_expired_token_decodes_to_none() -> None:
    token = create_access_token({"sub": "user-1"}, expires_minutes=-1)

    assert decode_access_token(token) is None


def test_token_signed_with_other_key_decodes_to_none() -> None:
    forged = jwt.encode({"sub": "user-1"}, "another-secret-key-of-sufficient-length", algorithm="HS256")

    assert decode_access_token(forged) is None
