"""
Test cases for token signing and verification.
"""
from datetime import timedelta

import jwt as pyjwt
import pytest

from neoflix.auth.jwt import ALGORITHM, InvalidToken, sign, verify

SECRET = "super-secret-jwt-token-for-testing-only"


def test_round_trip():
    claims = {"sub": "user-123", "userId": "user-123", "name": "Alice"}
    token = sign("user-123", claims, SECRET)
    payload = verify(token, SECRET)

    assert payload["sub"] == "user-123"
    for key, value in claims.items():
        assert payload[key] == value
    assert payload["exp"] > payload["iat"]


def test_token_is_url_safe():
    token = sign("user-123", {"name": "Ünïcødé / name"}, SECRET)
    assert all(c.isalnum() or c in "-_." for c in token)


def test_custom_expiry():
    token = sign("user-123", {}, SECRET, expires_delta=timedelta(hours=2))
    payload = verify(token, SECRET)
    assert payload["exp"] - payload["iat"] == 2 * 60 * 60


def test_wrong_secret_raises():
    token = sign("user-123", {}, SECRET)
    with pytest.raises(InvalidToken):
        verify(token, "another-secret-of-sufficient-length!")


def test_expired_token_raises():
    token = sign("user-123", {}, SECRET, expires_delta=timedelta(seconds=-60))
    with pytest.raises(InvalidToken):
        verify(token, SECRET)


def test_malformed_token_raises():
    with pytest.raises(InvalidToken):
        verify("invalid.token.here", SECRET)
    with pytest.raises(InvalidToken):
        verify("", SECRET)


def test_missing_required_claims_raises():
    token = pyjwt.encode({"name": "Alice"}, SECRET, algorithm=ALGORITHM)
    with pytest.raises(InvalidToken):
        verify(token, SECRET)


def test_blank_secret_is_not_a_token_error():
    with pytest.raises(ValueError):
        sign("user-123", {}, "")
    with pytest.raises(ValueError):
        verify("whatever", "")


def test_zero_expiry_is_respected():
    token = sign("user-123", {}, SECRET, expires_delta=timedelta(0))
    payload = pyjwt.decode(token, SECRET, algorithms=[ALGORITHM], options={"verify_exp": False})
    assert payload["exp"] == payload["iat"]
