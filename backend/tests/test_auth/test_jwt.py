"""Unit tests for JWT token creation, decoding, and validation."""

import uuid
from datetime import timedelta

import pytest
from jose import JWTError, jwt

from app.auth.jwt import (
    ACCESS,
    REFRESH,
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_token,
)

USER_ID = str(uuid.uuid4())


class TestAccessAndRefreshTokens:
    def test_access_token_claims(self):
        payload = decode_token(create_access_token({"sub": USER_ID}))
        assert payload["type"] == ACCESS
        assert payload["sub"] == USER_ID
        assert "iat" in payload
        assert payload["exp"] > payload["iat"]

    def test_refresh_token_claims(self):
        payload = decode_token(create_refresh_token({"sub": USER_ID}))
        assert payload["type"] == REFRESH
        assert payload["sub"] == USER_ID

    def test_refresh_outlives_access(self):
        access = decode_token(create_access_token({"sub": USER_ID}))
        refresh = decode_token(create_refresh_token({"sub": USER_ID}))
        assert refresh["exp"] > access["exp"]

    def test_custom_expiry_delta(self):
        token = create_access_token({"sub": USER_ID}, expires_delta=timedelta(hours=1))
        assert decode_token(token)["sub"] == USER_ID


class TestDecodeToken:
    def test_expired_token_raises(self):
        token = create_access_token({"sub": USER_ID}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_token(token)

    def test_malformed_token_raises(self):
        with pytest.raises(JWTError):
            decode_token("not.a.valid.token")

    def test_empty_string_raises(self):
        with pytest.raises(JWTError):
            decode_token("")

    def test_foreign_secret_raises(self):
        token = jwt.encode({"sub": USER_ID, "type": ACCESS}, "some-other-secret", algorithm="HS256")
        with pytest.raises(JWTError):
            decode_token(token)


def test_token_pair():
    pair = create_token_pair(USER_ID)
    assert pair["token_type"] == "bearer"
    assert decode_token(pair["access_token"])["type"] == ACCESS
    assert decode_token(pair["refresh_token"])["type"] == REFRESH
