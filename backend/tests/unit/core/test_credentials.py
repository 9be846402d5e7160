# backend/tests/unit/core/test_credentials.py
from datetime import timedelta

import jwt
import pytest

from agora.auth import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)
from agora.core.config import settings
from agora.core.exceptions import InvalidTokenException


def test_password_hash_round_trip():
    hashed = get_password_hash("s3cret!")

    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_verify_password_tolerates_malformed_hash():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_token_carries_subject_and_expiry():
    token = create_access_token({"sub": "01HZZZZZZZZZZZZZZZZZZZZZZA"})

    payload = decode_access_token(token)
    assert payload["sub"] == "01HZZZZZZZZZZZZZZZZZZZZZZA"
    assert "exp" in payload
    assert verify_token(token) == "01HZZZZZZZZZZZZZZZZZZZZZZA"


@pytest.mark.parametrize(
    "token",
    [
        "not-a-token",
        create_access_token({"sub": "someone"}, expires_delta=timedelta(minutes=-1)),
        create_access_token({"role": "no-subject"}),
        jwt.encode({"sub": "someone"}, "some-other-secret", algorithm="HS256"),
    ],
)
def test_verify_token_rejects(token):
    with pytest.raises(InvalidTokenException):
        verify_token(token)


def test_tokens_use_configured_algorithm():
    token = create_access_token({"sub": "x"})

    assert jwt.get_unverified_header(token)["alg"] == settings.algorithm
