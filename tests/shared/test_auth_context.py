# backend/tests/shared/test_auth_context.py
# -*- coding: utf-8 -*-
"""
Decodificación del bearer JWT y dependencias de usuario.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from app.shared.auth_context import (
    AuthUser,
    TokenDecodeError,
    decode_access_token,
    get_current_user,
    get_optional_user,
    user_from_token,
)


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_user_from_token(make_token):
    user = user_from_token(make_token("user-42", email="a@b.test"))
    assert user == AuthUser(user_id="user-42", email="a@b.test")


def test_token_without_email(make_token):
    assert user_from_token(make_token("user-42", email=None)).email is None


def test_wrong_secret_rejected():
    token = jwt.encode({"sub": "user-1"}, "another-secret-with-enough-length-000", algorithm="HS256")
    with pytest.raises(TokenDecodeError):
        decode_access_token(token)


def test_expired_token_rejected(make_token):
    with pytest.raises(TokenDecodeError):
        decode_access_token(make_token(expires_in=-10))


def test_token_without_sub_rejected():
    from app.shared.config.config_loader import get_settings

    token = jwt.encode({"email": "a@b.test"}, get_settings().jwt_secret, algorithm="HS256")
    with pytest.raises(TokenDecodeError):
        decode_access_token(token)


async def test_optional_user_none_without_credentials():
    assert await get_optional_user(None) is None


async def test_optional_user_ignores_invalid_token():
    assert await get_optional_user(_credentials("garbage")) is None


async def test_optional_user_decodes(make_token):
    user = await get_optional_user(_credentials(make_token("user-9")))
    assert user.user_id == "user-9"


async def test_current_user_requires_user():
    with pytest.raises(HTTPException) as exc:
        await get_current_user(None)
    assert exc.value.status_code == 401


async def test_audience_checked_when_configured(monkeypatch):
    from app.shared.config.config_loader import get_settings

    monkeypatch.setenv("JWT_AUDIENCE", "vitrina-web")
    get_settings.cache_clear()
    secret = get_settings().jwt_secret
    exp = datetime.now(timezone.utc) + timedelta(minutes=5)

    wrong = jwt.encode({"sub": "user-1", "aud": "otra-app", "exp": exp}, secret, algorithm="HS256")
    with pytest.raises(TokenDecodeError):
        decode_access_token(wrong)

    claims = {
        "sub": "user-1",
        "aud": "vitrina-web",
        "exp": exp,
    }
    token = jwt.encode(claims, secret, algorithm="HS256")
    assert decode_access_token(token)["sub"] == "user-1"

# Fin del archivo backend/tests/shared/test_auth_context.py
