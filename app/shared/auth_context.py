# -*- coding: utf-8 -*-
"""
backend/app/shared/auth_context.py

Contexto de autenticación a partir de un bearer JWT emitido externamente.

El backend no gestiona sesiones ni login: solo decodifica el token
(python-jose) para obtener el usuario actual (claim 'sub' y, si viene,
'email').

Dependencias FastAPI:
- get_optional_user: None si no hay token o es inválido (acceso anónimo)
- get_current_user: 401 si no hay usuario

Autor: Vitrina
Fecha: 2026-09-14
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.shared.config import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class TokenDecodeError(Exception):
    """Error al decodificar/validar un token JWT."""


@dataclass(frozen=True)
class AuthUser:
    user_id: str
    email: Optional[str] = None


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decodifica y valida un JWT. Lanza TokenDecodeError si es inválido/expirado."""
    options = {"verify_aud": bool(settings.jwt_audience)}
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as e:
        raise TokenDecodeError("Token inválido o expirado") from e

    sub = payload.get("sub")
    if sub is None or not str(sub).strip():
        raise TokenDecodeError("Token sin 'sub'")
    return payload


def user_from_token(token: str) -> AuthUser:
    payload = decode_access_token(token)
    email = payload.get("email")
    return AuthUser(user_id=str(payload["sub"]), email=str(email) if email else None)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[AuthUser]:
    if credentials is None or not credentials.credentials:
        return None
    try:
        return user_from_token(credentials.credentials)
    except TokenDecodeError as e:
        logger.info("Bearer token ignorado: %s", e)
        return None


async def get_current_user(
    user: Optional[AuthUser] = Depends(get_optional_user),
) -> AuthUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "message": "Valid bearer token required"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


__all__ = [
    "AuthUser",
    "TokenDecodeError",
    "decode_access_token",
    "user_from_token",
    "get_optional_user",
    "get_current_user",
]

# Fin del archivo backend/app/shared/auth_context.py
