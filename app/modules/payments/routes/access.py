# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/access.py

Consulta de acceso del usuario actual a un producto.

Endpoint:
- GET /payments/access/{product_id}

Sin token (o con token inválido) responde has_access=false.

Autor: Vitrina
Fecha: 2026-09-15
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import AuthUser, get_optional_user
from app.shared.database.database import get_async_session
from app.modules.payments.schemas import AccessResponse
from app.modules.payments.services.access_service import has_access

router = APIRouter(
    prefix="/access",
    tags=["payments:access"],
)


@router.get("/{product_id}", response_model=AccessResponse)
async def get_access(
    product_id: str,
    session: AsyncSession = Depends(get_async_session),
    user: Optional[AuthUser] = Depends(get_optional_user),
) -> AccessResponse:
    granted = await has_access(session, user.user_id if user else None, product_id)
    return AccessResponse(product_id=product_id, has_access=granted)


# Fin del archivo backend/app/modules/payments/routes/access.py
