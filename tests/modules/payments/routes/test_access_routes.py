# backend/tests/modules/payments/routes/test_access_routes.py
# -*- coding: utf-8 -*-
"""
GET /api/payments/access/{product_id}
"""

from app.modules.payments.enums import PaymentProvider, PurchaseStatus, PurchaseType
from app.modules.payments.models import Purchase
from app.shared.database.database import session_scope


async def _grant(user_id: str, product_id: str, status: PurchaseStatus = PurchaseStatus.PAID) -> None:
    async with session_scope() as session:
        session.add(
            Purchase(
                provider=PaymentProvider.PAYPAL,
                provider_reference=f"CAP-{user_id}-{product_id}",
                user_id=user_id,
                product_id=product_id,
                purchase_type=PurchaseType.ONEOFF,
                amount_cents=100,
                status=status,
            )
        )
        await session.commit()


async def test_anonymous_has_no_access(async_client):
    await _grant("user-1", "prod-1")
    resp = await async_client.get("/api/payments/access/prod-1")
    assert resp.status_code == 200
    assert resp.json() == {"product_id": "prod-1", "has_access": False}


async def test_invalid_token_is_treated_as_anonymous(async_client):
    await _grant("user-1", "prod-1")
    resp = await async_client.get("/api/payments/access/prod-1", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 200
    assert resp.json()["has_access"] is False


async def test_expired_token_is_treated_as_anonymous(async_client, make_token):
    await _grant("user-1", "prod-1")
    token = make_token("user-1", expires_in=-60)
    resp = await async_client.get("/api/payments/access/prod-1", headers={"Authorization": f"Bearer {token}"})
    assert resp.json()["has_access"] is False


async def test_owner_has_access(async_client, auth_headers):
    await _grant("user-1", "prod-1")
    resp = await async_client.get("/api/payments/access/prod-1", headers=auth_headers("user-1"))
    assert resp.json() == {"product_id": "prod-1", "has_access": True}


async def test_refunded_purchase_has_no_access(async_client, auth_headers):
    await _grant("user-1", "prod-1", PurchaseStatus.REFUNDED)
    resp = await async_client.get("/api/payments/access/prod-1", headers=auth_headers("user-1"))
    assert resp.json()["has_access"] is False

# Fin del archivo backend/tests/modules/payments/routes/test_access_routes.py
