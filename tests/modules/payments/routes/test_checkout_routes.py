# backend/tests/modules/payments/routes/test_checkout_routes.py
# -*- coding: utf-8 -*-
"""
POST /api/payments/checkout/{provider}: autenticación, validación de
parámetros y creación de sesión (Stripe parcheado, PayPal simulado).
"""

import json
from types import SimpleNamespace
from unittest.mock import patch

import stripe

from app.modules.payments.metrics.exporters.prometheus_exporter import sample_value

URL = "/api/payments/checkout"


async def test_requires_bearer_token(async_client):
    resp = await async_client.post(f"{URL}/stripe", params={"productId": "prod-1"})
    assert resp.status_code == 401


async def test_invalid_token_is_unauthorized(async_client):
    resp = await async_client.post(
        f"{URL}/stripe", params={"productId": "prod-1"}, headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401


async def test_missing_product_id(async_client, auth_headers):
    resp = await async_client.post(f"{URL}/stripe", headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json()["detail"] == {"error": "Product ID required"}


async def test_unknown_provider(async_client, auth_headers):
    resp = await async_client.post(f"{URL}/bitcoin", params={"productId": "prod-1"}, headers=auth_headers())
    assert resp.status_code == 400


async def test_unknown_product(async_client, auth_headers):
    resp = await async_client.post(f"{URL}/stripe", params={"productId": "ghost"}, headers=auth_headers())
    assert resp.status_code == 404


async def test_subscription_without_stripe_price(async_client, auth_headers, seed_product):
    await seed_product("prod-s", is_series=True, stripe_price_id=None)
    resp = await async_client.post(
        f"{URL}/stripe", params={"productId": "prod-s", "type": "subscription"}, headers=auth_headers()
    )
    assert resp.status_code == 400


async def test_stripe_checkout(async_client, auth_headers, seed_product):
    await seed_product("prod-1", price_cents=1900)
    fake = SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")
    before = sample_value("payments_checkout_started_total", {"provider": "stripe", "purchase_type": "oneoff"})

    with patch("stripe.checkout.Session.create", return_value=fake) as create:
        resp = await async_client.post(f"{URL}/stripe", params={"productId": "prod-1"}, headers=auth_headers("user-7"))

    assert resp.status_code == 200
    assert resp.json() == {
        "url": "https://checkout.stripe.com/c/pay/cs_test_1",
        "provider": "stripe",
        "purchase_type": "oneoff",
        "provider_session_id": "cs_test_1",
    }
    kwargs = create.call_args.kwargs
    assert kwargs["metadata"] == {"productId": "prod-1", "userId": "user-7", "type": "oneoff"}
    assert kwargs["customer_email"] == "reader@vitrina.test"
    assert sample_value(
        "payments_checkout_started_total", {"provider": "stripe", "purchase_type": "oneoff"}
    ) == before + 1


async def test_stripe_failure_is_bad_gateway(async_client, auth_headers, seed_product):
    await seed_product("prod-1")
    with patch("stripe.checkout.Session.create", side_effect=stripe.StripeError("card declined")):
        resp = await async_client.post(f"{URL}/stripe", params={"productId": "prod-1"}, headers=auth_headers())
    assert resp.status_code == 502


async def test_paypal_subscription_checkout(async_client, auth_headers, seed_product, paypal_stub):
    await seed_product("prod-s", is_series=True, series_price_cents=500)
    resp = await async_client.post(
        f"{URL}/paypal", params={"productId": "prod-s", "type": "subscription"}, headers=auth_headers()
    )
    assert resp.status_code == 200
    assert resp.json()["url"] == "https://www.sandbox.paypal.com/checkoutnow?token=ORDER-1"

    order = json.loads(paypal_stub.requests_to("/v2/checkout/orders")[0].content)
    unit = order["purchase_units"][0]
    assert unit["custom_id"] == "subscription:prod-s:user-1"
    assert unit["amount"]["value"] == "5.00"


async def test_paypal_subscription_without_series_price(async_client, auth_headers, seed_product, paypal_stub):
    await seed_product("prod-1", is_series=False)
    resp = await async_client.post(
        f"{URL}/paypal", params={"productId": "prod-1", "type": "subscription"}, headers=auth_headers()
    )
    assert resp.status_code == 400
    assert paypal_stub.requests_to("/v2/checkout/orders") == []


async def test_paypal_failure_is_bad_gateway(async_client, auth_headers, seed_product, paypal_stub):
    await seed_product("prod-1")
    paypal_stub.order_status_code = 500
    resp = await async_client.post(f"{URL}/paypal", params={"productId": "prod-1"}, headers=auth_headers())
    assert resp.status_code == 502


async def test_checkout_does_not_write_purchases(async_client, auth_headers, seed_product):
    from sqlalchemy import func, select

    from app.modules.payments.models import Purchase
    from app.shared.database.database import session_scope

    await seed_product("prod-1")
    fake = SimpleNamespace(id="cs_test_2", url="https://checkout.stripe.com/c/pay/cs_test_2")
    with patch("stripe.checkout.Session.create", return_value=fake):
        await async_client.post(f"{URL}/stripe", params={"productId": "prod-1"}, headers=auth_headers())

    async with session_scope() as session:
        assert (await session.execute(select(func.count(Purchase.id)))).scalar_one() == 0

# Fin del archivo backend/tests/modules/payments/routes/test_checkout_routes.py
