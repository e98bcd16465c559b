# backend/tests/modules/payments/routes/test_webhook_routes.py
# -*- coding: utf-8 -*-
"""
Webhooks de punta a punta a través de la app (firma real, BD en memoria):

1. Compra única Stripe -> acceso concedido; reentrega idempotente
2. Suscripción Stripe -> renovación -> cancelación -> sin acceso
3. Reembolso Stripe por payment_intent -> sin acceso
4. PayPal capture -> acceso; firma rechazada -> 401 sin escribir
5. PayPal suscripción activada -> cancelada -> sin acceso; custom_id inválido -> ignorado
"""

import time

from sqlalchemy import select

from app.modules.payments.models import Purchase
from app.modules.payments.enums import PurchaseStatus
from app.shared.database.database import session_scope

STRIPE_URL = "/api/payments/webhooks/stripe"
PAYPAL_URL = "/api/payments/webhooks/paypal"

PAYPAL_HEADERS = {
    "PAYPAL-TRANSMISSION-ID": "tx-1",
    "PAYPAL-TRANSMISSION-SIG": "sig",
    "PAYPAL-TRANSMISSION-TIME": "2026-09-01T10:00:00Z",
    "PAYPAL-CERT-URL": "https://api.paypal.com/cert.pem",
    "PAYPAL-AUTH-ALGO": "SHA256withRSA",
    "Content-Type": "application/json",
}


def stripe_event(event_type: str, obj: dict, *, event_id: str = "evt_1", created: int | None = None) -> dict:
    return {
        "id": event_id,
        "type": event_type,
        "created": int(time.time()) if created is None else created,
        "data": {"object": obj},
    }


async def _purchases() -> list[Purchase]:
    async with session_scope() as session:
        return list((await session.execute(select(Purchase).order_by(Purchase.id))).scalars().all())


async def _access(client, auth_headers, product_id: str, user: str = "user-1") -> bool:
    resp = await client.get(f"/api/payments/access/{product_id}", headers=auth_headers(user))
    assert resp.status_code == 200
    return resp.json()["has_access"]


async def _post_stripe(client, sign_stripe, dump_json, payload: dict):
    body = dump_json(payload)
    return await client.post(
        STRIPE_URL,
        content=body,
        headers={"stripe-signature": sign_stripe(body), "Content-Type": "application/json"},
    )


class TestStripeWebhooks:
    async def test_oneoff_purchase_grants_access(self, async_client, seed_product, sign_stripe, dump_json, auth_headers):
        await seed_product("prod-1", price_cents=1900)
        event = stripe_event(
            "checkout.session.completed",
            {
                "id": "cs_1",
                "payment_status": "paid",
                "mode": "payment",
                "amount_total": 1900,
                "payment_intent": "pi_1",
                "metadata": {"productId": "prod-1", "userId": "user-1", "type": "oneoff"},
            },
        )
        assert await _access(async_client, auth_headers, "prod-1") is False

        resp = await _post_stripe(async_client, sign_stripe, dump_json, event)
        assert resp.status_code == 200
        assert resp.json() == {"received": True, "outcome": "recorded"}
        assert await _access(async_client, auth_headers, "prod-1") is True
        assert await _access(async_client, auth_headers, "prod-1", user="user-2") is False

        again = await _post_stripe(async_client, sign_stripe, dump_json, event)
        assert again.status_code == 200
        assert again.json()["outcome"] == "already_recorded"
        assert len(await _purchases()) == 1

    async def test_subscription_lifecycle(self, async_client, seed_product, sign_stripe, dump_json, auth_headers):
        await seed_product("prod-s", is_series=True, stripe_price_id="price_1")
        now = int(time.time())
        checkout = stripe_event(
            "checkout.session.completed",
            {
                "id": "cs_sub",
                "payment_status": "paid",
                "mode": "subscription",
                "subscription": "sub_1",
                "amount_total": 500,
                "metadata": {"productId": "prod-s", "userId": "user-1", "type": "subscription"},
            },
            created=now - 120,
        )
        renewal = stripe_event(
            "invoice.payment_succeeded",
            {"id": "in_1", "subscription": "sub_1", "amount_paid": 500},
            event_id="evt_2",
            created=now - 60,
        )
        cancel = stripe_event(
            "customer.subscription.deleted",
            {"id": "sub_1", "status": "canceled"},
            event_id="evt_3",
            created=now,
        )

        assert (await _post_stripe(async_client, sign_stripe, dump_json, checkout)).json()["outcome"] == "recorded"
        assert await _access(async_client, auth_headers, "prod-s") is True

        assert (await _post_stripe(async_client, sign_stripe, dump_json, renewal)).json()["outcome"] == "unchanged"
        assert await _access(async_client, auth_headers, "prod-s") is True

        assert (await _post_stripe(async_client, sign_stripe, dump_json, cancel)).json()["outcome"] == "updated"
        assert await _access(async_client, auth_headers, "prod-s") is False

        # Renovación tardía sobre estado absorbente
        late = stripe_event(
            "invoice.paid", {"id": "in_2", "subscription": "sub_1"}, event_id="evt_4", created=now + 30
        )
        assert (await _post_stripe(async_client, sign_stripe, dump_json, late)).json()["outcome"] == "discarded"

        rows = await _purchases()
        assert [r.status for r in rows] == [PurchaseStatus.CANCELED]
        assert rows[0].checkout_reference == "cs_sub"

    async def test_refund_by_payment_intent_revokes_access(
        self, async_client, seed_product, sign_stripe, dump_json, auth_headers
    ):
        await seed_product("prod-1")
        checkout = stripe_event(
            "checkout.session.completed",
            {
                "id": "cs_1",
                "payment_status": "paid",
                "amount_total": 1900,
                "payment_intent": "pi_9",
                "metadata": {"productId": "prod-1", "userId": "user-1", "type": "oneoff"},
            },
        )
        refund = stripe_event("charge.refunded", {"id": "ch_1", "payment_intent": "pi_9"}, event_id="evt_r")

        await _post_stripe(async_client, sign_stripe, dump_json, checkout)
        resp = await _post_stripe(async_client, sign_stripe, dump_json, refund)
        assert resp.json() == {"received": True, "outcome": "updated"}
        assert await _access(async_client, auth_headers, "prod-1") is False

    async def test_unknown_product_is_retryable(self, async_client, sign_stripe, dump_json):
        event = stripe_event(
            "checkout.session.completed",
            {
                "id": "cs_x",
                "payment_status": "paid",
                "amount_total": 100,
                "metadata": {"productId": "ghost", "userId": "user-1", "type": "oneoff"},
            },
        )
        resp = await _post_stripe(async_client, sign_stripe, dump_json, event)
        assert resp.status_code == 500
        assert await _purchases() == []

    async def test_invalid_signature_writes_nothing(self, async_client, seed_product, sign_stripe, dump_json):
        await seed_product("prod-1")
        body = dump_json(
            stripe_event(
                "checkout.session.completed",
                {
                    "id": "cs_1",
                    "payment_status": "paid",
                    "metadata": {"productId": "prod-1", "userId": "user-1"},
                },
            )
        )
        resp = await async_client.post(
            STRIPE_URL, content=body, headers={"stripe-signature": sign_stripe(body, secret="whsec_wrong")}
        )
        assert resp.status_code == 400
        assert resp.json()["reason"] == "invalid_signature"
        assert await _purchases() == []

    async def test_missing_signature_header(self, async_client):
        resp = await async_client.post(STRIPE_URL, content=b"{}")
        assert resp.status_code == 400
        assert resp.json()["reason"] == "missing_credential"

    async def test_unhandled_event_is_acknowledged(self, async_client, sign_stripe, dump_json):
        resp = await _post_stripe(async_client, sign_stripe, dump_json, stripe_event("customer.created", {"id": "cus_1"}))
        assert resp.status_code == 200
        assert resp.json() == {"received": True, "ignored": "unhandled"}

    async def test_preflight(self, async_client):
        resp = await async_client.options(STRIPE_URL)
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"


class TestPayPalWebhooks:
    CAPTURE = {
        "id": "WH-1",
        "event_type": "PAYMENT.CAPTURE.COMPLETED",
        "create_time": "2026-09-01T10:00:00Z",
        "resource": {"id": "CAP-1", "custom_id": "oneoff:prod-1:user-1", "amount": {"value": "19.00"}},
    }

    async def test_capture_grants_access(self, async_client, seed_product, dump_json, auth_headers, paypal_stub):
        await seed_product("prod-1", price_cents=1900)
        resp = await async_client.post(PAYPAL_URL, content=dump_json(self.CAPTURE), headers=PAYPAL_HEADERS)
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "outcome": "recorded"}
        assert await _access(async_client, auth_headers, "prod-1") is True

        verify = paypal_stub.requests_to("/v1/notifications/verify-webhook-signature")
        assert len(verify) == 1

    async def test_rejected_signature(self, async_client, seed_product, dump_json, paypal_stub):
        await seed_product("prod-1")
        paypal_stub.verification_status = "FAILURE"
        resp = await async_client.post(PAYPAL_URL, content=dump_json(self.CAPTURE), headers=PAYPAL_HEADERS)
        assert resp.status_code == 401
        assert await _purchases() == []

    async def test_verification_outage_is_retryable(self, async_client, dump_json, paypal_stub):
        paypal_stub.verify_status_code = 503
        resp = await async_client.post(PAYPAL_URL, content=dump_json(self.CAPTURE), headers=PAYPAL_HEADERS)
        assert resp.status_code == 500
        assert resp.json()["reason"] == "verification_unavailable"

    async def test_missing_transmission_headers(self, async_client, dump_json):
        resp = await async_client.post(PAYPAL_URL, content=dump_json(self.CAPTURE))
        assert resp.status_code == 400

    async def test_sale_refund(self, async_client, seed_product, dump_json, auth_headers):
        await seed_product("prod-1", price_cents=450)
        sale = {
            "id": "WH-2",
            "event_type": "PAYMENT.SALE.COMPLETED",
            "create_time": "2026-09-01T10:00:00Z",
            "resource": {"id": "SALE-1", "custom": "oneoff:prod-1:user-1", "amount": {"total": "4.50"}},
        }
        refund = {
            "id": "WH-3",
            "event_type": "PAYMENT.SALE.REFUNDED",
            "create_time": "2026-09-02T10:00:00Z",
            "resource": {"id": "REF-1", "sale_id": "SALE-1"},
        }
        await async_client.post(PAYPAL_URL, content=dump_json(sale), headers=PAYPAL_HEADERS)
        resp = await async_client.post(PAYPAL_URL, content=dump_json(refund), headers=PAYPAL_HEADERS)
        assert resp.json() == {"ok": True, "outcome": "updated"}
        assert await _access(async_client, auth_headers, "prod-1") is False

    async def test_subscription_activation_then_cancellation(self, async_client, seed_product, dump_json, auth_headers):
        await seed_product("p2", is_series=True, series_price_cents=500)
        activated = {
            "id": "WH-10",
            "event_type": "BILLING.SUBSCRIPTION.ACTIVATED",
            "create_time": "2026-09-01T10:00:00Z",
            "resource": {"id": "I-SUB-1", "custom_id": "subscription:p2:u2"},
        }
        cancelled = {
            "id": "WH-11",
            "event_type": "BILLING.SUBSCRIPTION.CANCELLED",
            "create_time": "2026-09-20T10:00:00Z",
            "resource": {"id": "I-SUB-1"},
        }

        resp = await async_client.post(PAYPAL_URL, content=dump_json(activated), headers=PAYPAL_HEADERS)
        assert resp.json() == {"ok": True, "outcome": "recorded"}
        [row] = await _purchases()
        assert (row.provider_reference, row.status, row.purchase_type.value) == ("I-SUB-1", PurchaseStatus.ACTIVE, "subscription")
        assert await _access(async_client, auth_headers, "p2", user="u2") is True

        resp = await async_client.post(PAYPAL_URL, content=dump_json(cancelled), headers=PAYPAL_HEADERS)
        assert resp.json() == {"ok": True, "outcome": "updated"}
        [row] = await _purchases()
        assert row.status is PurchaseStatus.CANCELED
        assert await _access(async_client, auth_headers, "p2", user="u2") is False

    async def test_malformed_custom_id_is_acknowledged_without_writing(self, async_client, seed_product, dump_json):
        await seed_product("prod-1", price_cents=1900)
        event = {
            "id": "WH-12",
            "event_type": "PAYMENT.CAPTURE.COMPLETED",
            "create_time": "2026-09-01T10:00:00Z",
            "resource": {"id": "CAP-9", "custom_id": "badformat", "amount": {"value": "19.00"}},
        }
        resp = await async_client.post(PAYPAL_URL, content=dump_json(event), headers=PAYPAL_HEADERS)
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "ignored": "malformed"}
        assert await _purchases() == []

    async def test_capture_refund_with_invalid_links_is_malformed(self, async_client, dump_json):
        event = {
            "id": "WH-13",
            "event_type": "PAYMENT.CAPTURE.REFUNDED",
            "create_time": "2026-09-02T10:00:00Z",
            "resource": {"id": "RF-1", "links": 7},
        }
        resp = await async_client.post(PAYPAL_URL, content=dump_json(event), headers=PAYPAL_HEADERS)
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "ignored": "malformed"}

# Fin del archivo backend/tests/modules/payments/routes/test_webhook_routes.py
