# backend/tests/modules/payments/services/test_ledger_service.py
# -*- coding: utf-8 -*-
"""
Ledger de compras sobre SQLite en memoria: idempotencia, transiciones
condicionales, estados absorbentes, eventos atrasados y verificación
de precio.
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.modules.payments.enums import (
    LedgerOutcome,
    PaymentProvider,
    PurchaseEventKind,
    PurchaseStatus,
    PurchaseType,
)
from app.modules.payments.metrics.exporters.prometheus_exporter import sample_value
from app.modules.payments.models import Purchase
from app.modules.payments.repositories import PurchaseRepository
from app.modules.payments.schemas import PurchaseEvent
from app.modules.payments.services.ledger_service import (
    CatalogLookupFailed,
    EntitlementLedger,
    StorageFailure,
    initial_status,
)

T0 = datetime(2026, 9, 1, 10, 0, tzinfo=timezone.utc)


def purchase_event(
    reference: str = "cs_1",
    *,
    provider: PaymentProvider = PaymentProvider.STRIPE,
    purchase_type: PurchaseType = PurchaseType.ONEOFF,
    amount_cents: int | None = 1900,
    product_id: str = "prod-1",
    user_id: str = "user-1",
    payment_reference: str | None = None,
    occurred_at: datetime = T0,
) -> PurchaseEvent:
    return PurchaseEvent(
        kind=PurchaseEventKind.PURCHASE_COMPLETED,
        provider=provider,
        provider_reference=reference,
        user_id=user_id,
        product_id=product_id,
        purchase_type=purchase_type,
        amount_cents=amount_cents,
        payment_reference=payment_reference,
        occurred_at=occurred_at,
    )


def lifecycle_event(
    kind: PurchaseEventKind,
    reference: str,
    *,
    provider: PaymentProvider = PaymentProvider.STRIPE,
    occurred_at: datetime | None = None,
) -> PurchaseEvent:
    return PurchaseEvent(kind=kind, provider=provider, provider_reference=reference, occurred_at=occurred_at)


async def _status(session, reference: str) -> PurchaseStatus:
    stmt = select(Purchase.status).where(Purchase.provider_reference == reference)
    return (await session.execute(stmt)).scalar_one()


async def _count(session) -> int:
    return len((await session.execute(select(Purchase.id))).all())


@pytest.fixture
def ledger() -> EntitlementLedger:
    return EntitlementLedger(price_tolerance_cents=1)


def test_initial_status():
    assert initial_status(PurchaseType.ONEOFF) is PurchaseStatus.PAID
    assert initial_status(PurchaseType.SUBSCRIPTION) is PurchaseStatus.ACTIVE


class TestRecordPurchase:
    async def test_records_then_deduplicates(self, db_session, ledger, seed_product):
        await seed_product("prod-1")
        event = purchase_event(payment_reference="pi_1")

        assert await ledger.apply_event(db_session, event) is LedgerOutcome.RECORDED
        assert await ledger.apply_event(db_session, event) is LedgerOutcome.ALREADY_RECORDED
        assert await _count(db_session) == 1

        row = (await db_session.execute(select(Purchase))).scalar_one()
        assert row.status is PurchaseStatus.PAID
        assert row.amount_cents == 1900
        assert row.payment_reference == "pi_1"
        assert row.user_id == "user-1"

    async def test_subscription_starts_active(self, db_session, ledger, seed_product):
        await seed_product("prod-s", is_series=True)
        event = purchase_event("sub_1", product_id="prod-s", purchase_type=PurchaseType.SUBSCRIPTION, amount_cents=500)
        assert await ledger.apply_event(db_session, event) is LedgerOutcome.RECORDED
        assert await _status(db_session, "sub_1") is PurchaseStatus.ACTIVE

    async def test_same_reference_other_provider_is_distinct(self, db_session, ledger, seed_product):
        await seed_product("prod-1")
        await ledger.apply_event(db_session, purchase_event("REF-1"))
        outcome = await ledger.apply_event(db_session, purchase_event("REF-1", provider=PaymentProvider.PAYPAL))
        assert outcome is LedgerOutcome.RECORDED
        assert await _count(db_session) == 2

    async def test_unique_violation_is_already_recorded(self, db_session, seed_product):
        """Carrera: la pre-lectura no ve la fila pero el INSERT choca con la UNIQUE."""
        await seed_product("prod-1")

        class BlindRepository(PurchaseRepository):
            async def get_by_reference(self, session, provider, provider_reference):
                return None

        await EntitlementLedger().apply_event(db_session, purchase_event())
        racing = EntitlementLedger(purchase_repo=BlindRepository())
        assert await racing.apply_event(db_session, purchase_event()) is LedgerOutcome.ALREADY_RECORDED
        assert await _count(db_session) == 1

    async def test_unknown_product_raises(self, db_session, ledger):
        with pytest.raises(CatalogLookupFailed):
            await ledger.apply_event(db_session, purchase_event(product_id="missing"))
        assert await _count(db_session) == 0

    async def test_price_mismatch_is_recorded_with_warning(self, db_session, ledger, seed_product, caplog):
        await seed_product("prod-1", price_cents=1900)
        before = sample_value("payments_amount_mismatch_total", {"provider": "stripe"})

        with caplog.at_level(logging.WARNING):
            outcome = await ledger.apply_event(db_session, purchase_event(amount_cents=100))

        assert outcome is LedgerOutcome.RECORDED
        assert sample_value("payments_amount_mismatch_total", {"provider": "stripe"}) == before + 1
        warning = next(r for r in caplog.records if r.getMessage() == "pricing_integrity_warning")
        assert warning.expected_cents == 1900
        assert warning.actual_cents == 100

    async def test_price_within_tolerance(self, db_session, ledger, seed_product):
        await seed_product("prod-1", price_cents=1900)
        before = sample_value("payments_amount_mismatch_total", {"provider": "stripe"})
        await ledger.apply_event(db_session, purchase_event(amount_cents=1901))
        assert sample_value("payments_amount_mismatch_total", {"provider": "stripe"}) == before

    async def test_subscription_amount_not_checked(self, db_session, ledger, seed_product):
        await seed_product("prod-s", price_cents=9900, is_series=True)
        before = sample_value("payments_amount_mismatch_total", {"provider": "stripe"})
        event = purchase_event("sub_1", product_id="prod-s", purchase_type=PurchaseType.SUBSCRIPTION, amount_cents=500)
        await ledger.apply_event(db_session, event)
        assert sample_value("payments_amount_mismatch_total", {"provider": "stripe"}) == before

    async def test_storage_error_is_wrapped(self, db_session, seed_product):
        await seed_product("prod-1")

        class BrokenRepository(PurchaseRepository):
            async def get_by_reference(self, session, provider, provider_reference):
                raise OperationalError("SELECT", {}, Exception("database is locked"))

        with pytest.raises(StorageFailure):
            await EntitlementLedger(purchase_repo=BrokenRepository()).apply_event(db_session, purchase_event())


class TestTransitions:
    async def _subscription(self, session, ledger, seed_product, reference="sub_1"):
        await seed_product("prod-s", is_series=True)
        event = purchase_event(reference, product_id="prod-s", purchase_type=PurchaseType.SUBSCRIPTION, amount_cents=500)
        assert await ledger.apply_event(session, event) is LedgerOutcome.RECORDED

    async def test_renewal_keeps_active(self, db_session, ledger, seed_product):
        await self._subscription(db_session, ledger, seed_product)
        renewal = lifecycle_event(PurchaseEventKind.SUBSCRIPTION_RENEWED, "sub_1", occurred_at=T0 + timedelta(days=30))
        assert await ledger.apply_event(db_session, renewal) is LedgerOutcome.UNCHANGED
        assert await _status(db_session, "sub_1") is PurchaseStatus.ACTIVE

    async def test_renewal_without_purchase(self, db_session, ledger):
        renewal = lifecycle_event(PurchaseEventKind.SUBSCRIPTION_RENEWED, "sub_unknown")
        assert await ledger.apply_event(db_session, renewal) is LedgerOutcome.NOT_FOUND

    async def test_cancel_then_cancel_again(self, db_session, ledger, seed_product):
        await self._subscription(db_session, ledger, seed_product)
        cancel = lifecycle_event(PurchaseEventKind.SUBSCRIPTION_CANCELED, "sub_1", occurred_at=T0 + timedelta(days=3))
        assert await ledger.apply_event(db_session, cancel) is LedgerOutcome.UPDATED
        assert await _status(db_session, "sub_1") is PurchaseStatus.CANCELED
        assert await ledger.apply_event(db_session, cancel) is LedgerOutcome.UNCHANGED

    async def test_renewal_after_cancel_is_discarded(self, db_session, ledger, seed_product):
        await self._subscription(db_session, ledger, seed_product)
        await ledger.apply_event(
            db_session,
            lifecycle_event(PurchaseEventKind.SUBSCRIPTION_CANCELED, "sub_1", occurred_at=T0 + timedelta(days=3)),
        )
        renewal = lifecycle_event(PurchaseEventKind.SUBSCRIPTION_RENEWED, "sub_1", occurred_at=T0 + timedelta(days=30))
        assert await ledger.apply_event(db_session, renewal) is LedgerOutcome.DISCARDED
        assert await _status(db_session, "sub_1") is PurchaseStatus.CANCELED

    async def test_stale_cancel_is_discarded(self, db_session, ledger, seed_product):
        await self._subscription(db_session, ledger, seed_product)
        stale = lifecycle_event(PurchaseEventKind.SUBSCRIPTION_CANCELED, "sub_1", occurred_at=T0 - timedelta(hours=1))
        assert await ledger.apply_event(db_session, stale) is LedgerOutcome.DISCARDED
        assert await _status(db_session, "sub_1") is PurchaseStatus.ACTIVE

    async def test_refund_matches_payment_reference(self, db_session, ledger, seed_product):
        await seed_product("prod-1")
        await ledger.apply_event(db_session, purchase_event("cs_1", payment_reference="pi_1"))
        refund = lifecycle_event(PurchaseEventKind.REFUNDED, "pi_1", occurred_at=T0 + timedelta(days=1))
        assert await ledger.apply_event(db_session, refund) is LedgerOutcome.UPDATED
        assert await _status(db_session, "cs_1") is PurchaseStatus.REFUNDED
        assert await ledger.apply_event(db_session, refund) is LedgerOutcome.UNCHANGED

    async def test_refund_of_canceled_subscription(self, db_session, ledger, seed_product):
        await self._subscription(db_session, ledger, seed_product)
        await ledger.apply_event(db_session, lifecycle_event(PurchaseEventKind.SUBSCRIPTION_CANCELED, "sub_1"))
        refund = lifecycle_event(PurchaseEventKind.REFUNDED, "sub_1")
        assert await ledger.apply_event(db_session, refund) is LedgerOutcome.UPDATED
        assert await _status(db_session, "sub_1") is PurchaseStatus.REFUNDED

    async def test_refunded_is_absorbing(self, db_session, ledger, seed_product):
        await self._subscription(db_session, ledger, seed_product)
        await ledger.apply_event(db_session, lifecycle_event(PurchaseEventKind.REFUNDED, "sub_1"))
        cancel = lifecycle_event(PurchaseEventKind.SUBSCRIPTION_CANCELED, "sub_1")
        assert await ledger.apply_event(db_session, cancel) is LedgerOutcome.DISCARDED
        assert await _status(db_session, "sub_1") is PurchaseStatus.REFUNDED

    async def test_refund_without_purchase(self, db_session, ledger):
        refund = lifecycle_event(PurchaseEventKind.REFUNDED, "pi_unknown")
        assert await ledger.apply_event(db_session, refund) is LedgerOutcome.NOT_FOUND

    async def test_renewal_ignores_oneoff_rows(self, db_session, ledger, seed_product):
        await seed_product("prod-1")
        await ledger.apply_event(db_session, purchase_event("REF-1"))
        renewal = lifecycle_event(PurchaseEventKind.SUBSCRIPTION_RENEWED, "REF-1")
        assert await ledger.apply_event(db_session, renewal) is LedgerOutcome.DISCARDED
        assert await _status(db_session, "REF-1") is PurchaseStatus.PAID

    async def test_cancel_ignores_oneoff_rows(self, db_session, ledger, seed_product):
        await seed_product("prod-1")
        await ledger.apply_event(db_session, purchase_event("REF-1"))
        cancel = lifecycle_event(PurchaseEventKind.SUBSCRIPTION_CANCELED, "REF-1", occurred_at=T0 + timedelta(days=1))
        assert await ledger.apply_event(db_session, cancel) is LedgerOutcome.DISCARDED
        assert await _status(db_session, "REF-1") is PurchaseStatus.PAID

    async def test_late_purchase_after_refund_keeps_refunded(self, db_session, ledger, seed_product):
        await seed_product("prod-1")
        await ledger.apply_event(db_session, purchase_event("REF-1", payment_reference="pi_1"))
        refund = lifecycle_event(PurchaseEventKind.REFUNDED, "REF-1", occurred_at=T0 + timedelta(days=1))
        assert await ledger.apply_event(db_session, refund) is LedgerOutcome.UPDATED

        late = purchase_event("REF-1", payment_reference="pi_1", occurred_at=T0 - timedelta(minutes=5))
        assert await ledger.apply_event(db_session, late) is LedgerOutcome.ALREADY_RECORDED
        assert await _status(db_session, "REF-1") is PurchaseStatus.REFUNDED
        assert await _count(db_session) == 1

# Fin del archivo backend/tests/modules/payments/services/test_ledger_service.py
