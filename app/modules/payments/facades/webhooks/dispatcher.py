# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/dispatcher.py

Orquestador de un webhook entrante:

    verificar firma -> parsear JSON -> normalizar -> aplicar al ledger

Traduce cada rama a un WebhookResult (código HTTP + cuerpo + etapa):

| Situación                               | HTTP                    |
|-----------------------------------------|-------------------------|
| Falta header / secreto                  | 400                     |
| Firma inválida                          | 400 Stripe / 401 PayPal |
| PayPal verify no disponible             | 500 (reintentable)      |
| JSON inválido                           | 400                     |
| Evento ignorado (skip)                  | 200 + ignored           |
| Evento aplicado                         | 200 + outcome           |
| StorageFailure / CatalogLookupFailed    | 500 (reintentable)      |

Un dispatcher por proveedor, construido en el arranque y guardado en
app.state.

Autor: Vitrina
Fecha: 2026-09-13
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import PaymentProvider
from app.modules.payments.metrics.exporters.prometheus_exporter import (
    observe_webhook_duration,
    observe_webhook_outcome,
    observe_webhook_received,
    observe_webhook_rejected,
)
from app.modules.payments.schemas import WebhookResult, WebhookSkip
from app.modules.payments.services.ledger_service import (
    CatalogLookupFailed,
    EntitlementLedger,
    StorageFailure,
)
from app.modules.payments.services.webhooks.signature_verification import (
    InvalidSignature,
    MissingCredential,
    VerificationUnavailable,
)
from app.shared.config.settings_payments import PaymentsSettings
from .normalize import WebhookPayloadError, normalize_event, parse_event_body
from .verify import WebhookVerifier

logger = logging.getLogger(__name__)

# Stripe espera {"received": true}; PayPal {"ok": true}
ACK_KEYS = {
    PaymentProvider.STRIPE: "received",
    PaymentProvider.PAYPAL: "ok",
}

INVALID_SIGNATURE_STATUS = {
    PaymentProvider.STRIPE: 400,
    PaymentProvider.PAYPAL: 401,
}


class WebhookDispatcher:
    def __init__(
        self,
        provider: PaymentProvider,
        settings: PaymentsSettings,
        ledger: EntitlementLedger,
        verifier: WebhookVerifier,
    ) -> None:
        self.provider = provider
        self.settings = settings
        self.ledger = ledger
        self.verifier = verifier
        self._ack_key = ACK_KEYS[provider]

    async def dispatch(
        self,
        session: AsyncSession,
        raw_body: bytes,
        headers: Mapping[str, str],
    ) -> WebhookResult:
        provider = self.provider.value
        observe_webhook_received(provider)
        started = time.perf_counter()
        try:
            result = await self._dispatch(session, raw_body, headers)
        finally:
            observe_webhook_duration(provider, time.perf_counter() - started)

        if result.status_code == 200:
            observe_webhook_outcome(provider, result.stage)
        return result

    # -------------------------------------------------------------------------
    # Flujo
    # -------------------------------------------------------------------------
    async def _dispatch(
        self,
        session: AsyncSession,
        raw_body: bytes,
        headers: Mapping[str, str],
    ) -> WebhookResult:
        try:
            await self.verifier.verify(raw_body, headers)
        except MissingCredential as e:
            return self._reject(400, "missing_credential", str(e))
        except InvalidSignature as e:
            return self._reject(INVALID_SIGNATURE_STATUS[self.provider], "invalid_signature", str(e))
        except VerificationUnavailable as e:
            return self._reject(500, "verification_unavailable", "signature verification unavailable", cause=e)

        try:
            data = parse_event_body(raw_body)
        except WebhookPayloadError as e:
            return self._reject(400, "invalid_payload", str(e))

        normalized = normalize_event(self.provider, data)

        if isinstance(normalized, WebhookSkip):
            logger.warning(
                "[webhook:%s] Evento ignorado type=%s id=%s reason=%s detail=%s",
                self.provider.value,
                normalized.event_type,
                normalized.event_id,
                normalized.reason.value,
                normalized.detail,
            )
            stage = f"ignored_{normalized.reason.value}"
            return WebhookResult(
                status_code=200,
                body=self._ack(ignored=normalized.reason.value),
                stage=stage,
            )

        try:
            outcome = await self.ledger.apply_event(session, normalized)
        except CatalogLookupFailed as e:
            return self._reject(500, "catalog_lookup_failed", "product lookup failed", cause=e)
        except StorageFailure as e:
            return self._reject(500, "storage_failure", "storage failure", cause=e)

        logger.info(
            "[webhook:%s] %s ref=%s -> %s",
            self.provider.value,
            normalized.event_type,
            normalized.provider_reference,
            outcome.value,
        )
        return WebhookResult(
            status_code=200,
            body=self._ack(outcome=outcome.value),
            stage=outcome.value,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _ack(self, **extra: Any) -> Dict[str, Any]:
        return {self._ack_key: True, **extra}

    def _reject(
        self,
        status_code: int,
        reason: str,
        message: str,
        cause: Exception | None = None,
    ) -> WebhookResult:
        observe_webhook_rejected(self.provider.value, reason)
        if status_code >= 500:
            logger.error("[webhook:%s] %s: %s", self.provider.value, reason, cause or message)
        else:
            logger.warning("[webhook:%s] %s: %s", self.provider.value, reason, message)
        return WebhookResult(
            status_code=status_code,
            body={"error": message, "reason": reason},
            stage=reason,
        )


__all__ = ["WebhookDispatcher", "ACK_KEYS", "INVALID_SIGNATURE_STATUS"]

# Fin del archivo backend/app/modules/payments/facades/webhooks/dispatcher.py
