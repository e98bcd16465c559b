# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/normalize.py

Normalización de payloads de webhooks de Stripe y PayPal.

Convierte cada evento a un PurchaseEvent (intención de negocio) o a un
WebhookSkip con su razón. Nunca lanza por datos de negocio incompletos:
un custom_id o un monto ilegible se reportan como SkipReason.MALFORMED.

Autor: Vitrina
Fecha: 2026-09-10
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from app.modules.payments.enums import (
    PaymentProvider,
    PayPalEventType,
    PurchaseEventKind,
    PurchaseType,
    SkipReason,
    StripeEventType,
)
from app.modules.payments.schemas import PurchaseEvent, WebhookSkip
from .constants import (
    PAYPAL_CUSTOM_ID_PARTS,
    PAYPAL_CUSTOM_ID_SEPARATOR,
    STRIPE_PAID_CHECKOUT_STATUSES,
    STRIPE_PRODUCT_KEYS,
    STRIPE_TYPE_KEYS,
    STRIPE_USER_KEYS,
)

logger = logging.getLogger(__name__)

NormalizationResult = Union[PurchaseEvent, WebhookSkip]


class WebhookPayloadError(ValueError):
    """El body verificado no es un objeto JSON."""


# =============================================================================
# HELPERS
# =============================================================================

def parse_event_body(raw_body: bytes) -> Dict[str, Any]:
    """
    Parsea el body crudo (ya verificado) a dict.

    Raises:
        WebhookPayloadError: JSON inválido o no es un objeto.
    """
    try:
        data = json.loads(raw_body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise WebhookPayloadError(f"Invalid JSON payload: {e}") from e

    if not isinstance(data, dict):
        raise WebhookPayloadError("Payload must be a JSON object")
    return data


def _object_id(value: Any) -> Optional[str]:
    """Stripe expande algunos campos: acepta "sub_123" o {"id": "sub_123"}."""
    if isinstance(value, str) and value:
        return value
    if isinstance(value, Mapping):
        inner = value.get("id")
        if isinstance(inner, str) and inner:
            return inner
    return None


def _first(mapping: Mapping[str, Any], keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = mapping.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def parse_decimal_amount(value: Any) -> Optional[int]:
    """
    Convierte un monto decimal en unidades mayores a centavos (ROUND_HALF_UP).

    "19.00" -> 1900, "0.005" -> 1. Devuelve None si no es un número finito
    no negativo.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _epoch_to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _iso_to_datetime(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_purchase_type(value: Optional[str]) -> Optional[PurchaseType]:
    if value is None:
        return None
    try:
        return PurchaseType(value.lower())
    except ValueError:
        return None


# =============================================================================
# STRIPE
# =============================================================================

def _stripe_skip(reason: SkipReason, data: Mapping[str, Any], detail: str) -> WebhookSkip:
    return WebhookSkip(
        reason=reason,
        provider=PaymentProvider.STRIPE,
        event_type=str(data.get("type") or "") or None,
        event_id=str(data.get("id") or "") or None,
        detail=detail,
    )


def _stripe_checkout(data: Mapping[str, Any], obj: Mapping[str, Any], common: Dict[str, Any]) -> NormalizationResult:
    payment_status = obj.get("payment_status")
    if payment_status not in STRIPE_PAID_CHECKOUT_STATUSES:
        return _stripe_skip(SkipReason.INCOMPLETE, data, f"payment_status={payment_status}")

    session_id = _object_id(obj.get("id"))
    if not session_id:
        return _stripe_skip(SkipReason.MALFORMED, data, "checkout session without id")

    metadata = obj.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        return _stripe_skip(SkipReason.MALFORMED, data, "metadata is not an object")

    product_id = _first(metadata, STRIPE_PRODUCT_KEYS)
    user_id = _first(metadata, STRIPE_USER_KEYS)
    if not product_id or not user_id:
        return _stripe_skip(SkipReason.MALFORMED, data, "missing productId/userId metadata")

    raw_type = _first(metadata, STRIPE_TYPE_KEYS)
    if raw_type is None:
        purchase_type = PurchaseType.SUBSCRIPTION if obj.get("mode") == "subscription" else PurchaseType.ONEOFF
    else:
        purchase_type = _parse_purchase_type(raw_type)
        if purchase_type is None:
            return _stripe_skip(SkipReason.MALFORMED, data, f"unknown purchase type {raw_type!r}")

    amount_total = obj.get("amount_total")
    if amount_total is not None and (isinstance(amount_total, bool) or not isinstance(amount_total, int)):
        return _stripe_skip(SkipReason.MALFORMED, data, "amount_total is not an integer")

    if purchase_type is PurchaseType.SUBSCRIPTION:
        reference = _object_id(obj.get("subscription")) or session_id
    else:
        reference = session_id

    return PurchaseEvent(
        kind=PurchaseEventKind.PURCHASE_COMPLETED,
        provider_reference=reference,
        user_id=user_id,
        product_id=product_id,
        purchase_type=purchase_type,
        amount_cents=amount_total,
        payment_reference=_object_id(obj.get("payment_intent")),
        checkout_reference=session_id,
        **common,
    )


def _stripe_invoice_subscription(obj: Mapping[str, Any]) -> Optional[str]:
    subscription = _object_id(obj.get("subscription"))
    if subscription:
        return subscription
    # API 2025+: parent.subscription_details.subscription
    parent = obj.get("parent") or {}
    details = parent.get("subscription_details") if isinstance(parent, Mapping) else None
    if isinstance(details, Mapping):
        return _object_id(details.get("subscription"))
    return None


def normalize_stripe_event(data: Mapping[str, Any]) -> NormalizationResult:
    """
    Normaliza un evento de Stripe.

    Eventos soportados:
    - checkout.session.completed / checkout.session.async_payment_succeeded
    - invoice.payment_succeeded / invoice.paid
    - customer.subscription.deleted
    - charge.refunded
    """
    event_type = StripeEventType.parse(data.get("type"))
    if event_type is StripeEventType.UNHANDLED:
        return _stripe_skip(SkipReason.UNHANDLED, data, "event type not handled")

    payload = data.get("data")
    obj = payload.get("object") if isinstance(payload, Mapping) else None
    if not isinstance(obj, Mapping):
        return _stripe_skip(SkipReason.MALFORMED, data, "missing data.object")

    created = data.get("created")
    common: Dict[str, Any] = {
        "provider": PaymentProvider.STRIPE,
        "event_id": str(data.get("id") or "") or None,
        "event_type": event_type.value,
        "raw_timestamp": None if created is None else str(created),
        "occurred_at": _epoch_to_datetime(created),
    }

    logger.debug("Normalizando evento Stripe: %s (ID: %s)", event_type.value, common["event_id"])

    match event_type:
        case StripeEventType.CHECKOUT_SESSION_COMPLETED | StripeEventType.CHECKOUT_SESSION_ASYNC_PAYMENT_SUCCEEDED:
            return _stripe_checkout(data, obj, common)

        case StripeEventType.INVOICE_PAYMENT_SUCCEEDED | StripeEventType.INVOICE_PAID:
            subscription_id = _stripe_invoice_subscription(obj)
            if not subscription_id:
                return _stripe_skip(SkipReason.MALFORMED, data, "invoice without subscription")
            amount_paid = obj.get("amount_paid")
            return PurchaseEvent(
                kind=PurchaseEventKind.SUBSCRIPTION_RENEWED,
                provider_reference=subscription_id,
                amount_cents=amount_paid if isinstance(amount_paid, int) and not isinstance(amount_paid, bool) else None,
                **common,
            )

        case StripeEventType.CUSTOMER_SUBSCRIPTION_DELETED:
            subscription_id = _object_id(obj.get("id"))
            if not subscription_id:
                return _stripe_skip(SkipReason.MALFORMED, data, "subscription without id")
            return PurchaseEvent(
                kind=PurchaseEventKind.SUBSCRIPTION_CANCELED,
                provider_reference=subscription_id,
                **common,
            )

        case StripeEventType.CHARGE_REFUNDED:
            payment_intent = _object_id(obj.get("payment_intent"))
            if not payment_intent:
                return _stripe_skip(SkipReason.MALFORMED, data, "charge without payment_intent")
            return PurchaseEvent(
                kind=PurchaseEventKind.REFUNDED,
                provider_reference=payment_intent,
                payment_reference=payment_intent,
                **common,
            )

        case StripeEventType.UNHANDLED:
            return _stripe_skip(SkipReason.UNHANDLED, data, "event type not handled")


# =============================================================================
# PAYPAL
# =============================================================================

def _paypal_skip(reason: SkipReason, data: Mapping[str, Any], detail: str) -> WebhookSkip:
    return WebhookSkip(
        reason=reason,
        provider=PaymentProvider.PAYPAL,
        event_type=str(data.get("event_type") or "") or None,
        event_id=str(data.get("id") or "") or None,
        detail=detail,
    )


def parse_custom_id(custom_id: Any) -> Optional[Tuple[PurchaseType, str, str]]:
    """
    Parsea "type:productId:userId".

    Devuelve None si el número de campos no es 3, hay campos vacíos o el
    tipo no es oneoff/subscription.
    """
    if not isinstance(custom_id, str):
        return None
    parts = [p.strip() for p in custom_id.split(PAYPAL_CUSTOM_ID_SEPARATOR)]
    if len(parts) != PAYPAL_CUSTOM_ID_PARTS or not all(parts):
        return None
    purchase_type = _parse_purchase_type(parts[0])
    if purchase_type is None:
        return None
    return purchase_type, parts[1], parts[2]


def _amount_value(resource: Mapping[str, Any], *path: str) -> Any:
    node: Any = resource
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def _capture_id_from_links(resource: Mapping[str, Any]) -> Optional[str]:
    """En PAYMENT.CAPTURE.REFUNDED el capture original es el link rel="up"."""
    links = resource.get("links")
    if not isinstance(links, list):
        return None
    for link in links:
        if isinstance(link, Mapping) and link.get("rel") == "up" and isinstance(link.get("href"), str):
            segment = urlparse(link["href"]).path.rstrip("/").rsplit("/", 1)[-1]
            if segment:
                return segment
    return None


def _paypal_purchase(
    data: Mapping[str, Any],
    resource: Mapping[str, Any],
    common: Dict[str, Any],
    *,
    reference: Optional[str],
    amount_raw: Any,
    force_subscription: bool = False,
) -> NormalizationResult:
    if not reference:
        return _paypal_skip(SkipReason.MALFORMED, data, "resource without id")

    custom_id = resource.get("custom_id") or resource.get("custom")
    parsed = parse_custom_id(custom_id)
    if parsed is None:
        return _paypal_skip(SkipReason.MALFORMED, data, f"invalid custom_id {custom_id!r}")
    purchase_type, product_id, user_id = parsed
    if force_subscription:
        purchase_type = PurchaseType.SUBSCRIPTION

    if amount_raw is None and force_subscription:
        amount_cents: Optional[int] = 0
    else:
        amount_cents = parse_decimal_amount(amount_raw)
        if amount_cents is None:
            return _paypal_skip(SkipReason.MALFORMED, data, f"unparseable amount {amount_raw!r}")

    return PurchaseEvent(
        kind=PurchaseEventKind.PURCHASE_COMPLETED,
        provider_reference=reference,
        user_id=user_id,
        product_id=product_id,
        purchase_type=purchase_type,
        amount_cents=amount_cents,
        **common,
    )


def normalize_paypal_event(data: Mapping[str, Any]) -> NormalizationResult:
    """
    Normaliza un evento de PayPal.

    Eventos soportados:
    - PAYMENT.CAPTURE.COMPLETED / PAYMENT.SALE.COMPLETED
    - BILLING.SUBSCRIPTION.ACTIVATED / BILLING.SUBSCRIPTION.CANCELLED
    - PAYMENT.SALE.REFUNDED / PAYMENT.CAPTURE.REFUNDED
    """
    event_type = PayPalEventType.parse(data.get("event_type"))
    if event_type is PayPalEventType.UNHANDLED:
        return _paypal_skip(SkipReason.UNHANDLED, data, "event type not handled")

    resource = data.get("resource")
    if not isinstance(resource, Mapping):
        return _paypal_skip(SkipReason.MALFORMED, data, "missing resource")

    create_time = data.get("create_time") or resource.get("create_time")
    common: Dict[str, Any] = {
        "provider": PaymentProvider.PAYPAL,
        "event_id": str(data.get("id") or "") or None,
        "event_type": event_type.value,
        "raw_timestamp": create_time if isinstance(create_time, str) else None,
        "occurred_at": _iso_to_datetime(create_time),
    }
    resource_id = _object_id(resource.get("id"))

    logger.debug("Normalizando evento PayPal: %s (ID: %s)", event_type.value, common["event_id"])

    match event_type:
        case PayPalEventType.PAYMENT_CAPTURE_COMPLETED:
            return _paypal_purchase(
                data, resource, common,
                reference=resource_id,
                amount_raw=_amount_value(resource, "amount", "value"),
            )

        case PayPalEventType.PAYMENT_SALE_COMPLETED:
            agreement_id = _object_id(resource.get("billing_agreement_id"))
            if agreement_id:
                return PurchaseEvent(
                    kind=PurchaseEventKind.SUBSCRIPTION_RENEWED,
                    provider_reference=agreement_id,
                    amount_cents=parse_decimal_amount(_amount_value(resource, "amount", "total")),
                    **common,
                )
            return _paypal_purchase(
                data, resource, common,
                reference=resource_id,
                amount_raw=_amount_value(resource, "amount", "total"),
            )

        case PayPalEventType.BILLING_SUBSCRIPTION_ACTIVATED:
            return _paypal_purchase(
                data, resource, common,
                reference=resource_id,
                amount_raw=_amount_value(resource, "billing_info", "last_payment", "amount", "value"),
                force_subscription=True,
            )

        case PayPalEventType.BILLING_SUBSCRIPTION_CANCELLED:
            if not resource_id:
                return _paypal_skip(SkipReason.MALFORMED, data, "subscription without id")
            return PurchaseEvent(
                kind=PurchaseEventKind.SUBSCRIPTION_CANCELED,
                provider_reference=resource_id,
                **common,
            )

        case PayPalEventType.PAYMENT_SALE_REFUNDED:
            sale_id = _object_id(resource.get("sale_id"))
            if not sale_id:
                return _paypal_skip(SkipReason.MALFORMED, data, "refund without sale_id")
            return PurchaseEvent(
                kind=PurchaseEventKind.REFUNDED,
                provider_reference=sale_id,
                **common,
            )

        case PayPalEventType.PAYMENT_CAPTURE_REFUNDED:
            capture_id = _capture_id_from_links(resource)
            if not capture_id:
                return _paypal_skip(SkipReason.MALFORMED, data, "refund without capture link")
            return PurchaseEvent(
                kind=PurchaseEventKind.REFUNDED,
                provider_reference=capture_id,
                **common,
            )

        case PayPalEventType.UNHANDLED:
            return _paypal_skip(SkipReason.UNHANDLED, data, "event type not handled")


def normalize_event(provider: PaymentProvider, raw_event: Mapping[str, Any]) -> NormalizationResult:
    """Punto de entrada unificado por proveedor."""
    match provider:
        case PaymentProvider.STRIPE:
            return normalize_stripe_event(raw_event)
        case PaymentProvider.PAYPAL:
            return normalize_paypal_event(raw_event)
    raise ValueError(f"Unsupported provider: {provider}")


__all__ = [
    "NormalizationResult",
    "WebhookPayloadError",
    "parse_event_body",
    "parse_decimal_amount",
    "parse_custom_id",
    "normalize_stripe_event",
    "normalize_paypal_event",
    "normalize_event",
]

# Fin del archivo backend/app/modules/payments/facades/webhooks/normalize.py
