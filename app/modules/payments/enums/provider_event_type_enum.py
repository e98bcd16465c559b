# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/provider_event_type_enum.py

Tipos de evento de webhook que el normalizador reconoce, por proveedor.
Cualquier otro tipo se resuelve como StripeEventType.UNHANDLED /
PayPalEventType.UNHANDLED mediante `parse()`.

Autor: Vitrina
Fecha: 2026-09-04
"""

from enum import StrEnum


class StripeEventType(StrEnum):
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    CHECKOUT_SESSION_ASYNC_PAYMENT_SUCCEEDED = "checkout.session.async_payment_succeeded"
    INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
    INVOICE_PAID = "invoice.paid"
    CUSTOMER_SUBSCRIPTION_DELETED = "customer.subscription.deleted"
    CHARGE_REFUNDED = "charge.refunded"
    UNHANDLED = "__unhandled__"

    @classmethod
    def parse(cls, value: object) -> "StripeEventType":
        try:
            return cls(value)
        except ValueError:
            return cls.UNHANDLED


class PayPalEventType(StrEnum):
    PAYMENT_CAPTURE_COMPLETED = "PAYMENT.CAPTURE.COMPLETED"
    PAYMENT_SALE_COMPLETED = "PAYMENT.SALE.COMPLETED"
    BILLING_SUBSCRIPTION_ACTIVATED = "BILLING.SUBSCRIPTION.ACTIVATED"
    BILLING_SUBSCRIPTION_CANCELLED = "BILLING.SUBSCRIPTION.CANCELLED"
    PAYMENT_SALE_REFUNDED = "PAYMENT.SALE.REFUNDED"
    PAYMENT_CAPTURE_REFUNDED = "PAYMENT.CAPTURE.REFUNDED"
    UNHANDLED = "__unhandled__"

    @classmethod
    def parse(cls, value: object) -> "PayPalEventType":
        try:
            return cls(value)
        except ValueError:
            return cls.UNHANDLED


__all__ = ["StripeEventType", "PayPalEventType"]

# Fin del archivo backend/app/modules/payments/enums/provider_event_type_enum.py
