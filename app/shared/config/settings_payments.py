# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_payments.py

Configuración de pagos para Vitrina.

Descripción:
    Centraliza credenciales de proveedores (Stripe, PayPal), secretos de
    webhooks, tolerancias y timeouts. Se instancia una sola vez en el
    arranque (composition root) y se inyecta a dispatchers y proveedores.

Autor: Vitrina
Fecha: 2026-09-03
"""

from __future__ import annotations

from typing import Literal, Optional
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PAYPAL_API_BASES = {
    "live": "https://api-m.paypal.com",
    "sandbox": "https://api-m.sandbox.paypal.com",
}


class PaymentsSettings(BaseSettings):
    """Configuración del sistema de pagos."""

    # =========================================================================
    # STRIPE
    # =========================================================================

    stripe_secret_key: Optional[str] = Field(
        default=None,
        description="Stripe secret key (sk_live_... o sk_test_...)"
    )

    stripe_webhook_secret: Optional[str] = Field(
        default=None,
        description="Stripe webhook signing secret (whsec_...)"
    )

    stripe_webhook_tolerance_seconds: int = Field(
        default=300,
        description="Tolerancia para validación de timestamp de webhooks Stripe (5 minutos)"
    )

    stripe_currency: str = Field(
        default="usd",
        description="Moneda para sesiones de checkout de pago único"
    )

    # =========================================================================
    # PAYPAL
    # =========================================================================

    paypal_client_id: Optional[str] = Field(
        default=None,
        description="PayPal client ID"
    )

    paypal_client_secret: Optional[str] = Field(
        default=None,
        description="PayPal client secret"
    )

    paypal_mode: Literal["sandbox", "live"] = Field(
        default="sandbox",
        validation_alias=AliasChoices("PAYPAL_MODE", "PAYPAL_ENV"),
        description="Modo de PayPal: 'sandbox' o 'live'"
    )

    paypal_webhook_id: Optional[str] = Field(
        default=None,
        description="PayPal webhook ID para validación de firmas"
    )

    paypal_currency: str = Field(
        default="USD",
        description="Moneda para órdenes de PayPal"
    )

    paypal_http_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout total para llamadas HTTP a PayPal"
    )

    paypal_http_connect_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout de conexión para llamadas HTTP a PayPal"
    )

    # =========================================================================
    # INGESTA DE CONTENIDO
    # =========================================================================

    ingest_hmac_secret: Optional[str] = Field(
        default=None,
        description="Secreto HMAC compartido con el pipeline de ingesta"
    )

    # =========================================================================
    # LEDGER / INTEGRIDAD
    # =========================================================================

    price_tolerance_cents: int = Field(
        default=1,
        description="Diferencia tolerada entre monto cobrado y precio de catálogo"
    )

    # =========================================================================
    # REDIRECTS DE CHECKOUT
    # =========================================================================

    app_url: str = Field(
        default="http://localhost:3000",
        description="URL base del frontend para success/cancel de checkout"
    )

    # =========================================================================
    # SEGURIDAD
    # =========================================================================

    allow_insecure_webhooks: bool = Field(
        default=False,
        validation_alias=AliasChoices("PAYMENTS_ALLOW_INSECURE_WEBHOOKS", "ALLOW_INSECURE_WEBHOOKS"),
        description="Permite webhooks sin validación de firma (SOLO DESARROLLO)"
    )

    @field_validator("app_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def paypal_api_base(self) -> str:
        return PAYPAL_API_BASES[self.paypal_mode]

    @property
    def stripe_success_url(self) -> str:
        return f"{self.app_url}/market/thanks?provider=stripe"

    @property
    def paypal_return_url(self) -> str:
        return f"{self.app_url}/market/thanks?provider=paypal"

    @property
    def cancel_url(self) -> str:
        return f"{self.app_url}/market/cancel"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Singleton global (solo lo usa el composition root)
_payments_settings: Optional[PaymentsSettings] = None


def get_payments_settings() -> PaymentsSettings:
    """
    Obtiene la instancia global de configuración de pagos.

    Returns:
        PaymentsSettings: Configuración de pagos
    """
    global _payments_settings
    if _payments_settings is None:
        _payments_settings = PaymentsSettings()
    return _payments_settings


def reset_payments_settings() -> None:
    """Descarta el singleton (tests que cambian variables de entorno)."""
    global _payments_settings
    _payments_settings = None


__all__ = [
    "PaymentsSettings",
    "PAYPAL_API_BASES",
    "get_payments_settings",
    "reset_payments_settings",
]
# Fin del archivo backend/app/shared/config/settings_payments.py
