# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_prod.py

Overrides para entorno de PRODUCCIÓN usando Pydantic v2.
Lee solo variables de entorno / secret stores, logging JSON y
rechaza configuraciones inseguras de webhooks.

Autor: Vitrina
Fecha: 2026-09-02
"""

import os
from typing import Literal

from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class ProdSettings(BaseAppSettings):
    python_env: Literal["development", "test", "production"] = "production"
    environment: str = "production"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "pretty", "plain"] = "json"

    def _security_and_payments_checks(self) -> None:
        super()._security_and_payments_checks()
        insecure = os.getenv("PAYMENTS_ALLOW_INSECURE_WEBHOOKS", "false").strip().lower()
        if insecure in ("1", "true", "yes", "on"):
            raise ValueError("PAYMENTS_ALLOW_INSECURE_WEBHOOKS no puede habilitarse en producción")

    model_config = SettingsConfigDict(
        env_file=None,  # No leemos .env en producción
        extra="ignore",
    )


__all__ = ["ProdSettings"]
# Fin del archivo backend/app/shared/config/settings_prod.py
