# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_dev.py

Perfil de DESARROLLO local.

- Logs DEBUG legibles (formato "pretty")
- CORS limitado al frontend local (Vite / Next en 3000 y 5173)
- Lee `.env` y, si existe, `.env.local` (este último tiene prioridad)

Autor: Vitrina
Fecha: 2026-09-02
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class DevSettings(BaseAppSettings):
    python_env: str = "development"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="DEBUG", validation_alias="LOG_LEVEL"
    )
    log_format: Literal["json", "pretty", "plain"] = Field(default="pretty", validation_alias="LOG_FORMAT")

    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        validation_alias="ALLOWED_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["DevSettings"]

# Fin del archivo backend/app/shared/config/settings_dev.py
