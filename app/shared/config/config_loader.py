# -*- coding: utf-8 -*-
"""
backend/app/shared/config/config_loader.py

Selección del perfil de configuración (dev / test / prod).

El perfil sale de PYTHON_ENV; si no está definido se usa ENVIRONMENT.
Se aceptan alias cortos ("prod", "dev", "local", "testing"). La instancia
se cachea y las validaciones de seguridad corren una sola vez.

Autor: Vitrina
Fecha: 2026-09-02
"""

import logging
import os
from functools import lru_cache
from typing import Dict, Type

from .settings_base import BaseAppSettings
from .settings_dev import DevSettings
from .settings_testing import EnvTestingSettings
from .settings_prod import ProdSettings

logger = logging.getLogger(__name__)

_PROFILES: Dict[str, Type[BaseAppSettings]] = {
    "development": DevSettings,
    "test": EnvTestingSettings,
    "production": ProdSettings,
}

_ALIASES = {
    "dev": "development",
    "local": "development",
    "testing": "test",
    "prod": "production",
}


def resolve_env_name() -> str:
    """Nombre canónico del entorno activo."""
    raw = os.getenv("PYTHON_ENV") or os.getenv("ENVIRONMENT") or "development"
    name = raw.strip().lower()
    return _ALIASES.get(name, name if name in _PROFILES else "development")


@lru_cache(maxsize=1)
def get_settings() -> BaseAppSettings:
    """
    Devuelve la configuración del perfil activo.

    Raises:
        ValueError: si las validaciones de seguridad fallan
    """
    env = resolve_env_name()
    settings = _PROFILES[env](python_env=env)
    settings._security_and_payments_checks()
    logger.debug("settings_loaded profile=%s app=%s", env, settings.app_name)
    return settings


__all__ = ["get_settings", "resolve_env_name"]

# Fin del archivo backend/app/shared/config/config_loader.py
