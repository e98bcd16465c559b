# -*- coding: utf-8 -*-
"""
backend/app/core/settings.py

Fachada de configuración: reexpone la carga por entorno de
`app.shared.config` bajo `app.core`.

Autor: Vitrina
Fecha: 2026-09-03
"""

from app.shared.config.config_loader import get_settings
from app.shared.config.settings_base import BaseAppSettings

__all__ = ["get_settings", "BaseAppSettings"]

# Fin del archivo backend/app/core/settings.py
