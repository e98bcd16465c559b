# -*- coding: utf-8 -*-
"""
backend/app/core/__init__.py

Fachada para componentes centrales de Vitrina:
- Configuración (settings)
- Logging
- Engine y sesiones de base de datos

Envuelve `app.shared.*` para ofrecer puntos de entrada estables.

Autor: Vitrina
Fecha: 2026-09-03
"""

from .settings import get_settings
from .logging import configure_logging
from .db import (
    Base,
    get_engine,
    get_async_session,
    session_scope,
    check_database_health,
)

__all__ = [
    "get_settings",
    "configure_logging",
    "Base",
    "get_engine",
    "get_async_session",
    "session_scope",
    "check_database_health",
]

# Fin del archivo backend/app/core/__init__.py
