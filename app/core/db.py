# -*- coding: utf-8 -*-
"""
backend/app/core/db.py

Fachada para la capa de acceso a datos (SQLAlchemy async).
Los módulos de dominio dependen de esta capa, no de `app.shared.database`.

Autor: Vitrina
Fecha: 2026-09-03
"""

from app.shared.database.database import (
    Base,
    get_engine,
    get_async_session,
    session_scope,
    check_database_health,
)

__all__ = [
    "Base",
    "get_engine",
    "get_async_session",
    "session_scope",
    "check_database_health",
]

# Fin del archivo backend/app/core/db.py
