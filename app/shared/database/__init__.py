# -*- coding: utf-8 -*-
"""
backend/app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Autor: Vitrina
Fecha: 2026-09-03
"""

from __future__ import annotations

from .database import (
    get_engine,
    get_sessionmaker,
    get_async_session,
    session_scope,
    check_database_health,
    init_models,
    dispose_engine,
)
from .base import Base, NAMING_CONVENTION, as_db_enum
from .repository import BaseRepository

__all__ = [
    "get_engine",
    "get_sessionmaker",
    "Base",
    "NAMING_CONVENTION",
    "as_db_enum",
    "BaseRepository",
    "get_async_session",
    "session_scope",
    "check_database_health",
    "init_models",
    "dispose_engine",
]

# Fin del archivo backend/app/shared/database/__init__.py
