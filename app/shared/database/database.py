# -*- coding: utf-8 -*-
"""
backend/app/shared/database/database.py

SQLAlchemy async (asyncpg en PostgreSQL, aiosqlite en pruebas).

Provee:
- get_engine() / get_sessionmaker(): construidos de forma perezosa desde settings
- Dependencia FastAPI: get_async_session
- context manager: session_scope()
- check_database_health()
- init_models() / dispose_engine(): usados por lifespan en dev/tests

Notas:
- El engine no se crea al importar; así los tests fijan DB_URL antes.
- SQLite en memoria usa StaticPool para compartir la misma conexión.

Autor: Vitrina
Fecha: 2026-09-03
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.shared.config import settings
from app.shared.database.base import Base

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    pysqlite emite BEGIN por su cuenta y rompe los SAVEPOINT:
    el BEGIN lo emite SQLAlchemy.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def _build_engine() -> AsyncEngine:
    url = settings.database_url
    echo = bool(settings.db_echo_sql)

    if url.startswith("sqlite"):
        logger.info("[DB] Usando SQLite (%s)", url)
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(url, echo=echo, **kwargs)
        _enable_sqlite_savepoints(engine)
        return engine

    logger.info(
        "[DB] Conectando a PostgreSQL %s:%s/%s (asyncpg, echo=%s)",
        settings.db_host, settings.db_port, settings.db_name, echo,
    )
    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
    )


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = _build_engine()
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    global _sessionmaker
    if _sessionmaker is None:
        _sessionmaker = async_sessionmaker(
            bind=get_engine(),
            expire_on_commit=False,
            class_=AsyncSession,
            autoflush=False,
        )
    return _sessionmaker


# ── Dependencia FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with get_sessionmaker()() as session:
        try:
            yield session
        except SQLAlchemyError:
            await session.rollback()
            raise
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Context manager reutilizable en scripts/tests
@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Sesión con rollback de lo no confirmado al salir; el commit es del llamador."""
    async with get_sessionmaker()() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with get_engine().connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning("[DB] Health check falló: %s", e)
        return False


async def init_models() -> None:
    """Crea las tablas registradas en Base.metadata (dev/tests; prod usa migraciones)."""
    # Registrar modelos antes de create_all
    import app.modules.catalog.models  # noqa: F401
    import app.modules.payments.models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None


__all__ = [
    "Base",
    "get_engine",
    "get_sessionmaker",
    "get_async_session",
    "session_scope",
    "check_database_health",
    "init_models",
    "dispose_engine",
]
# Fin del archivo backend/app/shared/database/database.py
