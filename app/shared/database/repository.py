# -*- coding: utf-8 -*-
"""
backend/app/shared/database/repository.py

Repositorio base para operaciones async con SQLAlchemy.

Ofrece helpers de lectura con opción `fresh` (populate_existing) y un
upsert en memoria que reutilizan los repositorios de catálogo y compras.
Nunca borra filas: el ledger solo inserta y transiciona estados.

Autor: Vitrina
Fecha: 2026-09-02
"""

from typing import Any, Generic, Mapping, Optional, Sequence, Type, TypeVar

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")  # modelo ORM


class BaseRepository(Generic[T]):
    """Repositorio asincrónico base para lecturas y upserts comunes."""

    def __init__(self, model: Type[T]):
        self.model = model

    # -------------------------------------------------------------
    # Lecturas
    # -------------------------------------------------------------
    @staticmethod
    def _prepare(stmt: Select, fresh: bool) -> Select:
        # Tras un UPDATE con synchronize_session=False el identity map
        # puede tener estados viejos; `fresh` los sobreescribe.
        if fresh:
            return stmt.execution_options(populate_existing=True)
        return stmt

    async def first(self, session: AsyncSession, stmt: Select, *, fresh: bool = False) -> Optional[Any]:
        result = await session.execute(self._prepare(stmt, fresh))
        return result.scalars().first()

    async def all(self, session: AsyncSession, stmt: Select, *, fresh: bool = False) -> Sequence[Any]:
        result = await session.execute(self._prepare(stmt, fresh))
        return result.scalars().all()

    # -------------------------------------------------------------
    # Escritura
    # -------------------------------------------------------------
    async def upsert(
        self,
        session: AsyncSession,
        existing: Optional[Any],
        model: Type[Any],
        keys: Mapping[str, Any],
        values: Mapping[str, Any],
    ) -> Any:
        """Actualiza `existing` con `values` o crea `model(**keys, **values)`."""
        if existing is None:
            existing = model(**keys, **values)
            session.add(existing)
        else:
            for key, value in values.items():
                setattr(existing, key, value)
        await session.flush()
        return existing

# Fin del archivo backend/app/shared/database/repository.py
