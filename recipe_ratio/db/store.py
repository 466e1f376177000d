"""Transactional read/write access to the local SQLite store.

:class:`PersistentStore` is the only object that touches SQLAlchemy sessions.
Every public coroutine opens its own session and issues exactly one statement,
so each call is a discrete, complete read or write:

* ``read_range`` – ordered ``LIMIT``/``OFFSET`` read used by pagination.
* ``read_one`` – first row matching a predicate, or ``None``.
* ``read_all`` – every row matching a predicate.
* ``insert`` – persist a new ORM instance and commit.
* ``delete`` – remove every row matching a predicate and commit.

Driver and constraint failures are re-raised as :class:`StoreReadError` or
:class:`StoreWriteError` so callers never depend on SQLAlchemy exception types.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from recipe_ratio.db.models import Base
from recipe_ratio.errors import StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class PersistentStore:
    """Single shared handle over the ``favorites`` and ``custom_ingredients`` tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def read_range(
        self,
        model: type[ModelT],
        *,
        order_by: Sequence[Any],
        limit: int,
        offset: int,
    ) -> list[ModelT]:
        """Return at most ``limit`` rows starting at ``offset`` in ``order_by`` order."""

        query = select(model).order_by(*order_by).limit(limit).offset(offset)
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            logger.error("Range read on %s failed: %s", model.__tablename__, exc)
            raise StoreReadError("read_range", model.__tablename__, str(exc)) from exc

    async def read_one(
        self, model: type[ModelT], *criteria: ColumnElement[bool]
    ) -> ModelT | None:
        query = select(model).where(*criteria).limit(1)
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return result.scalars().first()
        except SQLAlchemyError as exc:
            logger.error("Single-row read on %s failed: %s", model.__tablename__, exc)
            raise StoreReadError("read_one", model.__tablename__, str(exc)) from exc

    async def read_all(
        self,
        model: type[ModelT],
        *criteria: ColumnElement[bool],
        order_by: Sequence[Any] = (),
    ) -> list[ModelT]:
        query = select(model).where(*criteria)
        if order_by:
            query = query.order_by(*order_by)
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            logger.error("Filtered read on %s failed: %s", model.__tablename__, exc)
            raise StoreReadError("read_all", model.__tablename__, str(exc)) from exc

    async def insert(self, record: ModelT) -> ModelT:
        """Persist ``record`` and return it with generated columns populated."""

        table = record.__tablename__
        try:
            async with self._session_factory() as session:
                session.add(record)
                try:
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise
                return record
        except SQLAlchemyError as exc:
            logger.error("Insert into %s failed: %s", table, exc)
            raise StoreWriteError("insert", table, str(exc)) from exc

    async def delete(self, model: type[ModelT], *criteria: ColumnElement[bool]) -> int:
        """Delete matching rows and return how many were removed.

        Matching nothing is not an error; the call simply reports ``0``.
        """

        statement = delete(model).where(*criteria)
        try:
            async with self._session_factory() as session:
                try:
                    result = await session.execute(statement)
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise
                return result.rowcount or 0
        except SQLAlchemyError as exc:
            logger.error("Delete from %s failed: %s", model.__tablename__, exc)
            raise StoreWriteError("delete", model.__tablename__, str(exc)) from exc
