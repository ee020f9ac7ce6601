from __future__ import annotations

import datetime

from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, AsyncGenerator, List, Self, Sequence

from sqlalchemy import DateTime, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.elements import ColumnElement

from blockdocs.settings import get_settings


# Sentinel ContextVar for session and ownership
_async_session_ctx: ContextVar[AsyncSession | None] = ContextVar("_async_session_ctx", default=None)


# ================================================================
# Base Model Class
# ================================================================

class Base(DeclarativeBase):
    """Base class for all models in the application."""
    __abstract__ = True

    # == Columns =========================================================

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime.datetime] = mapped_column( DateTime(timezone=True), nullable=False, server_default=func.now() )
    updated_at: Mapped[datetime.datetime] = mapped_column( DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now() )

    # == ASYNC Persistence Methods =========================================================

    async def save(self) -> Self:
        """Active record save: insert or update, commit, then refresh from the database."""
        async with self.async_context() as session:
            session.add(self)
            await session.commit()
            await session.refresh(self)
        return self

    # == ASYNC Session Management Methods =========================================================

    @classmethod
    @asynccontextmanager
    async def async_context(cls) -> AsyncGenerator[AsyncSession, None]:
        """The unit of work spanning several active record operations.

        The outermost caller opens the session and closes it on exit; nested calls
        anywhere down the stack reuse it.

        Usage:

        ```python
        async with Base.async_context():
            project = await Project.find(1)
            await Header(project_id=project.id, title="Intro").save()
        ```
        """
        session = _async_session_ctx.get()
        if session is not None:
            # Nesting within an existing session, just yield but dont close it
            yield session
            return

        sessionmaker = await get_settings().primary_database().sqlalchemy_async_sessionmaker()
        async with sessionmaker() as session:
            token = _async_session_ctx.set(session)
            try:
                yield session
            finally:
                _async_session_ctx.reset(token)

    # == Query Methods =========================================================

    @classmethod
    async def find(cls, id: int) -> Self | None:
        """Fetch a record by its primary key."""
        async with cls.async_context() as session:
            result = await session.execute(select(cls).where(cls.id == id))
            return result.scalar_one_or_none()

    @classmethod
    async def find_by(cls, **kwargs: Any) -> Self | None:
        async with cls.async_context() as session:
            result = await session.execute(select(cls).filter_by(**kwargs).limit(1))
            return result.scalar_one_or_none()

    @classmethod
    async def where(cls, *conditions: ColumnElement[bool], order_by: Sequence[Any] = (), **kwargs: Any) -> List[Self]:
        """All records matching the conditions, ordered by `order_by` then id."""
        async with cls.async_context() as session:
            statement = select(cls).where(*conditions).filter_by(**kwargs).order_by(*order_by, cls.id)
            result = await session.execute(statement)
            return list(result.scalars().all())

    @classmethod
    async def delete_where(cls, *conditions: ColumnElement[bool]) -> int:
        """Bulk delete without loading the rows. Returns the number of rows removed."""
        async with cls.async_context() as session:
            result = await session.execute(delete(cls).where(*conditions))
            await session.commit()
            return result.rowcount or 0
