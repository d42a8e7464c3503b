from __future__ import annotations

from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Type, TypeVar, cast

from sqlalchemy import DateTime, TypeDecorator
from sqlalchemy import select as sa_select
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import Select

from slotlink.logger import get_logger
from slotlink.settings import settings


T = TypeVar("T")

logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


def select(entity: Any, *args: Any) -> Select[Any]:
    """Shortcut for :meth:`sqlalchemy.future.select`"""

    if not args:
        return sa_select(entity)

    return sa_select(entity, *args)


def filter_by(cls: Any, *args: Any, **kwargs: Any) -> Select[Any]:
    """Shortcut for :meth:`sqlalchemy.future.Select.filter_by`"""

    return select(cls, *args).filter_by(**kwargs)


def exists(statement: Select[Any]) -> Select[Any]:
    """Shortcut for :meth:`sqlalchemy.future.select(...).exists()`"""

    return sa_select(statement.exists())


def create_engine(url: str) -> AsyncEngine:
    options: dict[str, Any] = {"echo": settings.sql_show_statements}
    if not url.startswith("sqlite"):
        options |= {
            "pool_pre_ping": True,
            "pool_recycle": settings.pool_recycle,
            "pool_size": settings.pool_size,
            "max_overflow": settings.max_overflow,
        }
    return create_async_engine(url, **options)


class DB:
    """An async database connection with one session per context (request)."""

    def __init__(self, url: str):
        self.engine: AsyncEngine = create_engine(url)
        self._session: ContextVar[AsyncSession | None] = ContextVar("session", default=None)

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet."""

        logger.debug("Creating database tables")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def create_session(self) -> AsyncSession:
        return AsyncSession(self.engine, expire_on_commit=False)

    @property
    def session(self) -> AsyncSession:
        if (session := self._session.get()) is None:
            raise RuntimeError("No database session in this context")
        return session

    async def add(self, obj: T) -> T:
        """Add a new row to the database."""

        self.session.add(obj)
        return obj

    async def delete(self, obj: Any) -> Any:
        """Remove a row from the database."""

        await self.session.delete(obj)
        return obj

    async def exists(self, statement: Select[Any]) -> bool:
        """Check whether a statement returns at least one row."""

        return cast(bool, await self.session.scalar(exists(statement)))

    async def all(self, statement: Select[Any]) -> list[Any]:
        """Return all rows of a select statement."""

        return [*(await self.session.scalars(statement)).all()]

    async def first(self, statement: Select[Any]) -> Any | None:
        """Return the first row of a select statement."""

        return (await self.session.scalars(statement.limit(1))).first()

    async def get(self, cls: Type[T], *args: Any, **kwargs: Any) -> T | None:
        """Return the first row of a table matching the given filters."""

        return cast(T | None, await self.first(filter_by(cls, *args, **kwargs)))

    async def flush(self) -> None:
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


@asynccontextmanager
async def db_context() -> AsyncIterator[DB]:
    """Open a session for the current context. Commits on success, rolls back on error."""

    session = db.create_session()
    token = db._session.set(session)
    try:
        yield db
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
        db._session.reset(token)


db: DB = DB(settings.database_url)
