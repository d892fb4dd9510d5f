"""
Larder Backend — Database Engine & Session Management
======================================================

What:  Async SQLAlchemy engine factory, session factory, declarative base,
       and the commit/rollback session scope used by the repository.
How:   `build_engine()` picks pool options by backend: SQLite gets foreign
       key enforcement switched on per connection (and a single shared
       connection for in-memory databases); server databases get a pool.
Who:   Called once by `main.create_app()` through `SqlRepository.from_url()`.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so `Base.metadata.create_all()`
    can create the four tables on startup.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ships with foreign key checks off; owned rows must reference a user.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(
    database_url: str,
    pool_size: int = 20,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    echo: bool = False,
) -> AsyncEngine:
    """
    Create the async engine for `database_url`.

    SQLite:
        - File databases use SQLAlchemy's default pool.
        - In-memory databases (`sqlite+aiosqlite://`) use a StaticPool so
          every session sees the same database.
        - `PRAGMA foreign_keys=ON` runs on each new connection.
    Anything else:
        - Persistent pool of `pool_size`, `max_overflow` burst connections,
          pre-ping and hourly recycle.
    """
    url = make_url(database_url)
    kwargs: Dict[str, Any] = {"echo": echo}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(url, **kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    kwargs.update(
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=pool_pre_ping,
        pool_recycle=3600,
    )
    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory with expire_on_commit=False.

    Rows returned by the repository are read after the session closes, so
    attributes must stay loaded past commit.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide one session for one repository operation.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the caller (which runs a single statement)
        3. On success: commits
        4. On error: rolls back and re-raises
        5. Always: closes the session (returns connection to pool)
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
