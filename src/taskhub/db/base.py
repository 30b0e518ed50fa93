"""Database connection and session management."""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from taskhub.config import settings
from taskhub.observability.metrics import metrics


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def _attach_query_metrics(target_engine: AsyncEngine) -> None:
    """Attach SQLAlchemy event listeners for query metrics."""
    sync_engine = target_engine.sync_engine
    if getattr(sync_engine, "_taskhub_metrics_attached", False):
        return

    @event.listens_for(sync_engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info["query_start_time"] = time.perf_counter()

    @event.listens_for(sync_engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        start_time = conn.info.pop("query_start_time", None)
        if start_time is None:
            return
        metrics.inc_counter("db.query.count")
        metrics.observe("db.query.duration_ms", (time.perf_counter() - start_time) * 1000.0)

    sync_engine._taskhub_metrics_attached = True


def _enable_sqlite_foreign_keys(target_engine: AsyncEngine) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""

    @event.listens_for(target_engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with pool settings suited to the backend."""
    options: dict[str, Any] = {"echo": echo}
    is_sqlite = database_url.startswith("sqlite")
    in_memory = is_sqlite and (
        ":memory:" in database_url or database_url.rstrip("/") == "sqlite+aiosqlite:"
    )

    if in_memory:
        # One shared connection, otherwise every checkout sees an empty database
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
    elif not is_sqlite:
        options.update(
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )

    new_engine = create_async_engine(database_url, **options)
    if is_sqlite:
        _enable_sqlite_foreign_keys(new_engine)
    _attach_query_metrics(new_engine)
    return new_engine


def build_session_factory(target_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(target_engine, class_=AsyncSession, expire_on_commit=False)


# Create async engine
engine = build_engine(settings.database_url, echo=settings.debug)

# Create async session factory
async_session_factory = build_session_factory(engine)


async def init_db() -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
