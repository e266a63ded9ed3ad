"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support (PostgreSQL in deployment, SQLite in tests).

The engine is owned by a ``Database`` handle that the application builds at
startup and disposes on shutdown; request handlers receive sessions through
the ``get_db`` dependency.
"""

from typing import Optional
from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from trackpay.app.core.config import settings

# Create declarative base for models
Base = declarative_base()


class Database:
    """Owns the async engine and the session factory bound to it."""

    def __init__(self, url: str, echo: bool = False, engine: Optional[AsyncEngine] = None):
        if engine is None:
            engine_kwargs = {"echo": echo, "future": True}
            if not url.startswith("sqlite"):
                engine_kwargs.update(
                    pool_size=settings.db_pool_size,
                    max_overflow=settings.db_max_overflow,
                    pool_pre_ping=True,
                )
            engine = create_async_engine(url, **engine_kwargs)

        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls) -> "Database":
        return cls(settings.database_url, echo=settings.db_echo)

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        """Create any missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the application's database handle."""
    return request.app.state.database


async def get_db(request: Request):
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        finally:
            await session.close()
