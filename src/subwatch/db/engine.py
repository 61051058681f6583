"""Async SQLAlchemy engine for the SubmarineTracker database."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Literal

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# SQLite URI open modes: read-only, read-write, read-write-create
OpenMode = Literal["ro", "rw", "rwc"]


def sqlite_url(database_path: Path, mode: OpenMode = "ro") -> str:
    """Build an aiosqlite URL that opens the file with the given mode."""
    return f"sqlite+aiosqlite:///file:{database_path.as_posix()}?mode={mode}&uri=true"


class Database:
    """Async database connection manager.

    The tracker database belongs to the game plugin, so it is opened
    read-only unless a write mode is requested explicitly.
    """

    def __init__(self, database_path: Path, mode: OpenMode = "ro"):
        self._path = database_path
        self._mode = mode
        self._url = sqlite_url(database_path, mode)
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def mode(self) -> OpenMode:
        return self._mode

    @property
    def engine(self) -> AsyncEngine:
        """Get the database engine."""
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call connect() first.")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get the session factory."""
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call connect() first.")
        return self._session_factory

    async def connect(self) -> None:
        """Initialize the database engine.

        No connection is opened until the first session is used.
        """
        if self._mode == "rwc":
            self._path.parent.mkdir(parents=True, exist_ok=True)
        self._engine = create_async_engine(
            self._url,
            echo=False,
            pool_pre_ping=True,
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def disconnect(self) -> None:
        """Close the database connection."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session.

        Usage:
            async with db.session() as session:
                result = await session.execute(...)
        """
        async with self.session_factory() as session:
            try:
                yield session
                if self._mode != "ro":
                    await session.commit()
            except Exception:
                await session.rollback()
                raise
