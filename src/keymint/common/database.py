"""Async access to the Keymint store (operators, admin roster, licenses).

Every unit of work goes through ``DatabaseManager.get_session()``: one
transaction that commits on clean exit and rolls back otherwise, so a
batch of licenses lands in full or not at all.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from keymint.common.config import KeymintSettings, get_settings
from keymint.common.exceptions import StoreUnavailableError
from keymint.common.logging import get_logger
from keymint.common.models import Base

# Registers every table on Base.metadata before create_all().
import keymint.identity.models  # noqa: F401
import keymint.admin.models  # noqa: F401
import keymint.licensing.models  # noqa: F401

logger = get_logger("database")


class DatabaseManager:
    """Owns the engine and hands out transactional sessions.

    Until ``init()`` runs (or after ``close()``) the store is unavailable and
    ``get_session()`` raises ``StoreUnavailableError``, which callers report
    the same way as a dropped connection.
    """

    def __init__(self, settings: KeymintSettings | None = None):
        self._settings = settings or get_settings()
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_initialized(self) -> bool:
        return self._session_factory is not None

    async def init(self) -> None:
        self.engine = create_async_engine(self._settings.db_url, echo=False)
        self._session_factory = async_sessionmaker(self.engine, expire_on_commit=False)
        logger.info("Store engine ready: %s", self.engine.url.render_as_string(hide_password=True))

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """One transaction: commit on clean exit, roll back and re-raise otherwise."""
        if self._session_factory is None:
            raise StoreUnavailableError("License store is not initialized")
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create the operators, admins and licenses tables if missing."""
        if self.engine is None:
            raise StoreUnavailableError("License store is not initialized")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self._session_factory = None
