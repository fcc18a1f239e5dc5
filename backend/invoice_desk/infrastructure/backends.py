"""Backend Factory - wires the configured persistence backend.

Invariants:
    - STORAGE_BACKEND=local -> JSON documents under LOCAL_STORAGE_DIR
    - STORAGE_BACKEND=database -> SQL repositories over DATABASE_URL
    - SQLite databases get their tables created on startup; server databases
      are migrated with alembic
"""

import logging
from dataclasses import dataclass

from invoice_desk.config import Settings
from invoice_desk.core.repository_protocols import PersistenceBackend
from invoice_desk.db.base import Base
from invoice_desk.infrastructure.database import DatabaseSessionManager
from invoice_desk.infrastructure.local_storage import build_local_backend
from invoice_desk.infrastructure.sql_repositories import build_sql_backend

logger = logging.getLogger(__name__)


@dataclass
class WiredBackend:
    backend: PersistenceBackend
    db: DatabaseSessionManager | None = None

    async def close(self) -> None:
        if self.db is not None:
            await self.db.dispose()


async def create_sqlite_tables(db: DatabaseSessionManager) -> None:
    # sql_repositories imports invoice_desk.models, so Base.metadata is complete
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def build_backend(settings: Settings) -> WiredBackend:
    if settings.storage_backend == "local":
        logger.info(
            f"Using local storage at {settings.local_storage_dir}",
            extra={"backend": "local"},
        )
        return WiredBackend(build_local_backend(settings.local_storage_dir))

    db = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_url.startswith("sqlite"):
        await create_sqlite_tables(db)
    logger.info("Using database storage", extra={"backend": "database"})
    return WiredBackend(build_sql_backend(db), db)
