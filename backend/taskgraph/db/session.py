"""Schema Bootstrap — creates tables straight from ORM metadata.

Invariants:
    - Only used when settings.database_auto_create is on (local dev, SQLite)
    - Production schemas are managed by Alembic (backend/alembic/)

Design Decisions:
    - Separate from infrastructure/database.py: runs once at startup on its own
      engine, independent of the request-scoped session manager
"""

from sqlalchemy.ext.asyncio import create_async_engine

from taskgraph.db.base import Base


async def create_all(database_url: str) -> None:
    """Create every table directly from metadata. Existing tables are kept."""
    import taskgraph.models  # noqa: F401  (registers all tables on Base.metadata)

    engine = create_async_engine(database_url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
