from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from taskthread.config import get_settings

settings = get_settings()

# Queue-pool sizing for server databases; SQLite pools take none of these
QUEUE_POOL_OPTIONS = {
    "pool_size": 10,
    "max_overflow": 20,
    "pool_timeout": 30,
    "pool_recycle": 1800,  # Recycle connections after 30 min
}


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine, sizing the pool only for server-backed dialects."""
    options = {"echo": echo, "pool_pre_ping": True}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(QUEUE_POOL_OPTIONS)
    return create_async_engine(database_url, **options)


engine = build_engine(settings.database_url, echo=settings.debug)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Create the task_history table if it does not exist."""
    # Register table metadata before create_all
    import taskthread.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits on success, rolls back on error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """Same as get_session, for the worker and scripts."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
