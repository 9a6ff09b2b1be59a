import asyncio
import logging
from typing import AsyncGenerator, Tuple, Union

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .models import Base

logger = logging.getLogger(__name__)

# Conservative defaults for a small hosted Postgres
POOL_SETTINGS = {
    "pool_size": 5,
    "max_overflow": 10,
    "pool_timeout": 20,
    "pool_recycle": 300,  # 5 minutes
}

INIT_MAX_RETRIES = 3
INIT_RETRY_DELAY = 5


def configure_engine(url: Union[str, URL], **engine_kwargs) -> Tuple[AsyncEngine, async_sessionmaker]:
    """Create an async engine and the session factory bound to it"""
    url = make_url(url)
    options = dict(engine_kwargs)
    if url.get_backend_name() != "sqlite":
        for key, value in POOL_SETTINGS.items():
            options.setdefault(key, value)
        options.setdefault("pool_pre_ping", True)

    engine = create_async_engine(url, echo=False, **options)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    logger.info("Database engine created for %s", url.render_as_string(hide_password=True))
    return engine, session_factory


async def init_db(engine: AsyncEngine, retry_delay: float = INIT_RETRY_DELAY) -> None:
    """Create todo_table if it does not exist yet"""
    for attempt in range(1, INIT_MAX_RETRIES + 1):
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables ready")
            return
        except Exception as e:
            logger.warning("Database connection attempt %d/%d failed: %s", attempt, INIT_MAX_RETRIES, e)
            if attempt == INIT_MAX_RETRIES:
                logger.error("All database connection attempts failed")
                raise
            await asyncio.sleep(retry_delay)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get a session from the application's own engine"""
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Database not available")

    async with session_factory() as session:
        yield session


async def ping(engine: AsyncEngine) -> None:
    """Round-trip to the database; raises if it cannot be reached"""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections"""
    await engine.dispose()
    logger.info("Database connections closed")
