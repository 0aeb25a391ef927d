# shop_service/db/database.py
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool

from shop_service.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

engine_options = {"echo": settings.SQL_ECHO}
if DATABASE_URL.startswith("sqlite"):
    # aiosqlite connections must not outlive the event loop that opened them
    engine_options["poolclass"] = NullPool

# Async engine
engine = create_async_engine(DATABASE_URL, **engine_options)

# Async session factory
SessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)

# Base class for the models
Base = declarative_base()


# Session generator
async def get_db():
    async with SessionLocal() as session:
        yield session


@asynccontextmanager
async def transaction(db: AsyncSession):
    """
    Unit of work around a block of data functions.

    Commits when the block exits normally, rolls back and re-raises on any
    exception, so nothing from a failed block is ever visible.
    """
    try:
        yield db
        await db.commit()
    except BaseException:
        logger.debug("Rolling back transaction")
        await db.rollback()
        raise
