"""
Async SQLAlchemy setup for the storefront.

Orders, cart lines and products live in SQLite through aiosqlite; nested
documents (customer info, line items, specs) are JSON columns. Tables are
created at startup by init_db(); request handlers get a session from get_db().
"""
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def async_database_url(url: str) -> str:
    """sqlite:///path → sqlite+aiosqlite:///path; other URLs pass through."""
    if url.startswith("sqlite:///"):
        return "sqlite+aiosqlite:///" + url[len("sqlite:///"):]
    return url


engine = create_async_engine(async_database_url(settings.database_url), echo=False)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db() -> None:
    """Create missing tables. Safe to call on every startup."""
    import db_models  # noqa: F401  (registers tables on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")


async def ping(db: AsyncSession) -> bool:
    """
    Store capability check used before writes.

    Fails closed: any database error is logged and reported as False,
    never raised.
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Database not reachable: {e}")
        return False
    return True


async def get_db():
    """FastAPI dependency — one AsyncSession per request."""
    async with async_session() as session:
        yield session
