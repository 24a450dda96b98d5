"""Database engine and async session factory."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from site_bot.config import settings

# Importing the model modules registers every table on ``Base.metadata``.
import site_bot.models.otp  # noqa: F401,E402
import site_bot.models.records  # noqa: F401,E402
import site_bot.models.session  # noqa: F401,E402
from site_bot.models.user import Base

engine = create_async_engine(settings.database_url, echo=settings.debug)

async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create all tables that don't yet exist."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping(session_factory: async_sessionmaker[AsyncSession]) -> bool:
    """Run a trivial query; raises if the database is unreachable."""
    async with session_factory() as db:
        await db.execute(text("SELECT 1"))
    return True
