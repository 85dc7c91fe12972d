"""
Database Configuration

Async SQLAlchemy 2.0 setup for the relational certificate backend.
Works with asyncpg (PostgreSQL/NeonDB) and aiosqlite.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All models should inherit from this class.
    """
    pass


def engine_options(db_url: str, echo: bool = False) -> dict:
    """
    Build create_async_engine keyword arguments for a URL.

    asyncpg doesn't accept sslmode/channel_binding params in the URL, so the
    query string is stripped and an SSL context is passed instead.
    """
    if db_url.startswith("postgresql+asyncpg"):
        import ssl

        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        return {
            "url": db_url.split("?")[0],
            "echo": echo,
            "pool_pre_ping": True,
            "pool_size": 5,
            "max_overflow": 10,
            "connect_args": {"ssl": ssl_context},
        }
    return {"url": db_url, "echo": echo}


def create_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for ``db_url``."""
    options = engine_options(db_url, echo=echo)
    return create_async_engine(options.pop("url"), **options)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """
    Initialize database tables.

    Note: In production, use Alembic migrations instead.
    This is useful for testing or initial development.
    """
    import certify.models  # noqa: F401  registers tables on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
