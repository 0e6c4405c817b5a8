"""Database session management."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cognicanvas.config import get_settings

settings = get_settings()

engine_kwargs: dict = {"echo": settings.debug}
if settings.database_url.startswith("sqlite"):
    # SQLite pools do not take size/overflow arguments
    engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    engine_kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10)
    if settings.database_requires_ssl:
        engine_kwargs["connect_args"] = {"ssl": "require"}

# Create async engine
engine = create_async_engine(settings.database_url, **engine_kwargs)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
