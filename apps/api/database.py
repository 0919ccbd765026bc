from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from apps.api.config import settings

# One pooled engine per process; connections are reused across requests.
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,  # Log SQL when debugging
    pool_size=20,
    max_overflow=10,
)

# expire_on_commit=False keeps attributes readable after commit,
# which the deployment flow relies on when it publishes the new id.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base every model inherits from."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session per request.

    Usage in FastAPI:
        @router.get("/projects")
        async def list_projects(db: AsyncSession = Depends(get_db)):
            ...
    """
    session = async_session_factory()
    try:
        yield session
    finally:
        await session.close()
