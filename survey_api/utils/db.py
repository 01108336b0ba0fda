# survey_api/utils/db.py
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from survey_api.utils.config import settings

# A fresh SQLite connection per session, so TestClient and uvicorn reloads
# never share one across event loops.
_pool = {"poolclass": NullPool} if settings.database_url.startswith("sqlite") else {}

engine = create_async_engine(settings.database_url, echo=False, **_pool)
AsyncSessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped session for FastAPI dependencies."""
    async with AsyncSessionLocal() as session:
        yield session
