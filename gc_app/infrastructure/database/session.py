# gc_app/infrastructure/database/session.py

from functools import lru_cache
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from gc_app.config.settings import get_settings

Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    options = {"echo": echo, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options.update(pool_size=10, max_overflow=20)
    return create_async_engine(database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


@lru_cache
def get_engine() -> Optional[AsyncEngine]:
    """Shared process-wide engine, or None when no database is configured."""
    settings = get_settings()
    if not settings.database_url:
        return None
    return build_engine(settings.database_url, echo=settings.database_echo)


@lru_cache
def get_session_factory() -> Optional[async_sessionmaker[AsyncSession]]:
    engine = get_engine()
    if engine is None:
        return None
    return build_session_factory(engine)

