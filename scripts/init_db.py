# scripts/init_db.py
"""Create the gc-app tables on DATABASE_URL and check connectivity. Safe to re-run."""

import asyncio

from sqlalchemy import text

from gc_app.infrastructure.database import models  # noqa: F401
from gc_app.infrastructure.database.session import Base, get_engine


async def init_db():
    engine = get_engine()
    if engine is None:
        raise SystemExit("DATABASE_URL is not set")
    async with engine.begin() as conn:
        result = await conn.execute(text("SELECT 1"))
        print("DB Connected:", result.scalar())
        await conn.run_sync(Base.metadata.create_all)
        print("Tables:", ", ".join(sorted(Base.metadata.tables)))
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_db())
