# shop_service/db/init_db.py
from shop_service.db.database import engine, Base
from shop_service.db import models  # noqa: F401  registers the tables


async def init_db():
    async with engine.begin() as conn:
        # Create all tables
        await conn.run_sync(Base.metadata.create_all)


async def drop_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
