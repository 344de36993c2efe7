# scripts/database/seed.py
"""Create the schema and the system categories.

Safe to run repeatedly: existing tables and categories are left alone.
"""

import asyncio

from totali.core.config import get_settings
from totali.core.logging import setup_logging
from totali.database.session import SessionManager
from totali.services.categories import ensure_system_categories


async def seed_database() -> int:
    settings = get_settings()
    setup_logging(settings)

    manager = SessionManager(settings.DB)
    try:
        await manager.init_models()
        async with manager.session() as session:
            return await ensure_system_categories(session)
    finally:
        await manager.dispose()


if __name__ == "__main__":
    try:
        created = asyncio.run(seed_database())
        print(f"Seeding completed, {created} system categories created")
    except Exception as e:
        print(f"Seeding failed: {str(e)}")
        raise
