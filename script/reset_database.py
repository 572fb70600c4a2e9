#!/usr/bin/env python3
"""
Database Reset Script
Drop and recreate every ticket inventory table

Notes:
- This script only resets database structure, does not seed test data
- To seed events and users, run `python script/seed_data.py`
"""

import asyncio

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import (
    Base,
    create_db_and_tables,
    dispose_engine,
    get_engine,
)


async def drop_all_tables() -> None:
    # Register every model on Base.metadata before drop_all
    import src.service.ticketing.driven_adapter.model  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def main():
    print('🔄 Starting database reset...')
    print(f'Database URL: {settings.DATABASE_URL_ASYNC}')
    print('=' * 50)

    try:
        print('🗑️ Dropping tables...')
        await drop_all_tables()

        print('🏗️ Creating tables...')
        await create_db_and_tables()

        print('=' * 50)
        print('✅ Database reset completed!')
        print('💡 To seed events and users, run: python script/seed_data.py')

    except Exception as e:
        print(f'❌ Reset failed: {e}')
        exit(1)
    finally:
        await dispose_engine()


if __name__ == '__main__':
    asyncio.run(main())
