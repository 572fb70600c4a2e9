#!/usr/bin/env python3
"""
Database Seed Script
Populate the events and users the ticket engine only reads

Features:
1. Create Users - buyer accounts referenced by purchases
2. Create Events - events with a capacity, owned by organizers

Notes:
- Rows that already exist are left untouched, so the script can be re-run
- SEED_EVENTS / SEED_CAPACITY environment variables size the event set
"""

import asyncio
import os
from dataclasses import dataclass

from sqlalchemy.dialects.postgresql import insert as pg_insert

from src.platform.database.orm_db_setting import (
    create_db_and_tables,
    dispose_engine,
    get_session_maker,
)
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.user_model import UserModel


@dataclass
class EventConfig:
    """Event seed configuration"""

    event_id: str
    organizer_id: str
    capacity: int


# Test users to create
TEST_USERS = ['usr_buyer', 'usr_load_test']

ORGANIZERS = ['org_live_nation', 'org_indie_stage']


def _build_event_configs() -> list[EventConfig]:
    event_count = int(os.getenv('SEED_EVENTS', '4'))
    capacity = int(os.getenv('SEED_CAPACITY', '500'))
    return [
        EventConfig(
            event_id=f'evt_{i:04d}',
            organizer_id=ORGANIZERS[i % len(ORGANIZERS)],
            capacity=capacity,
        )
        for i in range(1, event_count + 1)
    ]


async def create_users() -> None:
    print('👥 Creating users...')
    async with get_session_maker()() as session:
        stmt = pg_insert(UserModel).values([{'id': user_id} for user_id in TEST_USERS])
        await session.execute(stmt.on_conflict_do_nothing(index_elements=['id']))
        await session.commit()
    for user_id in TEST_USERS:
        print(f'   ✅ {user_id}')


async def create_events(configs: list[EventConfig]) -> None:
    print('🎫 Creating events...')
    async with get_session_maker()() as session:
        stmt = pg_insert(EventModel).values(
            [
                {
                    'id': config.event_id,
                    'organizer_id': config.organizer_id,
                    'capacity_total': config.capacity,
                    'tickets_left': config.capacity,
                }
                for config in configs
            ]
        )
        await session.execute(stmt.on_conflict_do_nothing(index_elements=['id']))
        await session.commit()
    for config in configs:
        print(f'   ✅ {config.event_id} ({config.organizer_id}, capacity {config.capacity})')


async def main():
    print('🌱 Starting data seeding...')
    print('=' * 50)

    try:
        await create_db_and_tables()
        await create_users()
        print()
        await create_events(_build_event_configs())

        print('=' * 50)
        print('✅ Data seeding completed!')

    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        exit(1)
    finally:
        await dispose_engine()


if __name__ == '__main__':
    asyncio.run(main())
