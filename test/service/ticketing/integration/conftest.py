"""
Integration test fixtures: real adapters against PostgreSQL

The test database is created on first use and its schema rebuilt from the ORM
models; every test starts from truncated tables. When no server is reachable the
integration tests are skipped instead of failing the run.
"""

import asyncio

import asyncpg
import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import Base, Database, dispose_engine, get_engine
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.user_model import UserModel


_schema_ready = False
_unreachable_reason: str | None = None


async def _setup_test_database() -> None:
    """Create the test database if missing, then rebuild the schema."""
    server_url = settings.DATABASE_URL_ASYNC.rsplit('/', 1)[0]
    admin_engine = create_async_engine(
        f'{server_url}/postgres',
        isolation_level='AUTOCOMMIT',
        connect_args={'timeout': 3},
    )
    try:
        async with admin_engine.connect() as conn:
            result = await conn.execute(
                text('SELECT 1 FROM pg_database WHERE datname = :name'),
                {'name': settings.POSTGRES_DB},
            )
            if result.scalar() is None:
                await conn.execute(text(f'CREATE DATABASE "{settings.POSTGRES_DB}"'))
    finally:
        await admin_engine.dispose()

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def _clean_all_tables() -> None:
    async with get_engine().begin() as conn:
        await conn.execute(text('TRUNCATE TABLE ticket, event, "user" CASCADE'))


@pytest.fixture(autouse=True)
async def clean_database():
    global _schema_ready, _unreachable_reason

    if _unreachable_reason is not None:
        pytest.skip(_unreachable_reason)

    try:
        if not _schema_ready:
            await _setup_test_database()
            _schema_ready = True
        await _clean_all_tables()
    except (OSError, asyncio.TimeoutError, SQLAlchemyError, asyncpg.PostgresError) as e:
        await dispose_engine()
        _unreachable_reason = f'PostgreSQL not reachable: {e}'
        pytest.skip(_unreachable_reason)

    yield

    # The engine is bound to this test's event loop
    await dispose_engine()


@pytest.fixture
def database() -> Database:
    return Database()


@pytest.fixture
def seed(database: Database):
    async def _seed(
        *, events: dict[str, tuple[str, int]] | None = None, users: tuple[str, ...] = ()
    ):
        """events maps event id -> (organizer id, capacity)"""
        async with database.session() as session:
            for event_id, (organizer_id, capacity) in (events or {}).items():
                session.add(
                    EventModel(
                        id=event_id,
                        organizer_id=organizer_id,
                        capacity_total=capacity,
                        tickets_left=capacity,
                    )
                )
            for user_id in users:
                session.add(UserModel(id=user_id))
            await session.commit()

    return _seed
