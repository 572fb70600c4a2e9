"""
Integration tests for EventCapacityLedgerImpl against PostgreSQL

The conditional UPDATE on the event row is the only thing standing between two
buyers and the last seat, so concurrency is tested on the real row lock.
"""

import asyncio

import pytest

from src.platform.database.orm_db_setting import Database
from src.platform.exception.exceptions import (
    DomainError,
    InsufficientCapacityError,
    NotFoundError,
)
from src.service.ticketing.driven_adapter.repo.event_capacity_ledger_impl import (
    EventCapacityLedgerImpl,
)


@pytest.fixture
def ledger(database: Database) -> EventCapacityLedgerImpl:
    return EventCapacityLedgerImpl(session_factory=database.session)


@pytest.mark.integration
class TestReserveAndRelease:
    @pytest.mark.asyncio
    async def test_reserve_then_release(self, seed, ledger: EventCapacityLedgerImpl):
        # Given
        await seed(events={'E1': ('O1', 5)})

        # When
        left_after_reserve = await ledger.reserve(event_id='E1', quantity=3)
        left_after_release = await ledger.release(event_id='E1', quantity=2)

        # Then
        assert left_after_reserve == 2
        assert left_after_release == 4
        assert await ledger.get_tickets_left(event_id='E1') == 4

    @pytest.mark.asyncio
    async def test_insufficient_capacity_leaves_counter_untouched(
        self, seed, ledger: EventCapacityLedgerImpl
    ):
        # Given
        await seed(events={'E1': ('O1', 2)})

        # When / Then
        with pytest.raises(InsufficientCapacityError):
            await ledger.reserve(event_id='E1', quantity=3)
        assert await ledger.get_tickets_left(event_id='E1') == 2

    @pytest.mark.asyncio
    async def test_release_above_capacity_is_refused(self, seed, ledger: EventCapacityLedgerImpl):
        # Given
        await seed(events={'E1': ('O1', 4)})
        await ledger.reserve(event_id='E1', quantity=1)

        # When / Then
        with pytest.raises(DomainError):
            await ledger.release(event_id='E1', quantity=2)
        assert await ledger.get_tickets_left(event_id='E1') == 3

    @pytest.mark.asyncio
    async def test_unknown_event(self, ledger: EventCapacityLedgerImpl):
        with pytest.raises(NotFoundError):
            await ledger.reserve(event_id='missing', quantity=1)
        with pytest.raises(NotFoundError):
            await ledger.release(event_id='missing', quantity=1)
        with pytest.raises(NotFoundError):
            await ledger.get_tickets_left(event_id='missing')


@pytest.mark.integration
class TestConcurrentReserve:
    @pytest.mark.asyncio
    async def test_concurrent_reserves_never_oversell(
        self, seed, ledger: EventCapacityLedgerImpl
    ):
        # Given: 12 buyers race for 5 seats on one event row
        await seed(events={'E1': ('O1', 5)})

        # When
        results = await asyncio.gather(
            *(ledger.reserve(event_id='E1', quantity=1) for _ in range(12)),
            return_exceptions=True,
        )

        # Then
        successes = [r for r in results if isinstance(r, int)]
        refused = [r for r in results if isinstance(r, InsufficientCapacityError)]
        assert len(successes) == 5
        assert len(refused) == 7
        # Each winner saw a distinct post-decrement value
        assert sorted(successes) == [0, 1, 2, 3, 4]
        assert await ledger.get_tickets_left(event_id='E1') == 0

    @pytest.mark.asyncio
    async def test_concurrent_reserve_and_release_keep_counter_consistent(
        self, seed, ledger: EventCapacityLedgerImpl
    ):
        # Given
        await seed(events={'E1': ('O1', 10)})
        await ledger.reserve(event_id='E1', quantity=6)

        # When: 4 more seats go out while 3 come back
        await asyncio.gather(
            *(ledger.reserve(event_id='E1', quantity=1) for _ in range(4)),
            *(ledger.release(event_id='E1', quantity=1) for _ in range(3)),
        )

        # Then
        assert await ledger.get_tickets_left(event_id='E1') == 10 - 6 - 4 + 3

    @pytest.mark.asyncio
    async def test_events_do_not_share_capacity(self, seed, ledger: EventCapacityLedgerImpl):
        # Given
        await seed(events={'E1': ('O1', 1), 'E2': ('O1', 1)})

        # When
        await asyncio.gather(
            ledger.reserve(event_id='E1', quantity=1),
            ledger.reserve(event_id='E2', quantity=1),
        )

        # Then
        assert await ledger.get_tickets_left(event_id='E1') == 0
        assert await ledger.get_tickets_left(event_id='E2') == 0
