"""
Integration tests for TicketCommandRepoImpl and the status unit of work against PostgreSQL

Covers the idempotent insert the buy flow retries on, and the compare-and-set that
keeps two concurrent cancels from releasing the same seats twice.
"""

import asyncio
from decimal import Decimal

import pytest

from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.ticketing.app.command.buy_ticket_use_case import BuyTicketUseCase
from src.service.ticketing.app.command.update_ticket_status_use_case import (
    UpdateTicketStatusUseCase,
)
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.value_object.ticket_payload import TicketPayload
from src.service.ticketing.driven_adapter.repo.event_capacity_ledger_impl import (
    EventCapacityLedgerImpl,
)
from src.service.ticketing.driven_adapter.repo.event_query_repo_impl import EventQueryRepoImpl
from src.service.ticketing.driven_adapter.repo.ticket_command_repo_impl import (
    TicketCommandRepoImpl,
)
from src.service.ticketing.driven_adapter.repo.ticket_query_repo_impl import TicketQueryRepoImpl
from src.service.ticketing.driven_adapter.repo.user_query_repo_impl import UserQueryRepoImpl


@pytest.fixture
def ticket_command_repo(database: Database) -> TicketCommandRepoImpl:
    return TicketCommandRepoImpl(session_factory=database.session)


@pytest.fixture
def ledger(database: Database) -> EventCapacityLedgerImpl:
    return EventCapacityLedgerImpl(session_factory=database.session)


@pytest.fixture
def buy_ticket_use_case(
    database: Database,
    ticket_command_repo: TicketCommandRepoImpl,
    ledger: EventCapacityLedgerImpl,
) -> BuyTicketUseCase:
    return BuyTicketUseCase(
        ticket_command_repo=ticket_command_repo,
        event_capacity_ledger=ledger,
        event_query_repo=EventQueryRepoImpl(session_factory=database.session),
        user_query_repo=UserQueryRepoImpl(session_factory=database.session),
    )


def _new_ticket(**overrides) -> TicketEntity:
    fields = {
        'event_id': 'E1',
        'user_id': 'U1',
        'quantity': 2,
        'total_price': '240.50',
    }
    fields.update(overrides)
    return TicketEntity.create(**fields)


@pytest.mark.integration
class TestTicketWrite:
    @pytest.mark.asyncio
    async def test_create_and_read_back(self, ticket_command_repo: TicketCommandRepoImpl):
        # Given
        ticket = _new_ticket(
            payload=TicketPayload(seat='A-12', ticket_type='vip', extra={'gate': 3})
        )

        # When
        await ticket_command_repo.create(ticket=ticket)
        stored = await ticket_command_repo.get_by_id(ticket_id=ticket.id)

        # Then
        assert stored is not None
        assert stored.id == ticket.id
        assert stored.status == TicketStatus.PENDING
        assert stored.total_price == Decimal('240.50')
        assert stored.payload.seat == 'A-12'
        assert stored.payload.ticket_type == 'vip'
        assert stored.payload.extra == {'gate': 3}
        assert stored.created_at is not None

    @pytest.mark.asyncio
    async def test_largest_accepted_amounts_are_stored_exactly(
        self, ticket_command_repo: TicketCommandRepoImpl
    ):
        # Given
        ticket = _new_ticket(quantity=2**31 - 1, total_price='9999999999.99')

        # When
        await ticket_command_repo.create(ticket=ticket)
        stored = await ticket_command_repo.get_by_id(ticket_id=ticket.id)

        # Then
        assert stored is not None
        assert stored.quantity == 2**31 - 1
        assert stored.total_price == Decimal('9999999999.99')

    @pytest.mark.asyncio
    async def test_repeated_create_keeps_one_row(
        self, database: Database, ticket_command_repo: TicketCommandRepoImpl
    ):
        # Given: the first attempt committed but the caller retries anyway
        ticket = _new_ticket()
        await ticket_command_repo.create(ticket=ticket)

        # When
        await ticket_command_repo.create(ticket=ticket)

        # Then
        tickets = await TicketQueryRepoImpl(session_factory=database.session).list_by_user(
            user_id='U1'
        )
        assert [t.id for t in tickets] == [ticket.id]

    @pytest.mark.asyncio
    async def test_unknown_ticket(self, ticket_command_repo: TicketCommandRepoImpl):
        assert await ticket_command_repo.get_by_id(ticket_id=_new_ticket().id) is None


@pytest.mark.integration
class TestStatusCompareAndSet:
    @pytest.mark.asyncio
    async def test_update_only_from_expected_status(
        self, ticket_command_repo: TicketCommandRepoImpl
    ):
        # Given
        ticket = _new_ticket()
        await ticket_command_repo.create(ticket=ticket)

        # When
        first = await ticket_command_repo.update_status(
            ticket_id=ticket.id,
            expected_status=TicketStatus.PENDING,
            new_status=TicketStatus.CONFIRMED,
        )
        stale = await ticket_command_repo.update_status(
            ticket_id=ticket.id,
            expected_status=TicketStatus.PENDING,
            new_status=TicketStatus.CANCELED,
        )

        # Then
        assert first is True
        assert stale is False
        stored = await ticket_command_repo.get_by_id(ticket_id=ticket.id)
        assert stored is not None
        assert stored.status == TicketStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_racing_cancels_have_one_winner(
        self, ticket_command_repo: TicketCommandRepoImpl
    ):
        # Given
        ticket = _new_ticket()
        await ticket_command_repo.create(ticket=ticket)

        # When: both read `pending` and try to move it on separate connections
        results = await asyncio.gather(
            *(
                ticket_command_repo.update_status(
                    ticket_id=ticket.id,
                    expected_status=TicketStatus.PENDING,
                    new_status=TicketStatus.CANCELED,
                )
                for _ in range(2)
            )
        )

        # Then
        assert sorted(results) == [False, True]
        stored = await ticket_command_repo.get_by_id(ticket_id=ticket.id)
        assert stored is not None
        assert stored.status == TicketStatus.CANCELED


@pytest.mark.integration
class TestBuyAndCancel:
    @pytest.mark.asyncio
    async def test_buy_reserves_and_writes_ticket(
        self,
        seed,
        buy_ticket_use_case: BuyTicketUseCase,
        ticket_command_repo: TicketCommandRepoImpl,
        ledger: EventCapacityLedgerImpl,
    ):
        # Given
        await seed(events={'E1': ('O1', 4)}, users=('U1',))

        # When
        ticket = await buy_ticket_use_case.execute(
            event_id='E1', user_id='U1', quantity=3, total_price='90'
        )

        # Then
        assert await ledger.get_tickets_left(event_id='E1') == 1
        stored = await ticket_command_repo.get_by_id(ticket_id=ticket.id)
        assert stored is not None
        assert stored.quantity == 3

    @pytest.mark.asyncio
    async def test_concurrent_cancels_release_capacity_once(
        self,
        seed,
        buy_ticket_use_case: BuyTicketUseCase,
        ticket_command_repo: TicketCommandRepoImpl,
        ledger: EventCapacityLedgerImpl,
    ):
        # Given
        await seed(events={'E1': ('O1', 4)}, users=('U1',))
        ticket = await buy_ticket_use_case.execute(
            event_id='E1', user_id='U1', quantity=2, total_price='60'
        )
        assert await ledger.get_tickets_left(event_id='E1') == 2
        status_use_case = UpdateTicketStatusUseCase(
            uow_factory=SqlAlchemyUnitOfWork, max_retries=3
        )

        # When
        results = await asyncio.gather(
            status_use_case.cancel(ticket_id=ticket.id),
            status_use_case.cancel(ticket_id=ticket.id),
        )

        # Then: the loser retried, saw `canceled` and did nothing
        assert all(result.status == TicketStatus.CANCELED for result in results)
        assert await ledger.get_tickets_left(event_id='E1') == 4
        stored = await ticket_command_repo.get_by_id(ticket_id=ticket.id)
        assert stored is not None
        assert stored.status == TicketStatus.CANCELED

    @pytest.mark.asyncio
    async def test_confirmed_ticket_keeps_its_seats(
        self,
        seed,
        buy_ticket_use_case: BuyTicketUseCase,
        ledger: EventCapacityLedgerImpl,
    ):
        # Given
        await seed(events={'E1': ('O1', 4)}, users=('U1',))
        ticket = await buy_ticket_use_case.execute(
            event_id='E1', user_id='U1', quantity=1, total_price='30'
        )
        status_use_case = UpdateTicketStatusUseCase(uow_factory=SqlAlchemyUnitOfWork)

        # When
        confirmed = await status_use_case.execute(
            ticket_id=ticket.id, new_status=TicketStatus.CONFIRMED
        )

        # Then
        assert confirmed.status == TicketStatus.CONFIRMED
        assert await ledger.get_tickets_left(event_id='E1') == 3
