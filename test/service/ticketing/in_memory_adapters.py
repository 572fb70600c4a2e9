"""
In-memory implementations of the ticketing ports.

Every method yields to the event loop once before touching state, so concurrent
tasks really interleave; the check-and-write that follows is synchronous, which
gives the same per-row atomicity as the conditional UPDATEs of the SQL adapters.
The unit of work applies writes immediately and undoes them on rollback, like a
row-locking database seen from a single transaction.
"""

import asyncio
from typing import AsyncIterator, Callable, List, Optional, Sequence

import attrs
from sqlalchemy.exc import DataError
from uuid_utils import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    DomainError,
    InsufficientCapacityError,
    InvalidArgumentError,
    NotFoundError,
    StoreUnavailableError,
)
from src.service.ticketing.app.interface.i_event_capacity_ledger import IEventCapacityLedger
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class InMemoryTicketingStore:
    def __init__(self) -> None:
        self.events: dict[str, EventEntity] = {}
        self.users: set[str] = set()
        self.tickets: dict[str, TicketEntity] = {}

    def add_event(
        self,
        event_id: str,
        *,
        capacity: int,
        organizer_id: str = 'org-1',
        tickets_left: Optional[int] = None,
    ) -> EventEntity:
        event = EventEntity(
            id=event_id,
            organizer_id=organizer_id,
            capacity_total=capacity,
            tickets_left=capacity if tickets_left is None else tickets_left,
        )
        self.events[event_id] = event
        return event

    def add_user(self, user_id: str) -> None:
        self.users.add(user_id)

    def add_ticket(self, ticket: TicketEntity) -> TicketEntity:
        self.tickets[str(ticket.id)] = ticket
        return ticket

    def held_quantity(self, event_id: str) -> int:
        return sum(
            ticket.quantity
            for ticket in self.tickets.values()
            if ticket.event_id == event_id and ticket.status.holds_capacity
        )


class InMemoryTicketCommandRepo(ITicketCommandRepo):
    def __init__(self, store: InMemoryTicketingStore) -> None:
        self.store = store
        self.undo_log: Optional[List[Callable[[], None]]] = None

    async def create(self, *, ticket: TicketEntity) -> TicketEntity:
        await asyncio.sleep(0)
        self.store.tickets.setdefault(str(ticket.id), ticket)
        return ticket

    async def get_by_id(self, *, ticket_id: UUID) -> Optional[TicketEntity]:
        await asyncio.sleep(0)
        return self.store.tickets.get(str(ticket_id))

    async def update_status(
        self,
        *,
        ticket_id: UUID,
        expected_status: TicketStatus,
        new_status: TicketStatus,
    ) -> bool:
        await asyncio.sleep(0)
        key = str(ticket_id)
        current = self.store.tickets.get(key)
        if current is None or current.status != expected_status:
            return False
        self.store.tickets[key] = attrs.evolve(current, status=new_status)
        if self.undo_log is not None:
            self.undo_log.append(lambda: self.store.tickets.__setitem__(key, current))
        return True


class InMemoryEventCapacityLedger(IEventCapacityLedger):
    def __init__(self, store: InMemoryTicketingStore) -> None:
        self.store = store
        self.undo_log: Optional[List[Callable[[], None]]] = None

    def _event(self, event_id: str) -> EventEntity:
        event = self.store.events.get(event_id)
        if event is None:
            raise NotFoundError(f'Event {event_id} not found')
        return event

    def _set_tickets_left(self, event: EventEntity, tickets_left: int) -> None:
        previous = event.tickets_left
        event.tickets_left = tickets_left
        if self.undo_log is not None:
            self.undo_log.append(lambda: setattr(event, 'tickets_left', previous))

    async def reserve(self, *, event_id: str, quantity: int) -> int:
        await asyncio.sleep(0)
        if quantity <= 0:
            raise InvalidArgumentError(f'Quantity must be positive, got {quantity}')
        event = self._event(event_id)
        if event.tickets_left < quantity:
            raise InsufficientCapacityError('Not enough tickets available.')
        self._set_tickets_left(event, event.tickets_left - quantity)
        return event.tickets_left

    async def release(self, *, event_id: str, quantity: int) -> int:
        await asyncio.sleep(0)
        if quantity <= 0:
            raise InvalidArgumentError(f'Quantity must be positive, got {quantity}')
        event = self._event(event_id)
        if event.tickets_left + quantity > event.capacity_total:
            raise DomainError(f'Releasing {quantity} would exceed the capacity of event {event_id}')
        self._set_tickets_left(event, event.tickets_left + quantity)
        return event.tickets_left

    async def get_tickets_left(self, *, event_id: str) -> int:
        await asyncio.sleep(0)
        return self._event(event_id).tickets_left


class InMemoryTicketQueryRepo(ITicketQueryRepo):
    def __init__(self, store: InMemoryTicketingStore, *, in_clause_limit: int = 30) -> None:
        self.store = store
        self._in_clause_limit = in_clause_limit
        self.event_id_batches: List[List[str]] = []

    @property
    def in_clause_limit(self) -> int:
        return self._in_clause_limit

    async def get_by_id(self, *, ticket_id: UUID) -> Optional[TicketEntity]:
        await asyncio.sleep(0)
        return self.store.tickets.get(str(ticket_id))

    async def list_by_user(self, *, user_id: str) -> List[TicketEntity]:
        await asyncio.sleep(0)
        return [ticket for ticket in self.store.tickets.values() if ticket.user_id == user_id]

    async def iter_by_event(
        self, *, event_id: str, status: Optional[TicketStatus] = None
    ) -> AsyncIterator[TicketEntity]:
        for ticket in list(self.store.tickets.values()):
            if ticket.event_id == event_id and (status is None or ticket.status == status):
                await asyncio.sleep(0)
                yield ticket

    async def iter_by_event_ids(
        self, *, event_ids: Sequence[str], status: Optional[TicketStatus] = None
    ) -> AsyncIterator[TicketEntity]:
        if len(event_ids) > self._in_clause_limit:
            raise ValueError(
                f'Too many event ids for one query: {len(event_ids)} > {self._in_clause_limit}'
            )
        self.event_id_batches.append(list(event_ids))
        wanted = set(event_ids)
        for ticket in list(self.store.tickets.values()):
            if ticket.event_id in wanted and (status is None or ticket.status == status):
                await asyncio.sleep(0)
                yield ticket


class InMemoryEventQueryRepo(IEventQueryRepo):
    def __init__(self, store: InMemoryTicketingStore) -> None:
        self.store = store

    async def get_by_id(self, *, event_id: str) -> Optional[EventEntity]:
        await asyncio.sleep(0)
        return self.store.events.get(event_id)

    async def list_event_ids_by_organizer(self, *, organizer_id: str) -> List[str]:
        await asyncio.sleep(0)
        return sorted(
            event.id for event in self.store.events.values() if event.organizer_id == organizer_id
        )


class InMemoryUserQueryRepo(IUserQueryRepo):
    def __init__(self, store: InMemoryTicketingStore) -> None:
        self.store = store

    async def exists(self, *, user_id: str) -> bool:
        await asyncio.sleep(0)
        return user_id in self.store.users


class InMemoryUnitOfWork(AbstractUnitOfWork):
    def __init__(self, store: InMemoryTicketingStore) -> None:
        self.store = store
        self.committed = False
        self._undo_log: List[Callable[[], None]] = []

    async def __aenter__(self) -> 'InMemoryUnitOfWork':
        self._undo_log = []
        self.ticket_command_repo = InMemoryTicketCommandRepo(self.store)
        self.ticket_command_repo.undo_log = self._undo_log
        self.event_capacity_ledger = InMemoryEventCapacityLedger(self.store)
        self.event_capacity_ledger.undo_log = self._undo_log
        await super().__aenter__()
        return self

    async def _commit(self) -> None:
        self._undo_log.clear()
        self.committed = True

    async def rollback(self) -> None:
        while self._undo_log:
            self._undo_log.pop()()


class FlakyTicketCommandRepo(InMemoryTicketCommandRepo):
    """Ticket writes fail with StoreUnavailableError the first `failures` times."""

    def __init__(self, store: InMemoryTicketingStore, *, failures: int) -> None:
        super().__init__(store)
        self.failures = failures
        self.create_calls = 0

    async def create(self, *, ticket: TicketEntity) -> TicketEntity:
        self.create_calls += 1
        if self.create_calls <= self.failures:
            raise StoreUnavailableError('Ticket store unavailable during ticket create')
        return await super().create(ticket=ticket)


class FlakyReleaseLedger(InMemoryEventCapacityLedger):
    """Releases fail with StoreUnavailableError the first `failures` times."""

    def __init__(self, store: InMemoryTicketingStore, *, failures: int) -> None:
        super().__init__(store)
        self.failures = failures
        self.release_calls = 0

    async def release(self, *, event_id: str, quantity: int) -> int:
        self.release_calls += 1
        if self.release_calls <= self.failures:
            raise StoreUnavailableError('Ticket store unavailable during capacity release')
        return await super().release(event_id=event_id, quantity=quantity)


class RejectingTicketCommandRepo(InMemoryTicketCommandRepo):
    """Ticket writes fail with a non-transient database error, as a value overflow would."""

    def __init__(self, store: InMemoryTicketingStore) -> None:
        super().__init__(store)
        self.create_calls = 0

    async def create(self, *, ticket: TicketEntity) -> TicketEntity:
        self.create_calls += 1
        raise DataError('INSERT INTO ticket ...', {}, Exception('numeric field overflow'))
