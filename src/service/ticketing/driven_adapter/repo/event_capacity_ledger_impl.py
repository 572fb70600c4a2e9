"""
Event Capacity Ledger Implementation

`tickets_left` lives on the event row. Reserve and release are single conditional
UPDATEs: Postgres row locking serializes them per event, so two buyers can never both
see the last seat, while different events never contend.
"""

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.store_errors import store_operation
from src.platform.exception.exceptions import (
    DomainError,
    InsufficientCapacityError,
    InvalidArgumentError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_event_capacity_ledger import IEventCapacityLedger
from src.service.ticketing.driven_adapter.model.event_model import EventModel


class EventCapacityLedgerImpl(IEventCapacityLedger):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ) -> None:
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session is not None:
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
                await session.commit()
        else:
            raise RuntimeError('No session or session_factory available')

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if quantity <= 0:
            raise InvalidArgumentError(f'Quantity must be positive, got {quantity}')

    @staticmethod
    async def _ensure_event_exists(session: AsyncSession, event_id: str) -> None:
        result = await session.execute(select(EventModel.id).where(EventModel.id == event_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError(f'Event {event_id} not found')

    @Logger.io
    async def reserve(self, *, event_id: str, quantity: int) -> int:
        self._check_quantity(quantity)
        stmt = (
            update(EventModel)
            .where(EventModel.id == event_id, EventModel.tickets_left >= quantity)
            .values(tickets_left=EventModel.tickets_left - quantity)
            .returning(EventModel.tickets_left)
            .execution_options(synchronize_session=False)
        )
        async with store_operation('capacity reserve'):
            async with self._get_session() as session:
                result = await session.execute(stmt)
                tickets_left = result.scalar_one_or_none()
                if tickets_left is None:
                    await self._ensure_event_exists(session, event_id)
                    raise InsufficientCapacityError('Not enough tickets available.')

        Logger.base.info(
            f'🎟️ [LEDGER] Reserved {quantity} on event {event_id}, {tickets_left} left'
        )
        return tickets_left

    @Logger.io
    async def release(self, *, event_id: str, quantity: int) -> int:
        self._check_quantity(quantity)
        stmt = (
            update(EventModel)
            .where(
                EventModel.id == event_id,
                EventModel.tickets_left + quantity <= EventModel.capacity_total,
            )
            .values(tickets_left=EventModel.tickets_left + quantity)
            .returning(EventModel.tickets_left)
            .execution_options(synchronize_session=False)
        )
        async with store_operation('capacity release'):
            async with self._get_session() as session:
                result = await session.execute(stmt)
                tickets_left = result.scalar_one_or_none()
                if tickets_left is None:
                    await self._ensure_event_exists(session, event_id)
                    raise DomainError(
                        f'Releasing {quantity} would exceed the capacity of event {event_id}'
                    )

        Logger.base.info(
            f'🔓 [LEDGER] Released {quantity} on event {event_id}, {tickets_left} left'
        )
        return tickets_left

    @Logger.io
    async def get_tickets_left(self, *, event_id: str) -> int:
        async with store_operation('capacity read'):
            async with self._get_session() as session:
                result = await session.execute(
                    select(EventModel.tickets_left).where(EventModel.id == event_id)
                )
                tickets_left = result.scalar_one_or_none()

        if tickets_left is None:
            raise NotFoundError(f'Event {event_id} not found')
        return tickets_left
