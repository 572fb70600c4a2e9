"""
Ticket Command Repository Implementation - CQRS Write Side

Standalone (session_factory) mode commits every call on its own.
UoW mode (session injected by SqlAlchemyUnitOfWork) leaves commit to the UoW.
"""

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.database.store_errors import store_operation
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.repo.ticket_model_mapper import (
    model_to_ticket,
    ticket_to_row,
)


class TicketCommandRepoImpl(ITicketCommandRepo):
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

    @Logger.io
    async def create(self, *, ticket: TicketEntity) -> TicketEntity:
        # ON CONFLICT DO NOTHING: a retried write whose first attempt did commit
        # (ack lost with the connection) must not fail on the primary key.
        stmt = (
            pg_insert(TicketModel)
            .values(**ticket_to_row(ticket))
            .on_conflict_do_nothing(index_elements=[TicketModel.id])
        )
        async with store_operation('ticket create'):
            async with self._get_session() as session:
                await session.execute(stmt)

        Logger.base.info(
            f'🎫 [TICKET] Created ticket {ticket.id} for event {ticket.event_id} '
            f'(quantity={ticket.quantity})'
        )
        return ticket

    @Logger.io
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[TicketEntity]:
        async with store_operation('ticket get'):
            async with self._get_session() as session:
                result = await session.execute(
                    select(TicketModel).where(TicketModel.id == ticket_id)
                )
                ticket_model = result.scalar_one_or_none()

        return model_to_ticket(ticket_model) if ticket_model else None

    @Logger.io
    async def update_status(
        self,
        *,
        ticket_id: UUID,
        expected_status: TicketStatus,
        new_status: TicketStatus,
    ) -> bool:
        stmt = (
            update(TicketModel)
            .where(
                TicketModel.id == ticket_id,
                TicketModel.status == expected_status.value,
            )
            .values(status=new_status.value, updated_at=func.now())
            .returning(TicketModel.id)
            .execution_options(synchronize_session=False)
        )
        async with store_operation('ticket status update'):
            async with self._get_session() as session:
                result = await session.execute(stmt)
                return result.scalar_one_or_none() is not None
