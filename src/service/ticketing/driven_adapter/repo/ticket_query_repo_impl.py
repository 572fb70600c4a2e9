"""
Ticket Query Repository Implementation - CQRS Read Side

Aggregation scans are streamed with a server-side cursor (`yield_per`), so an event's
or an organizer's tickets are never loaded in one go.
"""

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional, Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.database.store_errors import store_operation
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.repo.ticket_model_mapper import model_to_ticket


STREAM_BATCH_SIZE = 500


class TicketQueryRepoImpl(ITicketQueryRepo):
    def __init__(
        self,
        session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None,
        *,
        in_clause_limit: int | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.session: AsyncSession | None = None
        self._in_clause_limit = in_clause_limit or settings.TICKET_QUERY_IN_CLAUSE_LIMIT

    @property
    def in_clause_limit(self) -> int:
        return self._in_clause_limit

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session is not None:
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

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
    async def list_by_user(self, *, user_id: str) -> List[TicketEntity]:
        stmt = (
            select(TicketModel)
            .where(TicketModel.user_id == user_id)
            .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
        )
        async with store_operation('ticket list by user'):
            async with self._get_session() as session:
                result = await session.execute(stmt)
                return [model_to_ticket(model) for model in result.scalars().all()]

    async def iter_by_event(
        self, *, event_id: str, status: Optional[TicketStatus] = None
    ) -> AsyncIterator[TicketEntity]:
        stmt = select(TicketModel).where(TicketModel.event_id == event_id)
        async for ticket in self._stream(stmt, status=status, operation='ticket scan by event'):
            yield ticket

    async def iter_by_event_ids(
        self, *, event_ids: Sequence[str], status: Optional[TicketStatus] = None
    ) -> AsyncIterator[TicketEntity]:
        if len(event_ids) > self._in_clause_limit:
            raise ValueError(
                f'Too many event ids for one query: {len(event_ids)} > {self._in_clause_limit}'
            )
        if not event_ids:
            return

        stmt = select(TicketModel).where(TicketModel.event_id.in_(list(event_ids)))
        async for ticket in self._stream(stmt, status=status, operation='ticket scan by events'):
            yield ticket

    async def _stream(
        self, stmt: Select, *, status: Optional[TicketStatus], operation: str
    ) -> AsyncIterator[TicketEntity]:
        if status is not None:
            stmt = stmt.where(TicketModel.status == status.value)
        stmt = stmt.order_by(TicketModel.id).execution_options(yield_per=STREAM_BATCH_SIZE)

        async with store_operation(operation):
            async with self._get_session() as session:
                result = await session.stream_scalars(stmt)
                async for ticket_model in result:
                    yield model_to_ticket(ticket_model)
