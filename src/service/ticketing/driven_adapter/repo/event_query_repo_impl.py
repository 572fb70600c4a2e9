from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.store_errors import store_operation
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.driven_adapter.model.event_model import EventModel


class EventQueryRepoImpl(IEventQueryRepo):
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
        else:
            raise RuntimeError('No session or session_factory available')

    def _model_to_event(self, event_model: EventModel) -> EventEntity:
        return EventEntity(
            id=event_model.id,
            organizer_id=event_model.organizer_id,
            capacity_total=event_model.capacity_total,
            tickets_left=event_model.tickets_left,
        )

    @Logger.io
    async def get_by_id(self, *, event_id: str) -> Optional[EventEntity]:
        async with store_operation('event get'):
            async with self._get_session() as session:
                result = await session.execute(select(EventModel).where(EventModel.id == event_id))
                event_model = result.scalar_one_or_none()

        return self._model_to_event(event_model) if event_model else None

    @Logger.io
    async def list_event_ids_by_organizer(self, *, organizer_id: str) -> List[str]:
        stmt = (
            select(EventModel.id)
            .where(EventModel.organizer_id == organizer_id)
            .order_by(EventModel.id)
        )
        async with store_operation('event ids by organizer'):
            async with self._get_session() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
