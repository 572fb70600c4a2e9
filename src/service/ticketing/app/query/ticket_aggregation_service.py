"""
Ticket aggregation fan-out

Folds ticket streams into TicketStatsAccumulator. An organizer's event ids are split
into chunks no larger than the store's IN-clause limit; each chunk is folded into its
own partial accumulator (a few chunks run concurrently) and the partials are merged.
"""

from typing import List, Optional, Sequence

import anyio

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticket_stats_aggregator import TicketStatsAccumulator


MAX_CONCURRENT_CHUNKS = 4


def chunk_event_ids(event_ids: Sequence[str], size: int) -> List[List[str]]:
    if size < 1:
        raise ValueError(f'Chunk size must be positive, got {size}')
    return [list(event_ids[i : i + size]) for i in range(0, len(event_ids), size)]


class TicketAggregationService:
    def __init__(
        self,
        *,
        ticket_query_repo: ITicketQueryRepo,
        event_query_repo: IEventQueryRepo,
        max_concurrent_chunks: int = MAX_CONCURRENT_CHUNKS,
    ) -> None:
        self.ticket_query_repo = ticket_query_repo
        self.event_query_repo = event_query_repo
        self.max_concurrent_chunks = max_concurrent_chunks

    @Logger.io
    async def aggregate_event(self, *, event_id: str) -> TicketStatsAccumulator:
        """
        Raises:
            NotFoundError: the event does not exist, or it has no tickets at all
        """
        if await self.event_query_repo.get_by_id(event_id=event_id) is None:
            raise NotFoundError('Event not found.')

        with metrics.aggregation_duration.labels(scope='event').time():
            accumulator = TicketStatsAccumulator()
            async for ticket in self.ticket_query_repo.iter_by_event(event_id=event_id):
                accumulator.add(ticket)

        if accumulator.is_empty:
            raise NotFoundError('No tickets found for this event.')
        return accumulator

    @Logger.io
    async def aggregate_organizer(
        self, *, organizer_id: str, status: Optional[TicketStatus] = None
    ) -> TicketStatsAccumulator:
        """
        Aggregate every ticket of every event the organizer owns.

        Args:
            status: Only fold tickets in this status (None folds all of them)

        Raises:
            NotFoundError: the organizer owns no events. Events without tickets give
                an all-zero accumulator instead.
        """
        event_ids = await self.event_query_repo.list_event_ids_by_organizer(
            organizer_id=organizer_id
        )
        if not event_ids:
            raise NotFoundError('No events found for this organizer.')

        chunks = chunk_event_ids(event_ids, self.ticket_query_repo.in_clause_limit)
        limiter = anyio.CapacityLimiter(self.max_concurrent_chunks)
        partials = [TicketStatsAccumulator() for _ in chunks]

        async def fold_chunk(index: int, chunk: List[str]) -> None:
            async with limiter:
                metrics.aggregation_chunks.inc()
                async for ticket in self.ticket_query_repo.iter_by_event_ids(
                    event_ids=chunk, status=status
                ):
                    partials[index].add(ticket)

        # A failing chunk cancels its siblings; the first failure surfaces unwrapped
        try:
            with metrics.aggregation_duration.labels(scope='organizer').time():
                async with anyio.create_task_group() as task_group:
                    for index, chunk in enumerate(chunks):
                        task_group.start_soon(fold_chunk, index, chunk)
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from eg

        total = TicketStatsAccumulator()
        for partial in partials:
            total.merge(partial)

        Logger.base.info(
            f'📊 [AGGREGATE] Organizer {organizer_id}: {len(event_ids)} events in '
            f'{len(chunks)} chunk(s), {total.total_tickets} tickets'
        )
        return total

    @Logger.io
    async def count_organizer_events(self, *, organizer_id: str) -> int:
        event_ids = await self.event_query_repo.list_event_ids_by_organizer(
            organizer_id=organizer_id
        )
        return len(event_ids)
