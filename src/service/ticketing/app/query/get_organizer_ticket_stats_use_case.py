from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.app.query.ticket_aggregation_service import TicketAggregationService
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.value_object.ticket_statistics import (
    BestTicketType,
    RevenueSummary,
    SoldTicketsSummary,
)


class GetOrganizerTicketStatsUseCase:
    """
    Organizer KPIs across all owned events.

    Revenue is gross: every ticket counts whatever its status. Sold tickets and the
    best ticket type only look at confirmed tickets.
    """

    def __init__(self, *, aggregation_service: TicketAggregationService) -> None:
        self.aggregation_service = aggregation_service

    @classmethod
    @inject
    def depends(
        cls,
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        event_query_repo: IEventQueryRepo = Depends(Provide[Container.event_query_repo]),
    ) -> Self:
        return cls(
            aggregation_service=TicketAggregationService(
                ticket_query_repo=ticket_query_repo, event_query_repo=event_query_repo
            )
        )

    @Logger.io
    async def get_revenue(self, *, organizer_id: str) -> RevenueSummary:
        accumulator = await self.aggregation_service.aggregate_organizer(
            organizer_id=organizer_id
        )
        return accumulator.revenue()

    @Logger.io
    async def get_sold_tickets(self, *, organizer_id: str) -> SoldTicketsSummary:
        accumulator = await self.aggregation_service.aggregate_organizer(
            organizer_id=organizer_id, status=TicketStatus.CONFIRMED
        )
        return accumulator.sold()

    @Logger.io
    async def get_best_ticket_type(self, *, organizer_id: str) -> BestTicketType:
        accumulator = await self.aggregation_service.aggregate_organizer(
            organizer_id=organizer_id, status=TicketStatus.CONFIRMED
        )
        return accumulator.best_ticket_type()

    @Logger.io
    async def get_event_count(self, *, organizer_id: str) -> int:
        return await self.aggregation_service.count_organizer_events(organizer_id=organizer_id)
