from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_event_capacity_ledger import IEventCapacityLedger
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.app.query.ticket_aggregation_service import TicketAggregationService
from src.service.ticketing.domain.value_object.ticket_statistics import (
    RevenueSummary,
    TicketStatistics,
)


class GetEventTicketStatsUseCase:
    """Per-event KPIs: revenue, statistics and remaining capacity."""

    def __init__(
        self,
        *,
        aggregation_service: TicketAggregationService,
        event_capacity_ledger: IEventCapacityLedger,
    ) -> None:
        self.aggregation_service = aggregation_service
        self.event_capacity_ledger = event_capacity_ledger

    @classmethod
    @inject
    def depends(
        cls,
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        event_query_repo: IEventQueryRepo = Depends(Provide[Container.event_query_repo]),
        event_capacity_ledger: IEventCapacityLedger = Depends(
            Provide[Container.event_capacity_ledger]
        ),
    ) -> Self:
        return cls(
            aggregation_service=TicketAggregationService(
                ticket_query_repo=ticket_query_repo, event_query_repo=event_query_repo
            ),
            event_capacity_ledger=event_capacity_ledger,
        )

    @Logger.io
    async def get_revenue(self, *, event_id: str) -> RevenueSummary:
        accumulator = await self.aggregation_service.aggregate_event(event_id=event_id)
        return accumulator.revenue()

    @Logger.io
    async def get_statistics(self, *, event_id: str) -> TicketStatistics:
        accumulator = await self.aggregation_service.aggregate_event(event_id=event_id)
        return accumulator.statistics()

    @Logger.io
    async def get_tickets_left(self, *, event_id: str) -> int:
        return await self.event_capacity_ledger.get_tickets_left(event_id=event_id)
