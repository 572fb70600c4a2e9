from fastapi import APIRouter, Depends
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.query.get_event_ticket_stats_use_case import (
    GetEventTicketStatsUseCase,
)
from src.service.ticketing.driving_adapter.http_controller.schema.envelope_schema import (
    SuccessResponse,
)
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_stats_schema import (
    EventStatisticsResponse,
    RevenueResponse,
    TicketsLeftResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.get('/{event_id}/revenue')
@Logger.io
async def get_event_revenue(
    event_id: str,
    use_case: GetEventTicketStatsUseCase = Depends(GetEventTicketStatsUseCase.depends),
) -> SuccessResponse[RevenueResponse]:
    with tracer.start_as_current_span('controller.get_event_revenue') as span:
        span.set_attribute('event_id', event_id)
        revenue = await use_case.get_revenue(event_id=event_id)
        return SuccessResponse(data=RevenueResponse(total_revenue=revenue.total_revenue))


@router.get('/{event_id}/statistics')
@Logger.io
async def get_event_statistics(
    event_id: str,
    use_case: GetEventTicketStatsUseCase = Depends(GetEventTicketStatsUseCase.depends),
) -> SuccessResponse[EventStatisticsResponse]:
    with tracer.start_as_current_span('controller.get_event_statistics') as span:
        span.set_attribute('event_id', event_id)
        stats = await use_case.get_statistics(event_id=event_id)
        return SuccessResponse(
            data=EventStatisticsResponse(
                total_tickets=stats.total_tickets,
                total_revenue=stats.total_revenue,
                sold_tickets=stats.sold_tickets,
                canceled_tickets=stats.canceled_tickets,
            )
        )


@router.get('/{event_id}/tickets-left')
@Logger.io
async def get_event_tickets_left(
    event_id: str,
    use_case: GetEventTicketStatsUseCase = Depends(GetEventTicketStatsUseCase.depends),
) -> SuccessResponse[TicketsLeftResponse]:
    tickets_left = await use_case.get_tickets_left(event_id=event_id)
    return SuccessResponse(data=TicketsLeftResponse(event_id=event_id, tickets_left=tickets_left))
