from fastapi import APIRouter, Depends
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.query.get_organizer_ticket_stats_use_case import (
    GetOrganizerTicketStatsUseCase,
)
from src.service.ticketing.driving_adapter.http_controller.schema.envelope_schema import (
    SuccessResponse,
)
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_stats_schema import (
    BestTicketTypeResponse,
    EventCountResponse,
    RevenueResponse,
    SoldTicketsResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.get('/{organizer_id}/revenue')
@Logger.io
async def get_organizer_revenue(
    organizer_id: str,
    use_case: GetOrganizerTicketStatsUseCase = Depends(GetOrganizerTicketStatsUseCase.depends),
) -> SuccessResponse[RevenueResponse]:
    with tracer.start_as_current_span('controller.get_organizer_revenue') as span:
        span.set_attribute('organizer_id', organizer_id)
        revenue = await use_case.get_revenue(organizer_id=organizer_id)
        return SuccessResponse(data=RevenueResponse(total_revenue=revenue.total_revenue))


@router.get('/{organizer_id}/sold-tickets')
@Logger.io
async def get_organizer_sold_tickets(
    organizer_id: str,
    use_case: GetOrganizerTicketStatsUseCase = Depends(GetOrganizerTicketStatsUseCase.depends),
) -> SuccessResponse[SoldTicketsResponse]:
    with tracer.start_as_current_span('controller.get_organizer_sold_tickets') as span:
        span.set_attribute('organizer_id', organizer_id)
        sold = await use_case.get_sold_tickets(organizer_id=organizer_id)
        return SuccessResponse(
            data=SoldTicketsResponse(total_sold_tickets=sold.total_sold_tickets)
        )


@router.get('/{organizer_id}/best-ticket-type')
@Logger.io
async def get_organizer_best_ticket_type(
    organizer_id: str,
    use_case: GetOrganizerTicketStatsUseCase = Depends(GetOrganizerTicketStatsUseCase.depends),
) -> SuccessResponse[BestTicketTypeResponse]:
    with tracer.start_as_current_span('controller.get_organizer_best_ticket_type') as span:
        span.set_attribute('organizer_id', organizer_id)
        best = await use_case.get_best_ticket_type(organizer_id=organizer_id)
        return SuccessResponse(
            data=BestTicketTypeResponse(
                best_ticket_type=best.best_ticket_type, quantity=best.quantity
            )
        )


@router.get('/{organizer_id}/events')
@Logger.io
async def get_organizer_event_count(
    organizer_id: str,
    use_case: GetOrganizerTicketStatsUseCase = Depends(GetOrganizerTicketStatsUseCase.depends),
) -> SuccessResponse[EventCountResponse]:
    total_events = await use_case.get_event_count(organizer_id=organizer_id)
    return SuccessResponse(data=EventCountResponse(total_events=total_events))
