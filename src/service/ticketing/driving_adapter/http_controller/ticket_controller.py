from typing import List

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.ticketing.app.command.buy_ticket_use_case import BuyTicketUseCase
from src.service.ticketing.app.command.update_ticket_status_use_case import (
    UpdateTicketStatusUseCase,
)
from src.service.ticketing.app.query.get_ticket_use_case import GetTicketUseCase
from src.service.ticketing.driving_adapter.http_controller.schema.envelope_schema import (
    MessageResponse,
    SuccessResponse,
)
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    TicketBuyRequest,
    TicketBuyResponse,
    TicketResponse,
    TicketStatusUpdateRequest,
)


router = APIRouter()
user_ticket_router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('/buy', status_code=status.HTTP_201_CREATED)
@Logger.io
async def buy_ticket(
    request: TicketBuyRequest,
    use_case: BuyTicketUseCase = Depends(BuyTicketUseCase.depends),
) -> SuccessResponse[TicketBuyResponse]:
    with tracer.start_as_current_span('controller.buy_ticket') as span:
        span.set_attribute('event_id', request.event_id)
        span.set_attribute('user_id', request.user_id)
        span.set_attribute('quantity', request.quantity)

        ticket = await use_case.execute(
            event_id=request.event_id,
            user_id=request.user_id,
            quantity=request.quantity,
            total_price=request.total_price,
            payload=request.payload(),
        )

        span.set_attribute('ticket.id', str(ticket.id))
        return SuccessResponse(data=TicketBuyResponse(ticket_id=ticket.id))


@router.put('/{ticket_id}/status')
@Logger.io
async def update_ticket_status(
    ticket_id: UtilsUUID7,
    request: TicketStatusUpdateRequest,
    use_case: UpdateTicketStatusUseCase = Depends(UpdateTicketStatusUseCase.depends),
) -> SuccessResponse[MessageResponse]:
    with tracer.start_as_current_span('controller.update_ticket_status') as span:
        span.set_attribute('ticket.id', str(ticket_id))
        span.set_attribute('ticket.new_status', request.status.value)

        await use_case.execute(ticket_id=ticket_id, new_status=request.status)
        return SuccessResponse(data=MessageResponse(message='Ticket status updated successfully.'))


@router.delete('/{ticket_id}')
@Logger.io
async def cancel_ticket(
    ticket_id: UtilsUUID7,
    use_case: UpdateTicketStatusUseCase = Depends(UpdateTicketStatusUseCase.depends),
) -> SuccessResponse[MessageResponse]:
    with tracer.start_as_current_span('controller.cancel_ticket') as span:
        span.set_attribute('ticket.id', str(ticket_id))

        await use_case.cancel(ticket_id=ticket_id)
        return SuccessResponse(data=MessageResponse(message='Ticket canceled successfully.'))


@router.get('/{ticket_id}')
@Logger.io
async def get_ticket(
    ticket_id: UtilsUUID7,
    use_case: GetTicketUseCase = Depends(GetTicketUseCase.depends),
) -> SuccessResponse[TicketResponse]:
    ticket = await use_case.get_ticket(ticket_id=ticket_id)
    return SuccessResponse(data=TicketResponse.from_entity(ticket))


@user_ticket_router.get('/{user_id}/tickets')
@Logger.io
async def list_user_tickets(
    user_id: str,
    use_case: GetTicketUseCase = Depends(GetTicketUseCase.depends),
) -> SuccessResponse[List[TicketResponse]]:
    tickets = await use_case.list_user_tickets(user_id=user_id)
    return SuccessResponse(data=[TicketResponse.from_entity(ticket) for ticket in tickets])
