from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.value_object.ticket_payload import TicketPayload
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel


def model_to_ticket(ticket_model: TicketModel) -> TicketEntity:
    return TicketEntity(
        id=ticket_model.id,
        event_id=ticket_model.event_id,
        user_id=ticket_model.user_id,
        quantity=ticket_model.quantity,
        total_price=ticket_model.total_price,
        status=TicketStatus(ticket_model.status),
        payload=TicketPayload.from_dict(ticket_model.payload),
        created_at=ticket_model.created_at,
        updated_at=ticket_model.updated_at,
    )


def ticket_to_row(ticket: TicketEntity) -> dict:
    row = {
        'id': ticket.id,
        'event_id': ticket.event_id,
        'user_id': ticket.user_id,
        'quantity': ticket.quantity,
        'total_price': ticket.total_price,
        'status': ticket.status.value,
        'payload': ticket.payload.to_dict(),
    }
    # Leave timestamps to the server default unless the entity already carries them
    if ticket.created_at is not None:
        row['created_at'] = ticket.created_at
    if ticket.updated_at is not None:
        row['updated_at'] = ticket.updated_at
    return row
