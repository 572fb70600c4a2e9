from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driving_adapter.http_controller.schema.envelope_schema import Money


class TicketBuyRequest(BaseModel):
    """Unknown keys are kept and stored with the ticket payload."""

    model_config = ConfigDict(
        extra='allow',
        json_schema_extra={
            'example': {
                'event_id': 'evt_2025_rock_fest',
                'user_id': 'usr_42',
                'quantity': 2,
                'total_price': 120.0,
                'seat': 'A-12',
                'ticket_type': 'VIP',
                'barcode': '0123456789',
                'qrcode': 'https://tickets.example/qr/abc',
            }
        },
    )

    event_id: str
    user_id: str
    quantity: int
    total_price: Decimal
    seat: Optional[str] = None
    ticket_type: Optional[str] = None
    barcode: Optional[str] = None
    qrcode: Optional[str] = None

    def payload(self) -> dict[str, Any]:
        return {
            **(self.model_extra or {}),
            'seat': self.seat,
            'ticket_type': self.ticket_type,
            'barcode': self.barcode,
            'qrcode': self.qrcode,
        }


class TicketBuyResponse(BaseModel):
    message: str = 'Ticket purchased successfully.'
    ticket_id: UtilsUUID7


class TicketStatusUpdateRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={'example': {'status': 'confirmed'}})

    status: TicketStatus


class TicketResponse(BaseModel):
    ticket_id: UtilsUUID7
    event_id: str
    user_id: str
    quantity: int
    total_price: Money
    status: TicketStatus
    seat: Optional[str] = None
    ticket_type: Optional[str] = None
    barcode: Optional[str] = None
    qrcode: Optional[str] = None
    extra: dict[str, Any] = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, ticket: TicketEntity) -> 'TicketResponse':
        return cls(
            ticket_id=ticket.id,
            event_id=ticket.event_id,
            user_id=ticket.user_id,
            quantity=ticket.quantity,
            total_price=ticket.total_price,
            status=ticket.status,
            seat=ticket.payload.seat,
            ticket_type=ticket.payload.ticket_type,
            barcode=ticket.payload.barcode,
            qrcode=ticket.payload.qrcode,
            extra=ticket.payload.extra,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
        )
