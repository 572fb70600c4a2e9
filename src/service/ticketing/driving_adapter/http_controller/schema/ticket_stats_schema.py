from typing import Optional

from pydantic import BaseModel

from src.service.ticketing.driving_adapter.http_controller.schema.envelope_schema import Money


class RevenueResponse(BaseModel):
    model_config = {'json_schema_extra': {'example': {'total_revenue': 100.0}}}

    total_revenue: Money


class EventStatisticsResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'total_tickets': 3,
                'total_revenue': 180.0,
                'sold_tickets': 1,
                'canceled_tickets': 1,
            }
        },
    }

    total_tickets: int
    total_revenue: Money
    sold_tickets: int
    canceled_tickets: int


class TicketsLeftResponse(BaseModel):
    event_id: str
    tickets_left: int


class SoldTicketsResponse(BaseModel):
    total_sold_tickets: int


class BestTicketTypeResponse(BaseModel):
    model_config = {'json_schema_extra': {'example': {'best_ticket_type': 'VIP', 'quantity': 12}}}

    best_ticket_type: Optional[str]
    quantity: int


class EventCountResponse(BaseModel):
    total_events: int
