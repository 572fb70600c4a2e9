"""Ticketing Domain Value Objects"""

from src.service.ticketing.domain.value_object.status_transition import StatusTransition
from src.service.ticketing.domain.value_object.ticket_payload import TicketPayload
from src.service.ticketing.domain.value_object.ticket_statistics import (
    BestTicketType,
    RevenueSummary,
    SoldTicketsSummary,
    TicketStatistics,
)

__all__ = [
    'BestTicketType',
    'RevenueSummary',
    'SoldTicketsSummary',
    'StatusTransition',
    'TicketPayload',
    'TicketStatistics',
]
