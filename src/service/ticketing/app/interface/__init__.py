"""Application layer interfaces (Ports)"""

from src.service.ticketing.app.interface.i_event_capacity_ledger import IEventCapacityLedger
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo

__all__ = [
    'IEventCapacityLedger',
    'IEventQueryRepo',
    'ITicketCommandRepo',
    'ITicketQueryRepo',
    'IUserQueryRepo',
]
