"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.ticketing.app.command import buy_ticket_use_case, update_ticket_status_use_case
from src.service.ticketing.app.query import (
    get_event_ticket_stats_use_case,
    get_organizer_ticket_stats_use_case,
    get_ticket_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    buy_ticket_use_case,
    update_ticket_status_use_case,
    get_ticket_use_case,
    get_event_ticket_stats_use_case,
    get_organizer_ticket_stats_use_case,
]
