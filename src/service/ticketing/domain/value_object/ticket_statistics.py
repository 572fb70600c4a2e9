from decimal import Decimal
from typing import Optional

import attrs


@attrs.frozen
class RevenueSummary:
    total_revenue: Decimal


@attrs.frozen
class SoldTicketsSummary:
    total_sold_tickets: int


@attrs.frozen
class TicketStatistics:
    total_tickets: int
    total_revenue: Decimal
    sold_tickets: int
    canceled_tickets: int


@attrs.frozen
class BestTicketType:
    best_ticket_type: Optional[str]
    quantity: int
