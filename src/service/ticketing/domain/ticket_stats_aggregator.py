"""
Streaming ticket aggregation.

One accumulator per query; tickets are folded in one at a time so an event (or an
organizer's whole portfolio) never has to be materialized in memory. Accumulators
built from different `eventId IN [...]` chunks are combined with `merge`.
"""

from collections import Counter
from decimal import Decimal
from typing import Iterable, Optional

import attrs

from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.value_object.ticket_statistics import (
    BestTicketType,
    RevenueSummary,
    SoldTicketsSummary,
    TicketStatistics,
)


@attrs.define
class TicketStatsAccumulator:
    total_tickets: int = 0
    # Gross revenue: every record counts regardless of status
    total_revenue: Decimal = attrs.field(factory=Decimal)
    sold_tickets: int = 0
    canceled_tickets: int = 0
    # Confirmed quantity per ticket type, untyped tickets excluded
    quantity_by_type: Counter = attrs.field(factory=Counter)

    def add(self, ticket: TicketEntity) -> None:
        self.total_tickets += 1
        self.total_revenue += ticket.total_price
        if ticket.status == TicketStatus.CONFIRMED:
            self.sold_tickets += 1
            if ticket.ticket_type:
                self.quantity_by_type[ticket.ticket_type] += ticket.quantity
        elif ticket.status == TicketStatus.CANCELED:
            self.canceled_tickets += 1

    def add_all(self, tickets: Iterable[TicketEntity]) -> 'TicketStatsAccumulator':
        for ticket in tickets:
            self.add(ticket)
        return self

    def merge(self, other: 'TicketStatsAccumulator') -> 'TicketStatsAccumulator':
        self.total_tickets += other.total_tickets
        self.total_revenue += other.total_revenue
        self.sold_tickets += other.sold_tickets
        self.canceled_tickets += other.canceled_tickets
        self.quantity_by_type.update(other.quantity_by_type)
        return self

    @property
    def is_empty(self) -> bool:
        return self.total_tickets == 0

    def best_ticket_type(self) -> BestTicketType:
        """Highest summed quantity wins; ties go to the lexicographically smallest name."""
        best: Optional[str] = None
        best_quantity = 0
        for ticket_type in sorted(self.quantity_by_type):
            quantity = self.quantity_by_type[ticket_type]
            if quantity > best_quantity:
                best, best_quantity = ticket_type, quantity
        return BestTicketType(best_ticket_type=best, quantity=best_quantity)

    def revenue(self) -> RevenueSummary:
        return RevenueSummary(total_revenue=self.total_revenue)

    def sold(self) -> SoldTicketsSummary:
        return SoldTicketsSummary(total_sold_tickets=self.sold_tickets)

    def statistics(self) -> TicketStatistics:
        return TicketStatistics(
            total_tickets=self.total_tickets,
            total_revenue=self.total_revenue,
            sold_tickets=self.sold_tickets,
            canceled_tickets=self.canceled_tickets,
        )
