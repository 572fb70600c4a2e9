from prometheus_client import Counter, Histogram


class TicketingMetrics:
    """
    Ticket inventory core metrics

    Tracks reservation outcomes, compensating actions, lifecycle transitions and
    aggregation latency. Exposed through the /metrics endpoint.
    """

    def __init__(self) -> None:
        # ========== Reservation Metrics ==========
        self.reservation_requests = Counter(
            'ticket_reservation_requests_total',
            'Ticket purchase attempts by outcome',
            ['result'],  # success / insufficient_capacity / not_found / invalid / store_error
        )

        self.reserved_quantity = Counter(
            'ticket_reserved_quantity_total',
            'Capacity units debited by successful reservations',
        )

        self.released_quantity = Counter(
            'ticket_released_quantity_total',
            'Capacity units returned to the pool',
            ['reason'],  # cancellation / compensation
        )

        self.compensating_releases = Counter(
            'ticket_compensating_releases_total',
            'Compensating releases after a failed ticket write',
            ['result'],  # success / failed
        )

        self.capacity_leaks = Counter(
            'ticket_capacity_leaks_total',
            'Reservations whose compensating release could not be applied',
        )

        # ========== Lifecycle Metrics ==========
        self.status_transitions = Counter(
            'ticket_status_transitions_total',
            'Ticket status transitions',
            ['from_status', 'to_status', 'result'],  # result: applied / noop / rejected
        )

        self.transition_conflicts = Counter(
            'ticket_status_transition_conflicts_total',
            'Compare-and-set losses on ticket status',
        )

        # ========== Aggregation Metrics ==========
        self.aggregation_duration = Histogram(
            'ticket_aggregation_duration_seconds',
            'Ticket aggregation duration',
            ['scope'],  # event / organizer
            buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
        )

        self.aggregation_chunks = Counter(
            'ticket_aggregation_chunks_total',
            'Event-id chunks queried during organizer fan-out',
        )

    def record_reservation(self, *, result: str, quantity: int = 0) -> None:
        self.reservation_requests.labels(result=result).inc()
        if result == 'success' and quantity:
            self.reserved_quantity.inc(quantity)

    def record_release(self, *, reason: str, quantity: int) -> None:
        self.released_quantity.labels(reason=reason).inc(quantity)

    def record_transition(self, *, from_status: str, to_status: str, result: str) -> None:
        self.status_transitions.labels(
            from_status=from_status, to_status=to_status, result=result
        ).inc()


# Global metrics instance
metrics = TicketingMetrics()
