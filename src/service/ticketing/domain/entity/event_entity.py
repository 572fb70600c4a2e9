import attrs


@attrs.define
class EventEntity:
    """Capacity view of an event; content fields (title, agenda, ...) live elsewhere."""

    id: str
    organizer_id: str
    capacity_total: int
    tickets_left: int

    @property
    def tickets_reserved(self) -> int:
        return self.capacity_total - self.tickets_left
