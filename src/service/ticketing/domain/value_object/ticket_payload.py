from typing import Any, Optional

import attrs


@attrs.frozen
class TicketPayload:
    """
    Opaque ticket payload stored and returned as-is.

    Only `ticket_type` is read by the core (best-ticket-type aggregation); everything
    else, including unknown keys kept in `extra`, is carried through untouched.
    """

    seat: Optional[str] = None
    ticket_type: Optional[str] = None
    barcode: Optional[str] = None
    qrcode: Optional[str] = None
    extra: dict[str, Any] = attrs.field(factory=dict)

    _KNOWN_KEYS = ('seat', 'ticket_type', 'barcode', 'qrcode')

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> 'TicketPayload':
        data = dict(data or {})
        known = {key: data.pop(key, None) for key in cls._KNOWN_KEYS}
        return cls(**known, extra=data)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.extra,
            'seat': self.seat,
            'ticket_type': self.ticket_type,
            'barcode': self.barcode,
            'qrcode': self.qrcode,
        }
