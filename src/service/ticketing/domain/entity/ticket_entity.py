from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

import attrs
import uuid_utils
from uuid_utils import UUID

from src.platform.exception.exceptions import InvalidArgumentError, InvalidTransitionError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.value_object.status_transition import StatusTransition
from src.service.ticketing.domain.value_object.ticket_payload import TicketPayload


# from-status -> statuses it may move to. Same-state moves are handled separately:
# canceled -> canceled is an idempotent no-op, any other same-state move is rejected.
ALLOWED_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.PENDING: frozenset({TicketStatus.CONFIRMED, TicketStatus.CANCELED}),
    TicketStatus.CONFIRMED: frozenset({TicketStatus.CANCELED}),
    TicketStatus.CANCELED: frozenset(),
}


# Bounds of the ticket columns: quantity is a 32-bit INTEGER, total_price NUMERIC(12, 2)
MAX_QUANTITY = 2**31 - 1
MAX_TOTAL_PRICE = Decimal('10000000000')
PRICE_DECIMAL_PLACES = 2


def _to_decimal(value: Decimal | int | float | str) -> Decimal:
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidArgumentError(f'Invalid total price: {value!r}') from e


@attrs.define
class TicketEntity:
    id: UUID
    event_id: str
    user_id: str
    quantity: int
    total_price: Decimal
    status: TicketStatus = TicketStatus.PENDING
    payload: TicketPayload = attrs.field(factory=TicketPayload)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def ticket_type(self) -> Optional[str]:
        return self.payload.ticket_type

    @staticmethod
    def validate_purchase(*, quantity: int, total_price: Decimal | int | float | str) -> Decimal:
        """
        Validate purchase amounts before any capacity is touched.

        Raises:
            InvalidArgumentError: quantity or total price is not strictly positive, or does
                not fit the stored precision (no sub-cent prices, no silent rounding)
        """
        price = _to_decimal(total_price)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidArgumentError('Invalid quantity or total price.')
        if not 0 < quantity <= MAX_QUANTITY:
            raise InvalidArgumentError('Invalid quantity or total price.')
        if not price.is_finite() or not 0 < price < MAX_TOTAL_PRICE:
            raise InvalidArgumentError('Invalid quantity or total price.')
        # 120.000 is fine, 0.001 is not
        if price.normalize().as_tuple().exponent < -PRICE_DECIMAL_PLACES:
            raise InvalidArgumentError('Invalid quantity or total price.')
        return price

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        event_id: str,
        user_id: str,
        quantity: int,
        total_price: Decimal | int | float | str,
        payload: TicketPayload | None = None,
    ) -> 'TicketEntity':
        price = cls.validate_purchase(quantity=quantity, total_price=total_price)
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid_utils.uuid7(),
            event_id=event_id,
            user_id=user_id,
            quantity=quantity,
            total_price=price,
            status=TicketStatus.PENDING,
            payload=payload or TicketPayload(),
            created_at=now,
            updated_at=now,
        )

    @Logger.io
    def plan_transition(self, new_status: TicketStatus) -> StatusTransition:
        """
        Validate a status change against the lifecycle table.

        Returns:
            The transition; `is_noop` for canceled -> canceled

        Raises:
            InvalidTransitionError: the move is not allowed from the current status
        """
        if self.status == new_status:
            if new_status == TicketStatus.CANCELED:
                return StatusTransition(from_status=self.status, to_status=new_status)
            raise InvalidTransitionError(f'Ticket is already {self.status.value}.')

        if new_status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f'Cannot change ticket status from {self.status.value} to {new_status.value}.'
            )
        return StatusTransition(from_status=self.status, to_status=new_status)

    def apply(self, transition: StatusTransition) -> 'TicketEntity':
        if transition.is_noop:
            return self
        return attrs.evolve(
            self, status=transition.to_status, updated_at=datetime.now(timezone.utc)
        )
