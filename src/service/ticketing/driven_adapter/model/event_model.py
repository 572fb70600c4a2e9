from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class EventModel(Base):
    """Capacity columns of an event; `tickets_left` is the ledger counter."""

    __tablename__ = 'event'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    organizer_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    capacity_total: Mapped[int] = mapped_column(Integer, nullable=False)
    tickets_left: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint('capacity_total >= 0', name='ck_event_capacity_total'),
        CheckConstraint(
            'tickets_left >= 0 AND tickets_left <= capacity_total', name='ck_event_tickets_left'
        ),
    )
