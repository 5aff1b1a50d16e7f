from enum import StrEnum


class ReservationStatus(StrEnum):
    PENDING = 'pending'
    PARTIAL = 'partial'
    PAID = 'paid'
    TICKET_GENERATED = 'ticket_generated'
    CANCELLED = 'cancelled'

    @property
    def is_terminal(self) -> bool:
        return self in (ReservationStatus.TICKET_GENERATED, ReservationStatus.CANCELLED)
