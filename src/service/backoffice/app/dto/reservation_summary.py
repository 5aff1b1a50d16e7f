from typing import List
from uuid import UUID

import attrs

from src.service.backoffice.domain.entity.participant_entity import Participant
from src.service.backoffice.domain.entity.payment_entity import Payment
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.entity.ticket_entity import Ticket
from src.service.backoffice.domain.enum.reservation_status import ReservationStatus


@attrs.frozen
class ReservationSummary:
    id: UUID
    status: ReservationStatus
    total_price: int
    total_paid: int
    remaining_amount: int
    pack_name: str

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> 'ReservationSummary':
        return cls(
            id=reservation.id,
            status=reservation.status,
            total_price=reservation.total_price,
            total_paid=reservation.total_paid,
            remaining_amount=reservation.remaining_amount,
            pack_name=reservation.pack_name_snapshot,
        )


@attrs.frozen
class ReservationDetail:
    reservation: Reservation
    payments: List[Payment]
    participants: List[Participant]
    ticket: Ticket | None = None
