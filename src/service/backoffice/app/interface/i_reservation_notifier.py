from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.backoffice.domain.entity.participant_entity import Participant
from src.service.backoffice.domain.entity.payment_entity import Payment
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.entity.ticket_entity import Ticket


class IReservationNotifier(ABC):
    """Outbound messages to payers and participants. Only called after commit."""

    @abstractmethod
    async def send_reservation_confirmation(
        self, *, reservation: Reservation, participants: List[Participant]
    ) -> None:
        pass

    @abstractmethod
    async def send_payment_confirmation(
        self, *, reservation: Reservation, payment: Payment, all_payments: List[Payment]
    ) -> None:
        pass

    @abstractmethod
    async def send_ticket_delivery(
        self,
        *,
        reservation: Reservation,
        ticket: Ticket,
        participants: List[Participant],
        pdf_bytes: Optional[bytes],
    ) -> None:
        pass
