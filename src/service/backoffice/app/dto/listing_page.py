from typing import List

import attrs

from src.service.backoffice.domain.entity.payment_entity import Payment
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.entity.ticket_entity import Ticket


@attrs.frozen
class ReservationPage:
    data: List[Reservation]
    total: int
    limit: int
    offset: int


@attrs.frozen
class PaymentPage:
    data: List[Payment]
    total: int
    limit: int
    offset: int


@attrs.frozen
class TicketPage:
    data: List[Ticket]
    total: int
    limit: int
    offset: int
