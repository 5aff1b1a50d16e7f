from typing import List, Optional

import attrs

from src.service.backoffice.app.dto.reservation_summary import ReservationSummary
from src.service.backoffice.domain.entity.participant_entity import Participant
from src.service.backoffice.domain.entity.ticket_entity import Ticket


@attrs.frozen
class IssuedTicketResult:
    ticket: Ticket
    reservation: ReservationSummary
    qr_data_url: Optional[str] = None


@attrs.frozen
class TicketDetail:
    ticket: Ticket
    reservation: ReservationSummary
    participants: List[Participant]
