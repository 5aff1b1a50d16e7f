from typing import List

import attrs

from src.service.backoffice.domain.entity.participant_entity import Participant
from src.service.backoffice.domain.enum.ticket_status import TicketStatus


@attrs.frozen
class ParticipantValidationResult:
    ticket_status: TicketStatus
    participant: Participant
    remaining_participants: int


@attrs.frozen
class TicketScanResult:
    ticket_status: TicketStatus
    validated_participants: List[Participant]


@attrs.frozen
class ScanStats:
    total_tickets: int
    total_scanned: int
    valid_tickets: int
    cancelled_tickets: int

    @property
    def scanned_percentage(self) -> float:
        if not self.total_tickets:
            return 0.0
        return round(self.total_scanned * 100 / self.total_tickets, 2)
