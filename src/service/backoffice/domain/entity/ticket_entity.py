from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import ConflictError
from src.platform.types import generate_uuid7
from src.service.backoffice.domain.enum.ticket_status import TicketStatus
from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload


@attrs.define
class Ticket:
    id: UUID
    reservation_id: UUID
    ticket_number: str
    qr_payload: str  # JSON of the signed TicketPayload
    generated_by: Optional[UUID] = None
    status: TicketStatus = TicketStatus.VALID
    qr_image_url: Optional[str] = None
    pdf_url: Optional[str] = None
    generated_at: Optional[datetime] = None

    @classmethod
    def issue(cls, *, payload: TicketPayload, generated_by: Optional[UUID]) -> 'Ticket':
        return cls(
            id=generate_uuid7(),
            reservation_id=payload.reservation_id,
            ticket_number=payload.ticket_number,
            qr_payload=payload.to_json(),
            generated_by=generated_by,
            generated_at=datetime.fromtimestamp(payload.timestamp, tz=timezone.utc),
        )

    @property
    def payload(self) -> TicketPayload:
        return TicketPayload.from_json(self.qr_payload)

    @property
    def has_artifacts(self) -> bool:
        return bool(self.qr_image_url and self.pdf_url)

    def validate_can_admit(self) -> None:
        if self.status == TicketStatus.USED:
            raise ConflictError('Ticket already used')
        if self.status == TicketStatus.CANCELLED:
            raise ConflictError('Ticket is cancelled')

    def mark_used(self) -> 'Ticket':
        self.validate_can_admit()
        return attrs.evolve(self, status=TicketStatus.USED)

    def with_artifacts(self, *, qr_image_url: str, pdf_url: str) -> 'Ticket':
        return attrs.evolve(self, qr_image_url=qr_image_url, pdf_url=pdf_url)
