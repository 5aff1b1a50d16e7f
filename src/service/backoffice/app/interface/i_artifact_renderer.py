from abc import ABC, abstractmethod

from src.service.backoffice.app.dto.ticket_artifacts import PdfArtifact, QrArtifact
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload
from src.service.backoffice.domain.value_object.ticket_template import TicketTemplate


class IArtifactRenderer(ABC):
    """
    Produces the QR image and ticket PDF. Output depends only on its inputs,
    so rendering the same ticket twice overwrites the same files.
    """

    @abstractmethod
    async def render_qr(self, *, payload: TicketPayload) -> QrArtifact:
        pass

    @abstractmethod
    async def render_ticket_pdf(
        self,
        *,
        reservation: Reservation,
        ticket_number: str,
        qr: QrArtifact,
        template: TicketTemplate,
    ) -> PdfArtifact:
        pass
