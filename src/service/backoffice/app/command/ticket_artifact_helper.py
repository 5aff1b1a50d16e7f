from typing import Optional

import attrs

from src.platform.metrics.backoffice_metrics import metrics
from src.service.backoffice.app.dto.ticket_artifacts import PdfArtifact, QrArtifact
from src.service.backoffice.app.interface.i_artifact_renderer import IArtifactRenderer
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.entity.ticket_entity import Ticket
from src.service.backoffice.domain.value_object.ticket_template import resolve_ticket_template


@attrs.frozen
class RenderedArtifacts:
    qr: QrArtifact
    pdf: PdfArtifact


async def render_ticket_artifacts(
    *, renderer: IArtifactRenderer, ticket: Ticket, reservation: Reservation
) -> RenderedArtifacts:
    """Render from the stored payload only, so the same ticket always renders the same files"""
    with metrics.artifact_render_duration.time():
        qr = await renderer.render_qr(payload=ticket.payload)
        pdf = await renderer.render_ticket_pdf(
            reservation=reservation,
            ticket_number=ticket.ticket_number,
            qr=qr,
            template=resolve_ticket_template(reservation.ticket_template),
        )
    return RenderedArtifacts(qr=qr, pdf=pdf)


def pdf_bytes_of(artifacts: Optional[RenderedArtifacts]) -> Optional[bytes]:
    return artifacts.pdf.content if artifacts else None
