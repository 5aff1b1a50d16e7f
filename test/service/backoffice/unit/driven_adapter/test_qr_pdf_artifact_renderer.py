from pathlib import Path
from uuid import uuid4

import pytest

from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload
from src.service.backoffice.domain.value_object.ticket_template import TicketTemplate
from src.service.backoffice.driven_adapter.renderer.qr_pdf_artifact_renderer import (
    QrPdfArtifactRenderer,
)
from test.service.backoffice.unit.helpers import make_reservation


class TestQrPdfArtifactRenderer:
    @pytest.fixture
    def renderer(self, tmp_path: Path) -> QrPdfArtifactRenderer:
        return QrPdfArtifactRenderer(
            upload_dir=str(tmp_path / 'uploads'),
            url_prefix='/uploads',
            template_dir=str(tmp_path / 'no-templates'),
        )

    @pytest.mark.asyncio
    async def test_renders_qr_and_pdf_keyed_by_ticket_number(self, renderer):
        payload = TicketPayload(
            ticket_number='MIP-LX2K1-ABC123', reservation_id=uuid4(), timestamp=1, signature='ab'
        )

        qr = await renderer.render_qr(payload=payload)
        pdf = await renderer.render_ticket_pdf(
            reservation=make_reservation(),
            ticket_number=payload.ticket_number,
            qr=qr,
            template=TicketTemplate.VIP,
        )

        assert qr.url == '/uploads/qr/MIP-LX2K1-ABC123.png'
        assert qr.data_url.startswith('data:image/png;base64,')
        assert Path(qr.path).read_bytes().startswith(b'\x89PNG')
        assert pdf.url == '/uploads/tickets/MIP-LX2K1-ABC123.pdf'
        assert pdf.content.startswith(b'%PDF')
        assert Path(pdf.path).read_bytes() == pdf.content

    @pytest.mark.asyncio
    async def test_rendering_twice_gives_same_pdf(self, renderer):
        payload = TicketPayload(
            ticket_number='MIP-LX2K1-ABC123', reservation_id=uuid4(), timestamp=1, signature='ab'
        )
        reservation = make_reservation()

        first_qr = await renderer.render_qr(payload=payload)
        first = await renderer.render_ticket_pdf(
            reservation=reservation, ticket_number=payload.ticket_number, qr=first_qr,
            template=TicketTemplate.SIMPLE,
        )
        second_qr = await renderer.render_qr(payload=payload)
        second = await renderer.render_ticket_pdf(
            reservation=reservation, ticket_number=payload.ticket_number, qr=second_qr,
            template=TicketTemplate.SIMPLE,
        )

        assert first.content == second.content
