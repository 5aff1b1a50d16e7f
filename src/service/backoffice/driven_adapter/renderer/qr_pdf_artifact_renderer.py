"""
QR + PDF ticket artifacts

QR images are PNGs of the signed payload JSON. The PDF is a single page the
size of the template image with the QR pasted at the template's slot and
the ticket number printed under it. Files are keyed by ticket number, so
rendering again overwrites in place.

qrcode and reportlab are synchronous; both run in a worker thread.
"""

import base64
import io
from pathlib import Path
from typing import Optional

import anyio
import anyio.to_thread
import qrcode
from qrcode.constants import ERROR_CORRECT_M
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.dto.ticket_artifacts import PdfArtifact, QrArtifact
from src.service.backoffice.app.interface.i_artifact_renderer import IArtifactRenderer
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload
from src.service.backoffice.domain.value_object.ticket_template import (
    TemplateLayout,
    TicketTemplate,
    layout_for,
)


def render_qr_png(data: str) -> bytes:
    qr = qrcode.QRCode(version=None, error_correction=ERROR_CORRECT_M, box_size=10, border=2)
    qr.add_data(data)
    qr.make(fit=True)
    image = qr.make_image(fill_color='black', back_color='white')
    buffer = io.BytesIO()
    image.save(buffer, format='PNG')
    return buffer.getvalue()


def render_ticket_pdf_bytes(
    *,
    layout: TemplateLayout,
    template_image: Optional[Path],
    qr_png: bytes,
    ticket_number: str,
    title: str,
) -> bytes:
    buffer = io.BytesIO()
    # invariant=1 drops the creation timestamp so identical inputs give identical bytes
    pdf = canvas.Canvas(buffer, pagesize=(layout.width, layout.height), invariant=1)

    if template_image is not None:
        pdf.drawImage(str(template_image), 0, 0, width=layout.width, height=layout.height)
    else:
        pdf.setFont('Helvetica-Bold', 36)
        pdf.drawString(60, layout.height - 120, title)

    # layout coordinates are top-left based, reportlab's origin is bottom-left
    pdf.drawImage(
        ImageReader(io.BytesIO(qr_png)),
        layout.qr_x,
        layout.height - layout.qr_y - layout.qr_size,
        width=layout.qr_size,
        height=layout.qr_size,
    )
    pdf.setFont('Helvetica-Bold', 14)
    pdf.drawCentredString(
        layout.label_x + layout.qr_size / 2, layout.height - layout.label_y - 14, ticket_number
    )
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


class QrPdfArtifactRenderer(IArtifactRenderer):
    def __init__(self, *, upload_dir: str, url_prefix: str, template_dir: str) -> None:
        self._root = anyio.Path(upload_dir)
        self._url_prefix = url_prefix.rstrip('/')
        self._template_dir = Path(template_dir)

    async def _write(self, relative: str, content: bytes) -> anyio.Path:
        target = self._root / relative
        await target.parent.mkdir(parents=True, exist_ok=True)
        await target.write_bytes(content)
        return target

    @Logger.io
    async def render_qr(self, *, payload: TicketPayload) -> QrArtifact:
        png = await anyio.to_thread.run_sync(render_qr_png, payload.to_json())
        relative = f'qr/{payload.ticket_number}.png'
        target = await self._write(relative, png)
        return QrArtifact(
            url=f'{self._url_prefix}/{relative}',
            path=str(target),
            data_url=f'data:image/png;base64,{base64.b64encode(png).decode()}',
        )

    @Logger.io
    async def render_ticket_pdf(
        self,
        *,
        reservation: Reservation,
        ticket_number: str,
        qr: QrArtifact,
        template: TicketTemplate,
    ) -> PdfArtifact:
        layout = layout_for(template)
        template_image: Optional[Path] = self._template_dir / layout.image_name
        if not await anyio.Path(template_image).exists():
            Logger.base.warning(f'⚠️ [RENDERER] Template image {template_image} missing, using plain page')
            template_image = None

        qr_png = await anyio.Path(qr.path).read_bytes()
        content = await anyio.to_thread.run_sync(
            lambda: render_ticket_pdf_bytes(
                layout=layout,
                template_image=template_image,
                qr_png=qr_png,
                ticket_number=ticket_number,
                title=reservation.pack_name_snapshot,
            )
        )
        relative = f'tickets/{ticket_number}.pdf'
        target = await self._write(relative, content)
        return PdfArtifact(url=f'{self._url_prefix}/{relative}', path=str(target), content=content)
