from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.command.ticket_artifact_helper import render_ticket_artifacts
from src.service.backoffice.app.dto.reservation_summary import ReservationSummary
from src.service.backoffice.app.dto.ticket_result import IssuedTicketResult
from src.service.backoffice.app.interface.i_artifact_renderer import IArtifactRenderer
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext


class RegenerateTicketArtifactsUseCase:
    """Re-render QR and PDF from the stored signed payload. Same number, same signature, same files."""

    def __init__(self, *, uow: AbstractUnitOfWork, renderer: IArtifactRenderer) -> None:
        self.uow = uow
        self.renderer = renderer

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        renderer: IArtifactRenderer = Depends(Provide[Container.artifact_renderer]),
    ) -> Self:
        return cls(uow=uow, renderer=renderer)

    @Logger.io
    async def execute(
        self,
        *,
        ticket_id: UUID,
        actor_id: Optional[UUID],
        context: Optional[RequestContext] = None,
    ) -> IssuedTicketResult:
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')
            reservation = await self.uow.reservation_repo.get_by_id(
                reservation_id=ticket.reservation_id
            )
            if not reservation:
                raise NotFoundError('Reservation not found')

        artifacts = await render_ticket_artifacts(
            renderer=self.renderer, ticket=ticket, reservation=reservation
        )

        async with self.uow:
            ticket = await self.uow.ticket_repo.update(
                ticket=ticket.with_artifacts(
                    qr_image_url=artifacts.qr.url, pdf_url=artifacts.pdf.url
                )
            )
            await self.uow.audit_log_repo.record(
                entry=AuditLogEntry.record(
                    action=AuditAction.TICKET_REGENERATE_ARTIFACTS,
                    entity_type=AuditEntityType.TICKET,
                    entity_id=ticket.id,
                    actor_id=actor_id,
                    permission=Permission.TICKETS_GENERATE,
                    reservation_id=ticket.reservation_id,
                    context=context,
                    changes={
                        'ticket_number': ticket.ticket_number,
                        'qr_image_url': artifacts.qr.url,
                        'pdf_url': artifacts.pdf.url,
                    },
                )
            )
            await self.uow.commit()

        return IssuedTicketResult(
            ticket=ticket,
            reservation=ReservationSummary.from_reservation(reservation),
            qr_data_url=artifacts.qr.data_url,
        )
