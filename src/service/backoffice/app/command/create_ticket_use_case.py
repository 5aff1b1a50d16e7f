from functools import partial
import time
from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import InternalError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.backoffice_metrics import metrics
from src.service.backoffice.app.command.ticket_artifact_helper import (
    RenderedArtifacts,
    pdf_bytes_of,
    render_ticket_artifacts,
)
from src.service.backoffice.app.dto.reservation_summary import ReservationSummary
from src.service.backoffice.app.dto.ticket_result import IssuedTicketResult
from src.service.backoffice.app.interface.i_artifact_renderer import IArtifactRenderer
from src.service.backoffice.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.backoffice.app.interface.i_reservation_notifier import IReservationNotifier
from src.service.backoffice.app.interface.i_signer import ISigner
from src.service.backoffice.app.interface.i_ticket_command_repo import (
    TicketNumberCollisionError,
)
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.entity.ticket_entity import Ticket
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext
from src.service.backoffice.domain.value_object.ticket_number import generate_ticket_number
from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload
from src.service.backoffice.domain.value_object.ticket_template import resolve_ticket_template


class CreateTicketUseCase:
    """
    Issue the single signed ticket of a fully paid reservation.

    Exactly-once is enforced twice: the reservation row lock serializes
    concurrent calls, and the unique constraint on ticket.reservation_id
    rejects a second row even if the lock were bypassed.

    Flow:
    1. Lock reservation → must be fully paid and not cancelled/ticketed
    2. Generate ticket number + HMAC-signed payload, insert in a savepoint
       (ticket number collision → regenerate, bounded attempts)
    3. Link participants, mark reservation ticket_generated, audit, commit
    4. Render QR + PDF and store their refs (failure logged, not fatal)
    5. Queue ticket delivery to payer and participants
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        signer: ISigner,
        renderer: IArtifactRenderer,
        notifier: IReservationNotifier,
        dispatcher: INotificationDispatcher,
        ticket_number_prefix: str = 'MIP',
        max_attempts: int = 5,
    ) -> None:
        self.uow = uow
        self.signer = signer
        self.renderer = renderer
        self.notifier = notifier
        self.dispatcher = dispatcher
        self.ticket_number_prefix = ticket_number_prefix
        self.max_attempts = max_attempts
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        signer: ISigner = Depends(Provide[Container.signer]),
        renderer: IArtifactRenderer = Depends(Provide[Container.artifact_renderer]),
        notifier: IReservationNotifier = Depends(Provide[Container.notifier]),
        dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow=uow,
            signer=signer,
            renderer=renderer,
            notifier=notifier,
            dispatcher=dispatcher,
            ticket_number_prefix=config.TICKET_NUMBER_PREFIX,
            max_attempts=config.TICKET_NUMBER_MAX_ATTEMPTS,
        )

    @Logger.io
    async def execute(
        self,
        *,
        reservation_id: UUID,
        actor_id: Optional[UUID],
        context: Optional[RequestContext] = None,
    ) -> IssuedTicketResult:
        with self.tracer.start_as_current_span(
            'use_case.create_ticket', attributes={'reservation.id': str(reservation_id)}
        ):
            async with self.uow:
                reservation = await self.uow.reservation_repo.get_by_id_for_update(
                    reservation_id=reservation_id
                )
                if not reservation:
                    raise NotFoundError('Reservation not found')
                reservation.validate_can_issue_ticket()

                ticket = await self._insert_ticket(reservation=reservation, actor_id=actor_id)
                await self.uow.participant_repo.assign_ticket(
                    reservation_id=reservation_id, ticket_id=ticket.id
                )
                participants = await self.uow.participant_repo.list_by_reservation(
                    reservation_id=reservation_id
                )
                reservation = await self.uow.reservation_repo.update(
                    reservation=reservation.mark_ticket_generated()
                )

                await self.uow.audit_log_repo.record(
                    entry=AuditLogEntry.record(
                        action=AuditAction.TICKET_GENERATE,
                        entity_type=AuditEntityType.TICKET,
                        entity_id=ticket.id,
                        actor_id=actor_id,
                        permission=Permission.TICKETS_GENERATE,
                        reservation_id=reservation_id,
                        context=context,
                        changes={
                            'ticket_id': str(ticket.id),
                            'ticket_number': ticket.ticket_number,
                            'pack_name': reservation.pack_name_snapshot,
                            'participants_count': len(participants),
                        },
                    )
                )
                await self.uow.commit()

        template = resolve_ticket_template(reservation.ticket_template)
        metrics.record_ticket_issued(template=template)
        Logger.base.info(
            f'🎫 [TICKET] Issued {ticket.ticket_number} for reservation {reservation_id}'
        )

        artifacts = await self._render_and_store(ticket=ticket, reservation=reservation)
        if artifacts:
            ticket = ticket.with_artifacts(qr_image_url=artifacts.qr.url, pdf_url=artifacts.pdf.url)

        self.dispatcher.dispatch(
            name='ticket_delivery',
            job=partial(
                self.notifier.send_ticket_delivery,
                reservation=reservation,
                ticket=ticket,
                participants=participants,
                pdf_bytes=pdf_bytes_of(artifacts),
            ),
        )
        return IssuedTicketResult(
            ticket=ticket,
            reservation=ReservationSummary.from_reservation(reservation),
            qr_data_url=artifacts.qr.data_url if artifacts else None,
        )

    def build_payload(self, *, reservation_id: UUID) -> TicketPayload:
        payload = TicketPayload(
            ticket_number=generate_ticket_number(prefix=self.ticket_number_prefix),
            reservation_id=reservation_id,
            timestamp=int(time.time()),
        )
        return payload.with_signature(self.signer.sign(payload.message))

    async def _insert_ticket(self, *, reservation: Reservation, actor_id: Optional[UUID]) -> Ticket:
        for attempt in range(1, self.max_attempts + 1):
            payload = self.build_payload(reservation_id=reservation.id)
            try:
                return await self.uow.ticket_repo.create(
                    ticket=Ticket.issue(payload=payload, generated_by=actor_id)
                )
            except TicketNumberCollisionError as e:
                metrics.ticket_number_collisions.inc()
                Logger.base.warning(
                    f'🔁 [TICKET] Number {e.ticket_number} taken '
                    f'(attempt {attempt}/{self.max_attempts}), regenerating'
                )
        raise InternalError('Could not allocate a unique ticket number')

    async def _render_and_store(
        self, *, ticket: Ticket, reservation: Reservation
    ) -> Optional[RenderedArtifacts]:
        """The ticket is already committed; a rendering failure only leaves it without artifacts"""
        try:
            artifacts = await render_ticket_artifacts(
                renderer=self.renderer, ticket=ticket, reservation=reservation
            )
            async with self.uow:
                await self.uow.ticket_repo.update(
                    ticket=ticket.with_artifacts(
                        qr_image_url=artifacts.qr.url, pdf_url=artifacts.pdf.url
                    )
                )
                await self.uow.commit()
            return artifacts
        except Exception as e:
            metrics.artifact_render_failures.inc()
            Logger.base.opt(exception=e).error(
                f'❌ [TICKET] Artifacts for {ticket.ticket_number} failed, '
                f'regenerate them later: {e}'
            )
            return None
