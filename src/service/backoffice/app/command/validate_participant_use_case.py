from typing import Optional, Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.backoffice_metrics import metrics
from src.service.backoffice.app.dto.scan_result import ParticipantValidationResult
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.enum.ticket_status import TicketStatus
from src.service.backoffice.domain.value_object.request_context import RequestContext


class ValidateParticipantUseCase:
    """
    Admit one participant of a group ticket.

    The ticket row is locked so two participants entering at the same time
    serialize; the ticket only becomes `used` once every participant of the
    reservation is validated. Every successful call writes its own audit entry.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self,
        *,
        ticket_number: str,
        participant_id: UUID,
        actor_id: Optional[UUID],
        context: Optional[RequestContext] = None,
    ) -> ParticipantValidationResult:
        try:
            async with self.uow:
                ticket = await self.uow.ticket_repo.get_by_ticket_number_for_update(
                    ticket_number=ticket_number
                )
                if not ticket:
                    raise NotFoundError('Ticket not found')

                participants = await self.uow.participant_repo.list_by_reservation(
                    reservation_id=ticket.reservation_id
                )
                participant = next((p for p in participants if p.id == participant_id), None)
                if not participant:
                    raise NotFoundError('Participant not found')

                ticket.validate_can_admit()
                validated = await self.uow.participant_repo.update(
                    participant=participant.validate_entrance()
                )

                remaining = [
                    p for p in participants if p.id != participant_id and not p.entrance_validated
                ]
                if not remaining:
                    ticket = await self.uow.ticket_repo.update(ticket=ticket.mark_used())

                await self.uow.audit_log_repo.record(
                    entry=AuditLogEntry.record(
                        action=AuditAction.ENTRY_VALIDATE,
                        entity_type=AuditEntityType.PARTICIPANT,
                        entity_id=participant_id,
                        actor_id=actor_id,
                        permission=Permission.SCAN_VALIDATE,
                        reservation_id=ticket.reservation_id,
                        context=context,
                        changes={
                            'ticket_number': ticket_number,
                            'participant_ids': [str(participant_id)],
                            'participant_name': participant.name,
                            'remaining_participants': len(remaining),
                            'ticket_status': ticket.status.value,
                        },
                    )
                )
                await self.uow.commit()
        except Exception as e:
            metrics.record_scan(stage='validate', result=str(getattr(e, 'kind', 'internal')))
            raise

        metrics.record_scan(stage='validate', result='success')
        if ticket.status == TicketStatus.USED:
            Logger.base.info(f'✅ [SCAN] {ticket_number} fully admitted')
        return ParticipantValidationResult(
            ticket_status=ticket.status,
            participant=validated,
            remaining_participants=len(remaining),
        )
