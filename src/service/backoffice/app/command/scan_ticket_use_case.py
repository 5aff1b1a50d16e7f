from typing import Optional, Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.backoffice_metrics import metrics
from src.service.backoffice.app.dto.scan_result import TicketScanResult
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext


class ScanTicketUseCase:
    """Whole-ticket entry: admits every participant still outside and marks the ticket used"""

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
        actor_id: Optional[UUID],
        context: Optional[RequestContext] = None,
    ) -> TicketScanResult:
        try:
            async with self.uow:
                ticket = await self.uow.ticket_repo.get_by_ticket_number_for_update(
                    ticket_number=ticket_number
                )
                if not ticket:
                    raise NotFoundError('Ticket not found')
                ticket.validate_can_admit()

                participants = await self.uow.participant_repo.list_by_reservation(
                    reservation_id=ticket.reservation_id
                )
                validated = [
                    await self.uow.participant_repo.update(participant=p.validate_entrance())
                    for p in participants
                    if not p.entrance_validated
                ]
                ticket = await self.uow.ticket_repo.update(ticket=ticket.mark_used())

                await self.uow.audit_log_repo.record(
                    entry=AuditLogEntry.record(
                        action=AuditAction.TICKET_SCANNED,
                        entity_type=AuditEntityType.TICKET,
                        entity_id=ticket.id,
                        actor_id=actor_id,
                        permission=Permission.SCAN_VALIDATE,
                        reservation_id=ticket.reservation_id,
                        context=context,
                        changes={
                            'ticket_id': str(ticket.id),
                            'ticket_number': ticket_number,
                            'participant_ids': [str(p.id) for p in validated],
                        },
                    )
                )
                await self.uow.commit()
        except Exception as e:
            metrics.record_scan(stage='scan', result=str(getattr(e, 'kind', 'internal')))
            raise

        metrics.record_scan(stage='scan', result='success')
        Logger.base.info(f'✅ [SCAN] Ticket scanned: {ticket_number}')
        return TicketScanResult(ticket_status=ticket.status, validated_participants=validated)
