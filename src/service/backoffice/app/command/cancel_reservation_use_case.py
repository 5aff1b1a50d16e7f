from typing import Optional, Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.dto.reservation_summary import ReservationSummary
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext


class CancelReservationUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self,
        *,
        reservation_id: UUID,
        actor_id: Optional[UUID],
        context: Optional[RequestContext] = None,
    ) -> ReservationSummary:
        """One-way; payments already recorded stay on the reservation"""
        async with self.uow:
            reservation = await self.uow.reservation_repo.get_by_id_for_update(
                reservation_id=reservation_id
            )
            if not reservation:
                raise NotFoundError('Reservation not found')

            cancelled = await self.uow.reservation_repo.update(reservation=reservation.cancel())
            await self.uow.audit_log_repo.record(
                entry=AuditLogEntry.record(
                    action=AuditAction.RESERVATION_CANCEL,
                    entity_type=AuditEntityType.RESERVATION,
                    entity_id=reservation_id,
                    actor_id=actor_id,
                    permission=Permission.RESERVATIONS_EDIT,
                    reservation_id=reservation_id,
                    context=context,
                    changes={
                        'status_before': reservation.status.value,
                        'status_after': cancelled.status.value,
                        'total_paid': cancelled.total_paid,
                    },
                )
            )
            await self.uow.commit()

        return ReservationSummary.from_reservation(cancelled)
