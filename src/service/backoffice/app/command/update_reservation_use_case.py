from typing import Optional, Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext


CONTACT_FIELDS = ('payer_name', 'payer_phone', 'payer_email')


class UpdateReservationUseCase:
    """
    Edits the payer contact of a reservation.

    Only fields whose value actually changes are written and audited; a
    request that changes nothing commits nothing.
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
        reservation_id: UUID,
        actor_id: Optional[UUID],
        payer_name: Optional[str] = None,
        payer_phone: Optional[str] = None,
        payer_email: Optional[str] = None,
        context: Optional[RequestContext] = None,
    ) -> Reservation:
        if payer_name is None and payer_phone is None and payer_email is None:
            raise ValidationError('Nothing to update')

        async with self.uow:
            reservation = await self.uow.reservation_repo.get_by_id_for_update(
                reservation_id=reservation_id
            )
            if not reservation:
                raise NotFoundError('Reservation not found')

            updated = reservation.update_contact(
                payer_name=payer_name, payer_phone=payer_phone, payer_email=payer_email
            )
            changed = [
                field
                for field in CONTACT_FIELDS
                if getattr(updated, field) != getattr(reservation, field)
            ]
            if not changed:
                return reservation

            await self.uow.reservation_repo.update(reservation=updated)
            await self.uow.audit_log_repo.record(
                entry=AuditLogEntry.record(
                    action=AuditAction.RESERVATION_UPDATE,
                    entity_type=AuditEntityType.RESERVATION,
                    entity_id=reservation_id,
                    actor_id=actor_id,
                    permission=Permission.RESERVATIONS_EDIT,
                    reservation_id=reservation_id,
                    context=context,
                    changes={
                        'fields': changed,
                        'before': {field: getattr(reservation, field) for field in changed},
                        'after': {field: getattr(updated, field) for field in changed},
                    },
                )
            )
            await self.uow.commit()

        return updated
