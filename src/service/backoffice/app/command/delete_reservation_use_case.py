from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.interface.i_proof_storage import IProofStorage
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext


class DeleteReservationUseCase:
    """
    Permanent delete with cascading purge.

    Participants, payments, the ticket and every audit entry tied to the
    reservation go in one transaction. A single `reservation.delete` entry,
    not linked to the reservation, records the purge itself.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, proof_storage: IProofStorage) -> None:
        self.uow = uow
        self.proof_storage = proof_storage

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        proof_storage: IProofStorage = Depends(Provide[Container.proof_storage]),
    ) -> Self:
        return cls(uow=uow, proof_storage=proof_storage)

    @Logger.io
    async def execute(
        self,
        *,
        reservation_id: UUID,
        actor_id: Optional[UUID],
        context: Optional[RequestContext] = None,
    ) -> None:
        async with self.uow:
            reservation = await self.uow.reservation_repo.get_by_id_for_update(
                reservation_id=reservation_id
            )
            if not reservation:
                raise NotFoundError('Reservation not found')

            await self.uow.participant_repo.delete_by_reservation(reservation_id=reservation_id)
            await self.uow.ticket_repo.delete_by_reservation(reservation_id=reservation_id)
            payments = await self.uow.payment_repo.delete_by_reservation(
                reservation_id=reservation_id
            )
            purged_logs = await self.uow.audit_log_repo.delete_by_reservation(
                reservation_id=reservation_id
            )
            await self.uow.reservation_repo.delete(reservation_id=reservation_id)

            await self.uow.audit_log_repo.record(
                entry=AuditLogEntry.record(
                    action=AuditAction.RESERVATION_DELETE,
                    entity_type=AuditEntityType.RESERVATION,
                    entity_id=reservation_id,
                    actor_id=actor_id,
                    permission=Permission.RESERVATIONS_DELETE,
                    context=context,
                    changes={
                        'payer_name': reservation.payer_name,
                        'pack_name': reservation.pack_name_snapshot,
                        'status': reservation.status.value,
                        'total_paid': reservation.total_paid,
                        'payments_count': len(payments),
                        'audit_entries_purged': purged_logs,
                    },
                )
            )
            await self.uow.commit()

        Logger.base.info(
            f'🗑️ [RESERVATION] {reservation_id} purged ({len(payments)} payments)'
        )
        for payment in payments:
            if not payment.proof_url:
                continue
            try:
                await self.proof_storage.delete(url=payment.proof_url)
            except Exception as e:
                Logger.base.warning(
                    f'⚠️ [RESERVATION] Could not delete proof {payment.proof_url}: {e}'
                )
