from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.backoffice_metrics import metrics
from src.service.backoffice.app.dto.payment_result import DeletePaymentResult
from src.service.backoffice.app.dto.reservation_summary import ReservationSummary
from src.service.backoffice.app.interface.i_proof_storage import IProofStorage
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext


class DeletePaymentUseCase:
    """
    Reverse one installment. Financial history is frozen once a ticket exists.

    The proof file is removed after commit; a failure there only logs a warning.
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
        payment_id: UUID,
        actor_id: Optional[UUID],
        context: Optional[RequestContext] = None,
    ) -> DeletePaymentResult:
        try:
            async with self.uow:
                reservation = await self.uow.reservation_repo.get_by_id_for_update(
                    reservation_id=reservation_id
                )
                if not reservation:
                    raise NotFoundError('Reservation not found')

                payment = await self.uow.payment_repo.get_by_id(payment_id=payment_id)
                if not payment or payment.reservation_id != reservation_id:
                    raise NotFoundError('Payment not found')

                updated = reservation.revert_payment(amount=payment.amount)
                await self.uow.payment_repo.delete(payment_id=payment_id)
                updated = await self.uow.reservation_repo.update(reservation=updated)

                await self.uow.audit_log_repo.record(
                    entry=AuditLogEntry.record(
                        action=AuditAction.PAYMENT_DELETE,
                        entity_type=AuditEntityType.PAYMENT,
                        entity_id=payment_id,
                        actor_id=actor_id,
                        permission=Permission.PAYMENTS_DELETE,
                        reservation_id=reservation_id,
                        context=context,
                        changes={
                            'amount': payment.amount,
                            'method': payment.method.value,
                            'total_paid_before': reservation.total_paid,
                            'total_paid_after': updated.total_paid,
                            'status_before': reservation.status.value,
                            'status_after': updated.status.value,
                        },
                    )
                )
                await self.uow.commit()
        except Exception as e:
            metrics.record_payment_operation(
                operation='delete', result=str(getattr(e, 'kind', 'internal'))
            )
            raise

        metrics.record_payment_operation(operation='delete', result='success')
        Logger.base.info(
            f'💸 [PAYMENT] -{payment.amount} on reservation {reservation_id} → {updated.status}'
        )

        if payment.proof_url:
            try:
                await self.proof_storage.delete(url=payment.proof_url)
            except Exception as e:
                Logger.base.warning(
                    f'⚠️ [PAYMENT] Could not delete proof {payment.proof_url}: {e}'
                )

        return DeletePaymentResult(reservation=ReservationSummary.from_reservation(updated))
