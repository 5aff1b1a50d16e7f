from functools import partial
from typing import List, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.backoffice_metrics import metrics
from src.service.backoffice.app.dto.payment_result import AddPaymentResult
from src.service.backoffice.app.dto.proof_file import ProofFile
from src.service.backoffice.app.dto.reservation_summary import ReservationSummary
from src.service.backoffice.app.interface.i_duplicate_request_guard import (
    IDuplicateRequestGuard,
)
from src.service.backoffice.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.backoffice.app.interface.i_proof_storage import IProofStorage
from src.service.backoffice.app.interface.i_reservation_notifier import IReservationNotifier
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.entity.payment_entity import Payment
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.payment_method import PaymentMethod
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext


class AddPaymentUseCase:
    """
    Apply one installment to a reservation.

    Flow:
    1. Validate amount/method (no lock taken yet)
    2. Claim the duplicate-request fingerprint
    3. Store the proof file, if any
    4. Lock reservation row → check state and remaining balance → insert
       payment → update total_paid/status → audit entry → commit
    5. Queue the payment confirmation

    Any failure before commit releases the fingerprint and removes the
    stored proof file so nothing is left behind.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        proof_storage: IProofStorage,
        duplicate_guard: IDuplicateRequestGuard,
        notifier: IReservationNotifier,
        dispatcher: INotificationDispatcher,
    ) -> None:
        self.uow = uow
        self.proof_storage = proof_storage
        self.duplicate_guard = duplicate_guard
        self.notifier = notifier
        self.dispatcher = dispatcher

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        proof_storage: IProofStorage = Depends(Provide[Container.proof_storage]),
        duplicate_guard: IDuplicateRequestGuard = Depends(Provide[Container.duplicate_guard]),
        notifier: IReservationNotifier = Depends(Provide[Container.notifier]),
        dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(
            uow=uow,
            proof_storage=proof_storage,
            duplicate_guard=duplicate_guard,
            notifier=notifier,
            dispatcher=dispatcher,
        )

    @Logger.io
    async def execute(
        self,
        *,
        reservation_id: UUID,
        amount: int,
        method: str,
        actor_id: Optional[UUID],
        comment: Optional[str] = None,
        proof: Optional[ProofFile] = None,
        context: Optional[RequestContext] = None,
    ) -> AddPaymentResult:
        payment_method = Payment.validate_input(amount=amount, method=method)

        fingerprint = self.duplicate_guard.claim(
            scope='payment', parts=(reservation_id, actor_id, amount, payment_method)
        )
        if fingerprint is None:
            metrics.record_payment_operation(operation='add', result='duplicate')
            raise ConflictError('Duplicate payment request')

        proof_url: Optional[str] = None
        try:
            if proof is not None:
                proof_url = await self.proof_storage.save(
                    reservation_id=reservation_id, proof=proof
                )
            payment, reservation, all_payments = await self._apply_payment(
                reservation_id=reservation_id,
                amount=amount,
                method=payment_method,
                actor_id=actor_id,
                comment=comment,
                proof_url=proof_url,
                context=context,
            )
        except Exception as e:
            self.duplicate_guard.release(fingerprint)
            if proof_url:
                await self._discard_proof(proof_url)
            metrics.record_payment_operation(
                operation='add', result=str(getattr(e, 'kind', 'internal'))
            )
            raise

        metrics.record_payment_operation(operation='add', result='success')
        metrics.record_payment_amount(method=payment_method, amount=amount)
        Logger.base.info(
            f'💰 [PAYMENT] +{amount} ({payment_method}) on reservation {reservation_id} '
            f'→ {reservation.status}'
        )

        self.dispatcher.dispatch(
            name='payment_confirmation',
            job=partial(
                self.notifier.send_payment_confirmation,
                reservation=reservation,
                payment=payment,
                all_payments=all_payments,
            ),
        )
        return AddPaymentResult(
            payment=payment,
            reservation=ReservationSummary.from_reservation(reservation),
        )

    async def _apply_payment(
        self,
        *,
        reservation_id: UUID,
        amount: int,
        method: PaymentMethod,
        actor_id: Optional[UUID],
        comment: Optional[str],
        proof_url: Optional[str],
        context: Optional[RequestContext],
    ) -> tuple[Payment, Reservation, List[Payment]]:
        async with self.uow:
            reservation = await self.uow.reservation_repo.get_by_id_for_update(
                reservation_id=reservation_id
            )
            if not reservation:
                raise NotFoundError('Reservation not found')

            updated = reservation.record_payment(amount=amount)
            payment = await self.uow.payment_repo.create(
                payment=Payment.create(
                    reservation_id=reservation_id,
                    amount=amount,
                    method=method,
                    created_by=actor_id,
                    comment=comment,
                    proof_url=proof_url,
                )
            )
            updated = await self.uow.reservation_repo.update(reservation=updated)

            await self.uow.audit_log_repo.record(
                entry=AuditLogEntry.record(
                    action=AuditAction.PAYMENT_ADD,
                    entity_type=AuditEntityType.PAYMENT,
                    entity_id=payment.id,
                    actor_id=actor_id,
                    permission=Permission.PAYMENTS_ADD,
                    reservation_id=reservation_id,
                    context=context,
                    changes={
                        'amount': amount,
                        'method': method.value,
                        'total_paid_before': reservation.total_paid,
                        'total_paid_after': updated.total_paid,
                        'status_before': reservation.status.value,
                        'status_after': updated.status.value,
                    },
                )
            )
            all_payments = await self.uow.payment_repo.list_by_reservation(
                reservation_id=reservation_id
            )
            await self.uow.commit()

        return payment, updated, all_payments

    async def _discard_proof(self, proof_url: str) -> None:
        try:
            await self.proof_storage.delete(url=proof_url)
        except Exception as e:
            Logger.base.warning(f'⚠️ [PAYMENT] Could not remove orphan proof {proof_url}: {e}')

