from uuid import uuid4

import pytest

from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.service.backoffice.app.command.add_payment_use_case import AddPaymentUseCase
from src.service.backoffice.app.command.delete_payment_use_case import DeletePaymentUseCase
from src.service.backoffice.app.dto.proof_file import ProofFile
from src.service.backoffice.domain.enum.audit_action import AuditAction
from src.service.backoffice.domain.enum.reservation_status import ReservationStatus
from src.service.backoffice.driven_adapter.state.duplicate_request_guard import (
    InMemoryDuplicateRequestGuard,
)
from test.service.backoffice.unit.helpers import CollaboratorMocks, make_reservation


ACTOR_ID = uuid4()


class TestDeletePayment:
    @pytest.fixture
    def mocks(self):
        return CollaboratorMocks()

    @pytest.fixture
    def reservation(self, store):
        return store.add_reservation(make_reservation())

    async def _pay(self, uow, mocks, reservation, amount, proof=None):
        use_case = AddPaymentUseCase(
            uow=uow,
            proof_storage=mocks.proof_storage,
            duplicate_guard=InMemoryDuplicateRequestGuard(ttl_seconds=10),
            notifier=mocks.notifier,
            dispatcher=mocks.dispatcher,
        )
        result = await use_case.execute(
            reservation_id=reservation.id,
            amount=amount,
            method='cash',
            actor_id=ACTOR_ID,
            proof=proof,
        )
        return result.payment

    @pytest.mark.asyncio
    async def test_paid_back_to_partial(self, store, uow, mocks, reservation):
        """
        Given: 4000 + 6000 paid (status paid)
        When: the 6000 payment is deleted
        Then: status partial, total_paid 4000, its proof is removed
        """
        await self._pay(uow, mocks, reservation, 4000)
        second = await self._pay(
            uow, mocks, reservation, 6000, proof=ProofFile(filename='r.jpg', content=b'jpg')
        )

        result = await DeletePaymentUseCase(uow=uow, proof_storage=mocks.proof_storage).execute(
            reservation_id=reservation.id, payment_id=second.id, actor_id=ACTOR_ID
        )

        assert result.reservation.status == ReservationStatus.PARTIAL
        assert result.reservation.total_paid == 4000
        assert result.message == 'Payment deleted'
        assert [p.amount for p in store.payments_of(reservation.id)] == [4000]
        assert store.audit_actions()[-1] == AuditAction.PAYMENT_DELETE
        mocks.proof_storage.delete.assert_awaited_once_with(url=second.proof_url)

    @pytest.mark.asyncio
    async def test_payment_of_other_reservation_is_not_found(self, store, uow, mocks, reservation):
        other = store.add_reservation(make_reservation())
        payment = await self._pay(uow, mocks, other, 1000)

        with pytest.raises(NotFoundError, match='Payment not found'):
            await DeletePaymentUseCase(uow=uow, proof_storage=mocks.proof_storage).execute(
                reservation_id=reservation.id, payment_id=payment.id, actor_id=ACTOR_ID
            )

        assert store.reservations[other.id].total_paid == 1000

    @pytest.mark.asyncio
    async def test_conflict_after_ticket_generation(self, store, uow, mocks, reservation):
        payment = await self._pay(uow, mocks, reservation, 10000)
        store.reservations[reservation.id] = store.reservations[
            reservation.id
        ].mark_ticket_generated()

        with pytest.raises(ConflictError):
            await DeletePaymentUseCase(uow=uow, proof_storage=mocks.proof_storage).execute(
                reservation_id=reservation.id, payment_id=payment.id, actor_id=ACTOR_ID
            )

        assert len(store.payments_of(reservation.id)) == 1

    @pytest.mark.asyncio
    async def test_proof_cleanup_failure_does_not_fail_delete(self, store, uow, mocks, reservation):
        payment = await self._pay(
            uow, mocks, reservation, 1000, proof=ProofFile(filename='r.png', content=b'png')
        )
        mocks.proof_storage.delete.side_effect = OSError('disk gone')

        result = await DeletePaymentUseCase(uow=uow, proof_storage=mocks.proof_storage).execute(
            reservation_id=reservation.id, payment_id=payment.id, actor_id=ACTOR_ID
        )

        assert result.reservation.status == ReservationStatus.PENDING
        assert store.payments_of(reservation.id) == []
