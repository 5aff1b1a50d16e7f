"""
Unit tests for CreateTicketUseCase

Focus:
1. A fully paid reservation gets exactly one signed ticket
2. Ticket number collisions are retried with a fresh number
3. Rendering and delivery happen after commit and never undo issuance
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from src.platform.exception.exceptions import ConflictError, InternalError, NotFoundError
from src.service.backoffice.app.command.add_payment_use_case import AddPaymentUseCase
from src.service.backoffice.app.command.create_ticket_use_case import CreateTicketUseCase
from src.service.backoffice.app.command.delete_payment_use_case import DeletePaymentUseCase
from src.service.backoffice.domain.entity.ticket_entity import Ticket
from src.service.backoffice.domain.enum.audit_action import AuditAction
from src.service.backoffice.domain.enum.reservation_status import ReservationStatus
from src.service.backoffice.domain.enum.ticket_status import TicketStatus
from src.service.backoffice.domain.value_object.ticket_number import is_well_formed_ticket_number
from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload
from src.service.backoffice.driven_adapter.security.hmac_signer import HmacSha256Signer
from src.service.backoffice.driven_adapter.state.duplicate_request_guard import (
    InMemoryDuplicateRequestGuard,
)
from test.service.backoffice.unit.helpers import (
    CollaboratorMocks,
    make_participants,
    make_reservation,
)


ACTOR_ID = uuid4()
GENERATE_TICKET_NUMBER = (
    'src.service.backoffice.app.command.create_ticket_use_case.generate_ticket_number'
)


class TestCreateTicket:
    @pytest.fixture
    def mocks(self):
        return CollaboratorMocks()

    @pytest.fixture
    def signer(self):
        return HmacSha256Signer(secret='test-qr-secret')

    @pytest.fixture
    def paid_reservation(self, store):
        reservation = store.add_reservation(make_reservation().record_payment(amount=10000))
        store.add_participants(make_participants(reservation, 'Awa', 'Moussa'))
        return reservation

    def build(self, uow, mocks, signer, max_attempts=5) -> CreateTicketUseCase:
        return CreateTicketUseCase(
            uow=uow,
            signer=signer,
            renderer=mocks.renderer,
            notifier=mocks.notifier,
            dispatcher=mocks.dispatcher,
            ticket_number_prefix='MIP',
            max_attempts=max_attempts,
        )

    @pytest.mark.asyncio
    async def test_issues_signed_ticket(self, store, uow, mocks, signer, paid_reservation):
        result = await self.build(uow, mocks, signer).execute(
            reservation_id=paid_reservation.id, actor_id=ACTOR_ID
        )

        ticket = result.ticket
        payload = TicketPayload.from_json(ticket.qr_payload)
        assert is_well_formed_ticket_number(ticket.ticket_number)
        assert ticket.ticket_number.startswith('MIP-')
        assert payload.reservation_id == paid_reservation.id
        assert signer.verify(payload.message, payload.signature)
        assert ticket.status == TicketStatus.VALID
        assert result.reservation.status == ReservationStatus.TICKET_GENERATED
        assert result.qr_data_url == 'data:image/png;base64,AAAA'

        stored = store.tickets[ticket.id]
        assert stored.qr_image_url == f'/uploads/qr/{ticket.ticket_number}.png'
        assert stored.pdf_url == f'/uploads/tickets/{ticket.ticket_number}.pdf'
        assert all(p.ticket_id == ticket.id for p in store.participants.values())
        assert store.audit_actions() == [AuditAction.TICKET_GENERATE]
        assert mocks.dispatcher.names == ['ticket_delivery']

    @pytest.mark.asyncio
    async def test_second_issuance_is_conflict(self, store, uow, mocks, signer, paid_reservation):
        use_case = self.build(uow, mocks, signer)
        await use_case.execute(reservation_id=paid_reservation.id, actor_id=ACTOR_ID)

        with pytest.raises(ConflictError, match='already generated'):
            await use_case.execute(reservation_id=paid_reservation.id, actor_id=ACTOR_ID)

        assert len(store.tickets) == 1

    @pytest.mark.asyncio
    async def test_existing_ticket_row_blocks_issuance(
        self, store, uow, mocks, signer, paid_reservation
    ):
        """The unique reservation_id constraint holds even if the status check passed"""
        payload = TicketPayload(
            ticket_number='MIP-0-OLDONE', reservation_id=paid_reservation.id, timestamp=1
        )
        store.add_ticket(Ticket.issue(payload=payload, generated_by=None))

        with pytest.raises(ConflictError, match='already generated'):
            await self.build(uow, mocks, signer).execute(
                reservation_id=paid_reservation.id, actor_id=ACTOR_ID
            )

        assert store.reservations[paid_reservation.id].status == ReservationStatus.PAID
        assert len(store.tickets) == 1
        assert store.audit_logs == {}

    @pytest.mark.asyncio
    async def test_not_fully_paid(self, store, uow, mocks, signer):
        reservation = store.add_reservation(make_reservation().record_payment(amount=9000))

        with pytest.raises(ConflictError, match='not fully paid'):
            await self.build(uow, mocks, signer).execute(
                reservation_id=reservation.id, actor_id=ACTOR_ID
            )

        assert store.tickets == {}

    @pytest.mark.asyncio
    async def test_unknown_reservation(self, uow, mocks, signer):
        with pytest.raises(NotFoundError):
            await self.build(uow, mocks, signer).execute(reservation_id=uuid4(), actor_id=ACTOR_ID)

    @pytest.mark.asyncio
    async def test_collision_regenerates_number(self, store, uow, mocks, signer, paid_reservation):
        """
        Given: a ticket number already taken by another reservation
        When: the generator first returns that number
        Then: issuance retries and succeeds with the next number
        """
        other = store.add_reservation(make_reservation())
        taken = TicketPayload(ticket_number='MIP-1-TAKEN1', reservation_id=other.id, timestamp=1)
        store.add_ticket(Ticket.issue(payload=taken, generated_by=None))

        with patch(GENERATE_TICKET_NUMBER, side_effect=['MIP-1-TAKEN1', 'MIP-1-FRESH1']):
            result = await self.build(uow, mocks, signer).execute(
                reservation_id=paid_reservation.id, actor_id=ACTOR_ID
            )

        assert result.ticket.ticket_number == 'MIP-1-FRESH1'
        assert len(store.tickets) == 2

    @pytest.mark.asyncio
    async def test_collisions_exhausted(self, store, uow, mocks, signer, paid_reservation):
        other = store.add_reservation(make_reservation())
        taken = TicketPayload(ticket_number='MIP-1-TAKEN1', reservation_id=other.id, timestamp=1)
        store.add_ticket(Ticket.issue(payload=taken, generated_by=None))

        with patch(GENERATE_TICKET_NUMBER, return_value='MIP-1-TAKEN1'):
            with pytest.raises(InternalError):
                await self.build(uow, mocks, signer, max_attempts=3).execute(
                    reservation_id=paid_reservation.id, actor_id=ACTOR_ID
                )

        assert store.reservations[paid_reservation.id].status == ReservationStatus.PAID

    @pytest.mark.asyncio
    async def test_render_failure_keeps_ticket(self, store, uow, mocks, signer, paid_reservation):
        mocks.renderer.render_qr = AsyncMock(side_effect=OSError('disk full'))

        result = await self.build(uow, mocks, signer).execute(
            reservation_id=paid_reservation.id, actor_id=ACTOR_ID
        )

        assert result.qr_data_url is None
        assert store.tickets[result.ticket.id].qr_image_url is None
        assert store.reservations[paid_reservation.id].status == ReservationStatus.TICKET_GENERATED
        [(name, job)] = mocks.dispatcher.jobs
        await job()
        assert mocks.notifier.send_ticket_delivery.await_args.kwargs['pdf_bytes'] is None

    @pytest.mark.asyncio
    async def test_ticketed_reservation_rejects_payment_changes(
        self, store, uow, mocks, signer
    ):
        """
        Given: a reservation paid 4000 + 6000 and then ticketed
        When: a payment is added or one of its payments deleted
        Then: both are conflicts
        """
        reservation = store.add_reservation(make_reservation())
        pay = AddPaymentUseCase(
            uow=uow,
            proof_storage=mocks.proof_storage,
            duplicate_guard=InMemoryDuplicateRequestGuard(ttl_seconds=10),
            notifier=mocks.notifier,
            dispatcher=mocks.dispatcher,
        )
        first = await pay.execute(
            reservation_id=reservation.id, amount=4000, method='cash', actor_id=ACTOR_ID
        )
        await pay.execute(
            reservation_id=reservation.id, amount=6000, method='cash', actor_id=ACTOR_ID
        )
        await self.build(uow, mocks, signer).execute(
            reservation_id=reservation.id, actor_id=ACTOR_ID
        )

        with pytest.raises(ConflictError):
            await pay.execute(
                reservation_id=reservation.id, amount=1, method='card', actor_id=ACTOR_ID
            )
        with pytest.raises(ConflictError):
            await DeletePaymentUseCase(uow=uow, proof_storage=mocks.proof_storage).execute(
                reservation_id=reservation.id, payment_id=first.payment.id, actor_id=ACTOR_ID
            )

        assert store.reservations[reservation.id].total_paid == 10000
