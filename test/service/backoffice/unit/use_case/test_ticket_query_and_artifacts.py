from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.platform.exception.exceptions import NotFoundError
from src.service.backoffice.app.command.regenerate_ticket_artifacts_use_case import (
    RegenerateTicketArtifactsUseCase,
)
from src.service.backoffice.app.query.get_ticket_use_case import GetTicketUseCase
from src.service.backoffice.domain.entity.ticket_entity import Ticket
from src.service.backoffice.domain.enum.audit_action import AuditAction
from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload
from test.service.backoffice.unit.helpers import (
    CollaboratorMocks,
    make_participants,
    make_reservation,
)


@pytest.fixture
def ticketed(store):
    reservation = store.add_reservation(
        make_reservation().record_payment(amount=10000).mark_ticket_generated()
    )
    store.add_participants(make_participants(reservation, 'Awa'))
    payload = TicketPayload(
        ticket_number='MIP-M1ZK3J2Q-7XQ0BD',
        reservation_id=reservation.id,
        timestamp=1760000000,
        signature='ab' * 32,
    )
    return store.add_ticket(Ticket.issue(payload=payload, generated_by=None))


class TestGetTicket:
    @pytest.mark.asyncio
    async def test_detail(self, uow, ticketed):
        detail = await GetTicketUseCase(uow=uow).execute(ticket_id=ticketed.id)

        assert detail.ticket.ticket_number == ticketed.ticket_number
        assert detail.reservation.id == ticketed.reservation_id
        assert [p.name for p in detail.participants] == ['Awa']

    @pytest.mark.asyncio
    async def test_unknown(self, uow):
        with pytest.raises(NotFoundError):
            await GetTicketUseCase(uow=uow).execute(ticket_id=uuid4())


class TestRegenerateTicketArtifacts:
    @pytest.mark.asyncio
    async def test_renders_from_stored_payload(self, store, uow, ticketed):
        """
        Given: an issued ticket whose artifacts were never rendered
        When: artifacts are regenerated
        Then: refs are stored, the signed payload is untouched, an audit entry is written
        """
        mocks = CollaboratorMocks()

        result = await RegenerateTicketArtifactsUseCase(uow=uow, renderer=mocks.renderer).execute(
            ticket_id=ticketed.id, actor_id=uuid4()
        )

        stored = store.tickets[ticketed.id]
        assert stored.has_artifacts
        assert stored.qr_payload == ticketed.qr_payload
        assert result.qr_data_url == 'data:image/png;base64,AAAA'
        rendered_payload = mocks.renderer.render_qr.await_args.kwargs['payload']
        assert rendered_payload == ticketed.payload
        assert store.audit_actions() == [AuditAction.TICKET_REGENERATE_ARTIFACTS]

    @pytest.mark.asyncio
    async def test_render_failure_propagates(self, store, uow, ticketed):
        mocks = CollaboratorMocks()
        mocks.renderer.render_ticket_pdf = AsyncMock(side_effect=OSError('disk full'))

        with pytest.raises(OSError):
            await RegenerateTicketArtifactsUseCase(uow=uow, renderer=mocks.renderer).execute(
                ticket_id=ticketed.id, actor_id=None
            )

        assert not store.tickets[ticketed.id].has_artifacts
        assert store.audit_logs == {}
