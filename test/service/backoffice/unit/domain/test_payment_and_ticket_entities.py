from uuid import uuid4

import pytest

from src.platform.exception.exceptions import ConflictError, ValidationError
from src.service.backoffice.domain.entity.participant_entity import Participant
from src.service.backoffice.domain.entity.payment_entity import Payment
from src.service.backoffice.domain.entity.ticket_entity import Ticket
from src.service.backoffice.domain.enum.payment_method import PaymentMethod
from src.service.backoffice.domain.enum.ticket_status import TicketStatus
from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload


class TestPaymentValidateInput:
    @pytest.mark.parametrize('method', ['cash', 'momo', 'orange', 'card', 'other'])
    def test_accepts_known_methods(self, method):
        assert Payment.validate_input(amount=1, method=method) == PaymentMethod(method)

    @pytest.mark.parametrize('amount', [0, -5, 1.5, '100', None, True])
    def test_rejects_non_positive_or_non_integer_amount(self, amount):
        with pytest.raises(ValidationError):
            Payment.validate_input(amount=amount, method='cash')

    @pytest.mark.parametrize('method', ['', 'bitcoin', None])
    def test_rejects_unknown_method(self, method):
        with pytest.raises(ValidationError, match='Payment method'):
            Payment.validate_input(amount=100, method=method)


class TestTicket:
    @pytest.fixture
    def ticket(self):
        payload = TicketPayload(
            ticket_number='MIP-ABC-123456',
            reservation_id=uuid4(),
            timestamp=1_700_000_000,
            signature='ff' * 32,
        )
        return Ticket.issue(payload=payload, generated_by=None)

    def test_issue_keeps_signed_payload(self, ticket):
        assert ticket.status == TicketStatus.VALID
        assert ticket.payload.signature == 'ff' * 32
        assert ticket.generated_at.timestamp() == 1_700_000_000

    def test_mark_used_once(self, ticket):
        used = ticket.mark_used()

        assert used.status == TicketStatus.USED
        with pytest.raises(ConflictError, match='already used'):
            used.mark_used()

    def test_cancelled_ticket_cannot_admit(self, ticket):
        ticket.status = TicketStatus.CANCELLED

        with pytest.raises(ConflictError, match='cancelled'):
            ticket.validate_can_admit()


class TestParticipant:
    def test_requires_name(self):
        with pytest.raises(ValidationError):
            Participant.create(reservation_id=uuid4(), name='  ')

    def test_validate_entrance_only_once(self):
        participant = Participant.create(reservation_id=uuid4(), name='Moussa')

        validated = participant.validate_entrance()

        assert validated.entrance_validated is True
        assert validated.validated_at is not None
        with pytest.raises(ConflictError, match='already validated'):
            validated.validate_entrance()
