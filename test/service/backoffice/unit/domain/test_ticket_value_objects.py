from uuid import uuid4

import pytest

from src.service.backoffice.domain.value_object.ticket_number import (
    generate_ticket_number,
    is_well_formed_ticket_number,
    to_base36,
)
from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload
from src.service.backoffice.domain.value_object.ticket_template import (
    FALLBACK_TEMPLATE,
    TicketTemplate,
    layout_for,
    resolve_ticket_template,
)


class TestTicketNumber:
    def test_base36(self):
        assert to_base36(0) == '0'
        assert to_base36(35) == 'Z'
        assert to_base36(36) == '10'

    def test_shape(self):
        number = generate_ticket_number(prefix='mip', now_ms=1_700_000_000_000)

        prefix, timestamp, random_part = number.split('-')
        assert prefix == 'MIP'
        assert timestamp == to_base36(1_700_000_000_000)
        assert len(random_part) == 6
        assert is_well_formed_ticket_number(number)

    def test_random_part_differs(self):
        numbers = {generate_ticket_number(prefix='MIP', now_ms=0) for _ in range(50)}

        assert len(numbers) > 1


class TestTicketPayload:
    def test_message_binds_number_reservation_and_time(self):
        reservation_id = uuid4()
        payload = TicketPayload(
            ticket_number='MIP-1-ABCDEF', reservation_id=reservation_id, timestamp=42
        )

        assert payload.message == f'MIP-1-ABCDEF|{reservation_id}|42'

    def test_from_json_restores_payload(self):
        payload = TicketPayload(
            ticket_number='MIP-1-ABCDEF', reservation_id=uuid4(), timestamp=42, signature='ab'
        )

        assert TicketPayload.from_json(payload.to_json()) == payload

    @pytest.mark.parametrize(
        'raw',
        [
            'not json',
            '[]',
            '{"ticket_number": "X", "reservation_id": "nope", "timestamp": 1, "signature": "a"}',
            '{"ticket_number": "X", "timestamp": "1", "signature": "a"}',
            '{"reservation_id": "00000000-0000-0000-0000-000000000000", "timestamp": 1}',
        ],
    )
    def test_from_json_rejects_malformed(self, raw):
        with pytest.raises(ValueError):
            TicketPayload.from_json(raw)


class TestTicketTemplate:
    @pytest.mark.parametrize(
        'value,expected',
        [
            ('vip', TicketTemplate.VIP),
            (' Family ', TicketTemplate.FAMILY),
            ('COUPLE', TicketTemplate.COUPLE),
            ('gold', FALLBACK_TEMPLATE),
            ('', FALLBACK_TEMPLATE),
            (None, FALLBACK_TEMPLATE),
        ],
    )
    def test_resolve_falls_back_to_simple(self, value, expected):
        assert resolve_ticket_template(value) == expected

    def test_every_template_has_a_layout(self):
        for template in TicketTemplate:
            assert layout_for(template).image_name.endswith('.jpg')
