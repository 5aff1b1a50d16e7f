from typing import Any
from uuid import UUID

import attrs
import orjson


@attrs.frozen
class TicketPayload:
    """
    Content of a ticket's QR code.

    The signature covers `ticket_number|reservation_id|timestamp`, binding the
    ticket identity to its reservation and issuance time.
    """

    ticket_number: str
    reservation_id: UUID
    timestamp: int
    signature: str = ''

    @property
    def message(self) -> str:
        return build_signing_message(
            ticket_number=self.ticket_number,
            reservation_id=self.reservation_id,
            timestamp=self.timestamp,
        )

    def with_signature(self, signature: str) -> 'TicketPayload':
        return attrs.evolve(self, signature=signature)

    def to_dict(self) -> dict[str, Any]:
        return {
            'ticket_number': self.ticket_number,
            'reservation_id': str(self.reservation_id),
            'timestamp': self.timestamp,
            'signature': self.signature,
        }

    def to_json(self) -> str:
        return orjson.dumps(self.to_dict()).decode()

    @classmethod
    def from_json(cls, raw: str | bytes) -> 'TicketPayload':
        """
        Raises:
            ValueError: payload is not JSON or lacks a well-typed field
        """
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise ValueError('QR payload is not valid JSON') from e
        if not isinstance(data, dict):
            raise ValueError('QR payload must be a JSON object')

        ticket_number = data.get('ticket_number')
        signature = data.get('signature')
        timestamp = data.get('timestamp')
        if not isinstance(ticket_number, str) or not ticket_number:
            raise ValueError('QR payload is missing ticket_number')
        if not isinstance(signature, str) or not signature:
            raise ValueError('QR payload is missing signature')
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            raise ValueError('QR payload timestamp must be an integer')
        try:
            reservation_id = UUID(str(data.get('reservation_id')))
        except ValueError as e:
            raise ValueError('QR payload reservation_id is not a UUID') from e

        return cls(
            ticket_number=ticket_number,
            reservation_id=reservation_id,
            timestamp=timestamp,
            signature=signature,
        )


def build_signing_message(*, ticket_number: str, reservation_id: UUID, timestamp: int) -> str:
    return f'{ticket_number}|{reservation_id}|{timestamp}'
