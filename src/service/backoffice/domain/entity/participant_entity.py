from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import ConflictError, ValidationError
from src.platform.types import generate_uuid7


@attrs.define
class Participant:
    id: UUID
    reservation_id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    entrance_validated: bool = False
    validated_at: Optional[datetime] = None
    ticket_id: Optional[UUID] = None

    @classmethod
    def create(
        cls,
        *,
        reservation_id: UUID,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> 'Participant':
        if not name or not name.strip():
            raise ValidationError('Participant name is required')
        return cls(
            id=generate_uuid7(),
            reservation_id=reservation_id,
            name=name.strip(),
            email=email,
            phone=phone,
        )

    def validate_entrance(self) -> 'Participant':
        if self.entrance_validated:
            raise ConflictError('Participant already validated')
        return attrs.evolve(
            self, entrance_validated=True, validated_at=datetime.now(timezone.utc)
        )
