from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import ConflictError, ValidationError


@attrs.define
class Pack:
    id: UUID
    name: str
    price: int  # smallest currency unit
    description: Optional[str] = None
    capacity: Optional[int] = None  # participants per unit, None for single-person packs
    ticket_template: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def participants_per_unit(self) -> int:
        return self.capacity or 1

    def validate_can_be_reserved(self, *, quantity: int, participants_count: int) -> None:
        if not self.is_active:
            raise ConflictError('Pack is not available')
        if participants_count > self.participants_per_unit * quantity:
            raise ValidationError('Too many participants for this pack')
