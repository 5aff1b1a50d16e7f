from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import ValidationError
from src.platform.types import generate_uuid7
from src.service.backoffice.domain.enum.payment_method import PaymentMethod


@attrs.define
class Payment:
    """One installment applied to a reservation. Never updated, only deleted."""

    id: UUID
    reservation_id: UUID
    amount: int
    method: PaymentMethod
    created_by: Optional[UUID] = None
    comment: Optional[str] = None
    proof_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @staticmethod
    def validate_input(*, amount: Any, method: Any) -> PaymentMethod:
        """
        Checked before any lock is taken.

        Raises:
            ValidationError: amount is not a positive integer or method is unknown
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError('Payment amount must be a positive integer')
        try:
            return PaymentMethod(method)
        except ValueError:
            allowed = ', '.join(m.value for m in PaymentMethod)
            raise ValidationError(f'Payment method must be one of: {allowed}')

    @classmethod
    def create(
        cls,
        *,
        reservation_id: UUID,
        amount: int,
        method: PaymentMethod | str,
        created_by: Optional[UUID],
        comment: Optional[str] = None,
        proof_url: Optional[str] = None,
    ) -> 'Payment':
        payment_method = cls.validate_input(amount=amount, method=method)
        return cls(
            id=generate_uuid7(),
            reservation_id=reservation_id,
            amount=amount,
            method=payment_method,
            created_by=created_by,
            comment=comment,
            proof_url=proof_url,
            created_at=datetime.now(timezone.utc),
        )
