from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import ConflictError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.platform.types import generate_uuid7
from src.service.backoffice.domain.entity.pack_entity import Pack
from src.service.backoffice.domain.enum.reservation_status import ReservationStatus


def derive_payment_status(*, total_paid: int, total_price: int) -> ReservationStatus:
    """pending if nothing paid, partial while below total, paid once total is reached"""
    if total_paid <= 0:
        return ReservationStatus.PENDING
    if total_paid < total_price:
        return ReservationStatus.PARTIAL
    return ReservationStatus.PAID


@attrs.define
class Reservation:
    id: UUID
    payer_name: str
    payer_phone: str
    pack_id: UUID
    pack_name_snapshot: str
    unit_price: int
    quantity: int
    total_price: int
    payer_email: Optional[str] = None
    ticket_template: Optional[str] = None
    total_paid: int = 0
    status: ReservationStatus = ReservationStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def remaining_amount(self) -> int:
        return self.total_price - self.total_paid

    @property
    def is_fully_paid(self) -> bool:
        return self.total_paid >= self.total_price

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        payer_name: str,
        payer_phone: str,
        payer_email: Optional[str],
        pack: Pack,
        quantity: int,
    ) -> 'Reservation':
        """Snapshot the pack name, price and template so later pack edits never reprice it"""
        if not payer_name or not payer_name.strip():
            raise ValidationError('Payer name is required')
        if not payer_phone or not payer_phone.strip():
            raise ValidationError('Payer phone is required')
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError('Quantity must be at least 1')

        now = datetime.now(timezone.utc)
        return cls(
            id=generate_uuid7(),
            payer_name=payer_name.strip(),
            payer_phone=payer_phone.strip(),
            payer_email=payer_email,
            pack_id=pack.id,
            pack_name_snapshot=pack.name,
            unit_price=pack.price,
            ticket_template=pack.ticket_template,
            quantity=quantity,
            total_price=pack.price * quantity,
            created_at=now,
            updated_at=now,
        )

    @Logger.io
    def record_payment(self, *, amount: int) -> 'Reservation':
        """
        Raises:
            ConflictError: reservation is terminal or amount exceeds the remaining balance
        """
        if self.status == ReservationStatus.CANCELLED:
            raise ConflictError('Cannot add payment to cancelled reservation')
        if self.status == ReservationStatus.TICKET_GENERATED:
            raise ConflictError('Cannot add payment after ticket generation')
        if amount > self.remaining_amount:
            raise ConflictError(
                f'Payment amount exceeds remaining balance ({self.remaining_amount})'
            )
        return self._with_total_paid(self.total_paid + amount)

    @Logger.io
    def revert_payment(self, *, amount: int) -> 'Reservation':
        if self.status == ReservationStatus.TICKET_GENERATED:
            raise ConflictError('Cannot delete payment after ticket generation')
        if self.status == ReservationStatus.CANCELLED:
            raise ConflictError('Cannot delete payment of cancelled reservation')
        new_total_paid = self.total_paid - amount
        if new_total_paid < 0:
            raise ConflictError('Payment amount exceeds total paid on reservation')
        return self._with_total_paid(new_total_paid)

    @Logger.io
    def validate_can_issue_ticket(self) -> None:
        if self.status == ReservationStatus.CANCELLED:
            raise ConflictError('Reservation is cancelled')
        if not self.is_fully_paid:
            raise ConflictError('Reservation not fully paid')
        if self.status == ReservationStatus.TICKET_GENERATED:
            raise ConflictError('Ticket already generated')

    def mark_ticket_generated(self) -> 'Reservation':
        self.validate_can_issue_ticket()
        return attrs.evolve(
            self,
            status=ReservationStatus.TICKET_GENERATED,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def update_contact(
        self,
        *,
        payer_name: Optional[str] = None,
        payer_phone: Optional[str] = None,
        payer_email: Optional[str] = None,
    ) -> 'Reservation':
        """
        Fields left as None are kept. Amounts, pack and status are never touched here.

        Raises:
            ConflictError: reservation is cancelled
            ValidationError: name or phone given but blank
        """
        if self.status == ReservationStatus.CANCELLED:
            raise ConflictError('Cannot edit cancelled reservation')
        if payer_name is not None and not payer_name.strip():
            raise ValidationError('Payer name is required')
        if payer_phone is not None and not payer_phone.strip():
            raise ValidationError('Payer phone is required')

        return attrs.evolve(
            self,
            payer_name=payer_name.strip() if payer_name is not None else self.payer_name,
            payer_phone=payer_phone.strip() if payer_phone is not None else self.payer_phone,
            payer_email=payer_email if payer_email is not None else self.payer_email,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def cancel(self) -> 'Reservation':
        if self.status == ReservationStatus.TICKET_GENERATED:
            raise ConflictError('Cannot cancel reservation after ticket generation')
        if self.status == ReservationStatus.CANCELLED:
            raise ConflictError('Reservation already cancelled')
        return attrs.evolve(
            self, status=ReservationStatus.CANCELLED, updated_at=datetime.now(timezone.utc)
        )

    def _with_total_paid(self, total_paid: int) -> 'Reservation':
        return attrs.evolve(
            self,
            total_paid=total_paid,
            status=derive_payment_status(total_paid=total_paid, total_price=self.total_price),
            updated_at=datetime.now(timezone.utc),
        )
