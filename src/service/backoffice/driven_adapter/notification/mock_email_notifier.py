"""Mock email notifier: logs messages instead of sending them."""

from datetime import datetime, timezone
from typing import List, Optional

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.interface.i_reservation_notifier import IReservationNotifier
from src.service.backoffice.domain.entity.participant_entity import Participant
from src.service.backoffice.domain.entity.payment_entity import Payment
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.entity.ticket_entity import Ticket


class MockEmailNotifier(IReservationNotifier):
    def __init__(self, *, sender: str, debug: bool = True):
        self.sender = sender
        self.debug = debug
        self.sent_emails: List[dict] = []  # Store sent emails for testing

    @Logger.io
    async def send_email(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        attachment: Optional[tuple[str, bytes]] = None,
    ) -> bool:
        email_data = {
            'from': self.sender,
            'to': to,
            'subject': subject,
            'body': body,
            'attachment': attachment[0] if attachment else None,
            'sent_at': datetime.now(timezone.utc),
        }
        self.sent_emails.append(email_data)

        if self.debug:
            Logger.base.info(f'📧 [MAIL] {subject} -> {to}')
        return True

    @Logger.io
    async def send_reservation_confirmation(
        self, *, reservation: Reservation, participants: List[Participant]
    ) -> None:
        if not reservation.payer_email:
            return
        names = ', '.join(p.name for p in participants) or reservation.payer_name
        body = (
            f'Dear {reservation.payer_name},\n\n'
            f'Your reservation for {reservation.pack_name_snapshot} x{reservation.quantity} '
            f'is registered.\n'
            f'Participants: {names}\n'
            f'Total: {reservation.total_price:,}\n'
        )
        await self.send_email(
            to=reservation.payer_email, subject='Reservation confirmed', body=body
        )

    @Logger.io
    async def send_payment_confirmation(
        self, *, reservation: Reservation, payment: Payment, all_payments: List[Payment]
    ) -> None:
        if not reservation.payer_email:
            return
        history = '\n'.join(f'- {p.amount:,} ({p.method})' for p in all_payments)
        body = (
            f'Dear {reservation.payer_name},\n\n'
            f'We received your payment of {payment.amount:,} ({payment.method}).\n'
            f'Paid so far: {reservation.total_paid:,} / {reservation.total_price:,}\n'
            f'Remaining: {reservation.remaining_amount:,}\n\n'
            f'Payments:\n{history}\n'
        )
        await self.send_email(to=reservation.payer_email, subject='Payment received', body=body)

    @Logger.io
    async def send_ticket_delivery(
        self,
        *,
        reservation: Reservation,
        ticket: Ticket,
        participants: List[Participant],
        pdf_bytes: Optional[bytes],
    ) -> None:
        recipients = [reservation.payer_email] + [p.email for p in participants]
        body = (
            f'Your ticket {ticket.ticket_number} for {reservation.pack_name_snapshot} '
            f'is attached. Show the QR code at the entrance.\n'
        )
        attachment = (f'{ticket.ticket_number}.pdf', pdf_bytes) if pdf_bytes else None
        for to in dict.fromkeys(r for r in recipients if r):
            await self.send_email(
                to=to, subject=f'Your ticket {ticket.ticket_number}', body=body, attachment=attachment
            )
