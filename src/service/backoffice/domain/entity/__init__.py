"""Back office domain entities"""

from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.entity.pack_entity import Pack
from src.service.backoffice.domain.entity.participant_entity import Participant
from src.service.backoffice.domain.entity.payment_entity import Payment
from src.service.backoffice.domain.entity.reservation_entity import (
    Reservation,
    derive_payment_status,
)
from src.service.backoffice.domain.entity.ticket_entity import Ticket
from src.service.backoffice.domain.entity.user_entity import UserEntity

__all__ = [
    'AuditLogEntry',
    'Pack',
    'Participant',
    'Payment',
    'Reservation',
    'Ticket',
    'UserEntity',
    'derive_payment_status',
]
