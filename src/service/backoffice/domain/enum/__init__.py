"""Back office domain enums"""

from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.audit_status import AuditStatus
from src.service.backoffice.domain.enum.payment_method import PaymentMethod
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.enum.reservation_status import ReservationStatus
from src.service.backoffice.domain.enum.ticket_status import TicketStatus
from src.service.backoffice.domain.enum.user_role import UserRole

__all__ = [
    'AuditAction',
    'AuditEntityType',
    'AuditStatus',
    'PaymentMethod',
    'Permission',
    'ReservationStatus',
    'TicketStatus',
    'UserRole',
]
