"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.backoffice.driven_adapter.model.audit_log_model import AuditLogModel
from src.service.backoffice.driven_adapter.model.pack_model import PackModel
from src.service.backoffice.driven_adapter.model.participant_model import ParticipantModel
from src.service.backoffice.driven_adapter.model.payment_model import PaymentModel
from src.service.backoffice.driven_adapter.model.reservation_model import ReservationModel
from src.service.backoffice.driven_adapter.model.ticket_model import TicketModel

__all__ = [
    'AuditLogModel',
    'PackModel',
    'ParticipantModel',
    'PaymentModel',
    'ReservationModel',
    'TicketModel',
]
