from enum import StrEnum


class AuditAction(StrEnum):
    RESERVATION_CREATE = 'reservation.create'
    RESERVATION_UPDATE = 'reservation.update'
    RESERVATION_CANCEL = 'reservation.cancel'
    RESERVATION_DELETE = 'reservation.delete'
    PAYMENT_ADD = 'payment.add'
    PAYMENT_DELETE = 'payment.delete'
    TICKET_GENERATE = 'ticket.generate'
    TICKET_REGENERATE_ARTIFACTS = 'ticket.regenerate_artifacts'
    TICKET_SCANNED = 'ticket.scanned'
    ENTRY_VALIDATE = 'entry.validate'


class AuditEntityType(StrEnum):
    RESERVATION = 'reservation'
    PAYMENT = 'payment'
    TICKET = 'ticket'
    PARTICIPANT = 'participant'
