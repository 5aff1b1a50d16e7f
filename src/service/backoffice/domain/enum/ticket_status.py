from enum import StrEnum


class TicketStatus(StrEnum):
    VALID = 'valid'
    USED = 'used'
    CANCELLED = 'cancelled'
