from enum import StrEnum


class Permission(StrEnum):
    RESERVATIONS_VIEW = 'reservations.view'
    RESERVATIONS_EDIT = 'reservations.edit'
    RESERVATIONS_DELETE = 'reservations.delete'
    PAYMENTS_VIEW = 'payments.view'
    PAYMENTS_ADD = 'payments.add'
    PAYMENTS_EDIT = 'payments.edit'
    PAYMENTS_DELETE = 'payments.delete'
    TICKETS_GENERATE = 'tickets.generate'
    TICKETS_VIEW = 'tickets.view'
    SCAN_VALIDATE = 'scan.validate'
    PACKS_MANAGE = 'packs.manage'
    USERS_MANAGE = 'users.manage'
    AUDIT_VIEW = 'audit.view'
