from enum import StrEnum


class UserRole(StrEnum):
    SUPERADMIN = 'superadmin'
    ADMIN = 'admin'
    CASHIER = 'cashier'
    SCANNER = 'scanner'
