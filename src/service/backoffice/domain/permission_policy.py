"""
Role → permission table.

Built once at import and exposed read-only; authorization is the pure
function has_permission, no shared mutable state involved.
"""

from types import MappingProxyType
from typing import Mapping

from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.enum.user_role import UserRole


ROLE_PERMISSIONS: Mapping[UserRole, frozenset[Permission]] = MappingProxyType(
    {
        UserRole.SUPERADMIN: frozenset(Permission),
        UserRole.ADMIN: frozenset(Permission) - {Permission.PAYMENTS_VIEW, Permission.AUDIT_VIEW},
        UserRole.CASHIER: frozenset(
            {
                Permission.RESERVATIONS_VIEW,
                Permission.RESERVATIONS_EDIT,
                Permission.PAYMENTS_ADD,
                Permission.TICKETS_VIEW,
            }
        ),
        UserRole.SCANNER: frozenset({Permission.TICKETS_VIEW, Permission.SCAN_VALIDATE}),
    }
)


def has_permission(role: UserRole | str, permission: Permission | str) -> bool:
    try:
        granted = ROLE_PERMISSIONS.get(UserRole(role), frozenset())
        return Permission(permission) in granted
    except ValueError:
        return False
