import pytest

from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.enum.user_role import UserRole
from src.service.backoffice.domain.permission_policy import ROLE_PERMISSIONS, has_permission


class TestPermissionPolicy:
    def test_superadmin_has_everything(self):
        assert all(has_permission(UserRole.SUPERADMIN, p) for p in Permission)

    @pytest.mark.parametrize(
        'role,permission,expected',
        [
            (UserRole.CASHIER, Permission.PAYMENTS_ADD, True),
            (UserRole.CASHIER, Permission.PAYMENTS_DELETE, False),
            (UserRole.CASHIER, Permission.TICKETS_GENERATE, False),
            (UserRole.SCANNER, Permission.SCAN_VALIDATE, True),
            (UserRole.SCANNER, Permission.RESERVATIONS_VIEW, False),
            (UserRole.ADMIN, Permission.RESERVATIONS_DELETE, True),
            (UserRole.ADMIN, Permission.AUDIT_VIEW, False),
        ],
    )
    def test_role_table(self, role, permission, expected):
        assert has_permission(role, permission) is expected

    def test_unknown_role_or_permission_is_denied(self):
        assert has_permission('janitor', Permission.TICKETS_VIEW) is False
        assert has_permission(UserRole.SUPERADMIN, 'rockets.launch') is False

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ROLE_PERMISSIONS[UserRole.SCANNER] = frozenset(Permission)  # type: ignore[index]
