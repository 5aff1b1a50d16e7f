from typing import Optional
from uuid import UUID

import attrs

from src.service.backoffice.domain.enum.user_role import UserRole


@attrs.define
class UserEntity:
    """Staff member acting on the back office, rebuilt from the JWT on each request"""

    id: UUID
    email: str = ''
    name: str = ''
    role: UserRole = UserRole.SCANNER
    is_active: bool = True
    phone: Optional[str] = None
