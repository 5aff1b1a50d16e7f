from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

import attrs

from src.platform.types import generate_uuid7
from src.service.backoffice.domain.enum.audit_status import AuditStatus
from src.service.backoffice.domain.value_object.audit_description import describe_action
from src.service.backoffice.domain.value_object.request_context import RequestContext


@attrs.define
class AuditLogEntry:
    """Append-only record of who did what to which entity. Never updated."""

    id: UUID
    action: str
    entity_type: str
    description: str
    entity_id: Optional[UUID] = None
    actor_id: Optional[UUID] = None
    permission: Optional[str] = None
    reservation_id: Optional[UUID] = None
    changes: dict[str, Any] = attrs.field(factory=dict)
    status: AuditStatus = AuditStatus.SUCCESS
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def record(
        cls,
        *,
        action: str,
        entity_type: str,
        entity_id: Optional[UUID],
        actor_id: Optional[UUID],
        permission: Optional[str],
        changes: dict[str, Any],
        reservation_id: Optional[UUID] = None,
        context: Optional[RequestContext] = None,
        status: AuditStatus = AuditStatus.SUCCESS,
    ) -> 'AuditLogEntry':
        context = context or RequestContext()
        return cls(
            id=generate_uuid7(),
            action=str(action),
            entity_type=str(entity_type),
            entity_id=entity_id,
            actor_id=actor_id,
            permission=str(permission) if permission else None,
            reservation_id=reservation_id,
            description=describe_action(action, changes),
            changes=changes,
            status=status,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            created_at=datetime.now(timezone.utc),
        )
