from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.service.backoffice.domain.enum.audit_status import AuditStatus

class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    action: str
    entity_type: str
    entity_id: Optional[UUID] = None
    actor_id: Optional[UUID] = None
    permission: Optional[str] = None
    reservation_id: Optional[UUID] = None
    description: str
    changes: dict[str, Any]
    status: AuditStatus
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None


class AuditLogPageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    data: List[AuditLogResponse]
    total: int
    limit: int
    offset: int
