from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.interface.i_audit_log_repo import AuditLogFilter
from src.service.backoffice.app.query.list_audit_logs_use_case import ListAuditLogsUseCase
from src.service.backoffice.domain.entity.user_entity import UserEntity
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.driving_adapter.http_controller.auth.role_auth import (
    require_permission,
)
from src.service.backoffice.driving_adapter.http_controller.schema.audit_schema import (
    AuditLogPageResponse,
)


router = APIRouter()


@router.get('/logs')
@Logger.io
async def list_audit_logs(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    actor_id: Optional[UUID] = None,
    permission: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[UUID] = None,
    reservation_id: Optional[UUID] = None,
    action: Optional[str] = None,
    audit_status: Optional[str] = Query(None, alias='status'),
    current_user: UserEntity = Depends(require_permission(Permission.AUDIT_VIEW)),
    use_case: ListAuditLogsUseCase = Depends(ListAuditLogsUseCase.depends),
) -> AuditLogPageResponse:
    page = await use_case.execute(
        filters=AuditLogFilter(
            actor_id=actor_id,
            permission=permission,
            entity_type=entity_type,
            entity_id=entity_id,
            reservation_id=reservation_id,
            action=action,
            status=audit_status,
        ),
        limit=limit,
        offset=offset,
    )
    return AuditLogPageResponse.model_validate(page)
