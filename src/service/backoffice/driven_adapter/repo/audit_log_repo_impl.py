from typing import List
from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.interface.i_audit_log_repo import AuditLogFilter, IAuditLogRepo
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.enum.audit_status import AuditStatus
from src.service.backoffice.driven_adapter.model.audit_log_model import AuditLogModel


class AuditLogRepoImpl(IAuditLogRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _model_to_entity(model: AuditLogModel) -> AuditLogEntry:
        return AuditLogEntry(
            id=model.id,
            action=model.action,
            entity_type=model.entity_type,
            entity_id=model.entity_id,
            actor_id=model.actor_id,
            permission=model.permission,
            reservation_id=model.reservation_id,
            description=model.description,
            changes=dict(model.changes or {}),
            status=AuditStatus(model.status),
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            created_at=model.created_at,
        )

    @staticmethod
    def _apply_filters(stmt: Select, filters: AuditLogFilter) -> Select:
        conditions = {
            AuditLogModel.actor_id: filters.actor_id,
            AuditLogModel.permission: filters.permission,
            AuditLogModel.entity_type: filters.entity_type,
            AuditLogModel.entity_id: filters.entity_id,
            AuditLogModel.reservation_id: filters.reservation_id,
            AuditLogModel.action: filters.action,
            AuditLogModel.status: filters.status,
        }
        for column, value in conditions.items():
            if value is not None:
                stmt = stmt.where(column == value)
        return stmt

    @Logger.io
    async def record(self, *, entry: AuditLogEntry) -> AuditLogEntry:
        model = AuditLogModel(
            id=entry.id,
            actor_id=entry.actor_id,
            permission=entry.permission,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            reservation_id=entry.reservation_id,
            action=entry.action,
            description=entry.description,
            changes=entry.changes,
            status=entry.status.value,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
        )
        if entry.created_at:
            model.created_at = entry.created_at
        self.session.add(model)
        await self.session.flush()
        return entry

    @Logger.io
    async def list_logs(
        self, *, filters: AuditLogFilter, limit: int, offset: int
    ) -> tuple[List[AuditLogEntry], int]:
        stmt = self._apply_filters(select(AuditLogModel), filters)
        total = await self.session.scalar(select(func.count()).select_from(stmt.subquery()))
        result = await self.session.execute(
            stmt.order_by(AuditLogModel.created_at.desc(), AuditLogModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()], total or 0

    @Logger.io
    async def delete_by_reservation(self, *, reservation_id: UUID) -> int:
        result = await self.session.execute(
            delete(AuditLogModel).where(AuditLogModel.reservation_id == reservation_id)
        )
        return result.rowcount or 0
