from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

import attrs

from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry


@attrs.frozen
class AuditLogFilter:
    actor_id: Optional[UUID] = None
    permission: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[UUID] = None
    reservation_id: Optional[UUID] = None
    action: Optional[str] = None
    status: Optional[str] = None


class IAuditLogRepo(ABC):
    """
    Audit sink. record() must run on the same session as the mutation it
    documents so both commit or roll back together.
    """

    @abstractmethod
    async def record(self, *, entry: AuditLogEntry) -> AuditLogEntry:
        pass

    @abstractmethod
    async def list_logs(
        self, *, filters: AuditLogFilter, limit: int, offset: int
    ) -> tuple[List[AuditLogEntry], int]:
        """Newest first, with the total count matching the filters"""
        pass

    @abstractmethod
    async def delete_by_reservation(self, *, reservation_id: UUID) -> int:
        """Cascading purge, only for permanent reservation deletion"""
        pass
