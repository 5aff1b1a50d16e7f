from typing import List

import attrs

from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry


@attrs.frozen
class AuditLogPage:
    data: List[AuditLogEntry]
    total: int
    limit: int
    offset: int
