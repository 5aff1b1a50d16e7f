from typing import Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.dto.audit_log_page import AuditLogPage
from src.service.backoffice.app.interface.i_audit_log_repo import AuditLogFilter
from src.service.backoffice.app.query.paging import validate_paging


class ListAuditLogsUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self, *, filters: AuditLogFilter | None = None, limit: int = 50, offset: int = 0
    ) -> AuditLogPage:
        validate_paging(limit=limit, offset=offset)

        async with self.uow:
            entries, total = await self.uow.audit_log_repo.list_logs(
                filters=filters or AuditLogFilter(), limit=limit, offset=offset
            )
        return AuditLogPage(data=entries, total=total, limit=limit, offset=offset)
