from typing import Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.dto.scan_result import ScanStats
from src.service.backoffice.domain.enum.ticket_status import TicketStatus


class ScanStatsUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self) -> ScanStats:
        async with self.uow:
            counts = await self.uow.ticket_repo.count_by_status()
        return ScanStats(
            total_tickets=sum(counts.values()),
            total_scanned=counts.get(TicketStatus.USED, 0),
            valid_tickets=counts.get(TicketStatus.VALID, 0),
            cancelled_tickets=counts.get(TicketStatus.CANCELLED, 0),
        )
