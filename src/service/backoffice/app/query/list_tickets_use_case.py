from typing import Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.dto.listing_page import TicketPage
from src.service.backoffice.app.interface.i_ticket_command_repo import TicketFilter
from src.service.backoffice.app.query.paging import validate_paging
from src.service.backoffice.domain.enum.ticket_status import TicketStatus


class ListTicketsUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self, *, filters: TicketFilter | None = None, limit: int = 20, offset: int = 0
    ) -> TicketPage:
        validate_paging(limit=limit, offset=offset)
        filters = filters or TicketFilter()
        if filters.status is not None and filters.status not in TicketStatus:
            raise ValidationError(f'Unknown ticket status: {filters.status}')

        async with self.uow:
            tickets, total = await self.uow.ticket_repo.list_tickets(
                filters=filters, limit=limit, offset=offset
            )
        return TicketPage(data=tickets, total=total, limit=limit, offset=offset)
