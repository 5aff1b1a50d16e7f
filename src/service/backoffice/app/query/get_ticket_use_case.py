from typing import Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.dto.reservation_summary import ReservationSummary
from src.service.backoffice.app.dto.ticket_result import TicketDetail


class GetTicketUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, ticket_id: UUID) -> TicketDetail:
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')
            reservation = await self.uow.reservation_repo.get_by_id(
                reservation_id=ticket.reservation_id
            )
            if not reservation:
                raise NotFoundError('Reservation not found')
            participants = await self.uow.participant_repo.list_by_reservation(
                reservation_id=ticket.reservation_id
            )
        return TicketDetail(
            ticket=ticket,
            reservation=ReservationSummary.from_reservation(reservation),
            participants=participants,
        )
