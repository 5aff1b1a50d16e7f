from typing import Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.dto.reservation_summary import ReservationDetail


class GetReservationUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, reservation_id: UUID) -> ReservationDetail:
        async with self.uow:
            reservation = await self.uow.reservation_repo.get_by_id(reservation_id=reservation_id)
            if not reservation:
                raise NotFoundError('Reservation not found')
            return ReservationDetail(
                reservation=reservation,
                payments=await self.uow.payment_repo.list_by_reservation(
                    reservation_id=reservation_id
                ),
                participants=await self.uow.participant_repo.list_by_reservation(
                    reservation_id=reservation_id
                ),
                ticket=await self.uow.ticket_repo.get_by_reservation_id(
                    reservation_id=reservation_id
                ),
            )
