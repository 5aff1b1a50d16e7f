from typing import Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.dto.listing_page import ReservationPage
from src.service.backoffice.app.interface.i_reservation_command_repo import ReservationFilter
from src.service.backoffice.app.query.paging import validate_paging
from src.service.backoffice.domain.enum.reservation_status import ReservationStatus


class ListReservationsUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self, *, filters: ReservationFilter | None = None, limit: int = 20, offset: int = 0
    ) -> ReservationPage:
        validate_paging(limit=limit, offset=offset)
        filters = filters or ReservationFilter()
        if filters.status is not None and filters.status not in ReservationStatus:
            raise ValidationError(f'Unknown reservation status: {filters.status}')

        async with self.uow:
            reservations, total = await self.uow.reservation_repo.list_reservations(
                filters=filters, limit=limit, offset=offset
            )
        return ReservationPage(data=reservations, total=total, limit=limit, offset=offset)
