from typing import Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.dto.listing_page import PaymentPage
from src.service.backoffice.app.interface.i_payment_command_repo import PaymentFilter
from src.service.backoffice.app.query.paging import validate_paging


class ListPaymentsUseCase:
    """Payment ledger across all reservations, newest first"""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self, *, filters: PaymentFilter | None = None, limit: int = 20, offset: int = 0
    ) -> PaymentPage:
        validate_paging(limit=limit, offset=offset)

        async with self.uow:
            payments, total = await self.uow.payment_repo.list_payments(
                filters=filters or PaymentFilter(), limit=limit, offset=offset
            )
        return PaymentPage(data=payments, total=total, limit=limit, offset=offset)
