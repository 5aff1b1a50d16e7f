"""
Unit of Work Pattern - one database transaction shared by every repository

Architecture:
- UoW owns the session lifecycle and commit/rollback
- Repositories receive the shared session from the UoW
- Use cases coordinate several repositories through one UoW, so a business
  mutation and its audit entry always commit (or roll back) together
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.orm_db_setting import get_async_session


if TYPE_CHECKING:
    from src.service.backoffice.app.interface.i_audit_log_repo import IAuditLogRepo
    from src.service.backoffice.app.interface.i_pack_query_repo import IPackQueryRepo
    from src.service.backoffice.app.interface.i_participant_command_repo import (
        IParticipantCommandRepo,
    )
    from src.service.backoffice.app.interface.i_payment_command_repo import IPaymentCommandRepo
    from src.service.backoffice.app.interface.i_reservation_command_repo import (
        IReservationCommandRepo,
    )
    from src.service.backoffice.app.interface.i_ticket_command_repo import ITicketCommandRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow:
            reservation = await uow.reservation_repo.get_by_id_for_update(...)
            ...
            await uow.commit()

    Leaving the block without commit() rolls everything back.
    """

    reservation_repo: IReservationCommandRepo
    payment_repo: IPaymentCommandRepo
    ticket_repo: ITicketCommandRepo
    participant_repo: IParticipantCommandRepo
    pack_repo: IPackQueryRepo
    audit_log_repo: IAuditLogRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        from src.service.backoffice.driven_adapter.repo.audit_log_repo_impl import (
            AuditLogRepoImpl,
        )
        from src.service.backoffice.driven_adapter.repo.pack_query_repo_impl import (
            PackQueryRepoImpl,
        )
        from src.service.backoffice.driven_adapter.repo.participant_command_repo_impl import (
            ParticipantCommandRepoImpl,
        )
        from src.service.backoffice.driven_adapter.repo.payment_command_repo_impl import (
            PaymentCommandRepoImpl,
        )
        from src.service.backoffice.driven_adapter.repo.reservation_command_repo_impl import (
            ReservationCommandRepoImpl,
        )
        from src.service.backoffice.driven_adapter.repo.ticket_command_repo_impl import (
            TicketCommandRepoImpl,
        )

        self.reservation_repo = ReservationCommandRepoImpl(session=self.session)
        self.payment_repo = PaymentCommandRepoImpl(session=self.session)
        self.ticket_repo = TicketCommandRepoImpl(session=self.session)
        self.participant_repo = ParticipantCommandRepoImpl(session=self.session)
        self.pack_repo = PackQueryRepoImpl(session=self.session)
        self.audit_log_repo = AuditLogRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(self, *args):
        await super().__aexit__(*args)
        # Note: session cleanup handled by get_async_session context manager

    async def _commit(self):
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


def get_unit_of_work(
    session: AsyncSession = Depends(get_async_session),
) -> AbstractUnitOfWork:
    """FastAPI dependency for Unit of Work"""
    return SqlAlchemyUnitOfWork(session)
