from typing import List
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.interface.i_ticket_command_repo import (
    ITicketCommandRepo,
    TicketFilter,
    TicketNumberCollisionError,
)
from src.service.backoffice.domain.entity.ticket_entity import Ticket
from src.service.backoffice.domain.enum.ticket_status import TicketStatus
from src.service.backoffice.driven_adapter.model.ticket_model import TicketModel


class TicketCommandRepoImpl(ITicketCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _model_to_entity(model: TicketModel) -> Ticket:
        return Ticket(
            id=model.id,
            reservation_id=model.reservation_id,
            ticket_number=model.ticket_number,
            qr_payload=model.qr_payload,
            generated_by=model.generated_by,
            status=TicketStatus(model.status),
            qr_image_url=model.qr_image_url,
            pdf_url=model.pdf_url,
            generated_at=model.generated_at,
        )

    @Logger.io
    async def create(self, *, ticket: Ticket) -> Ticket:
        model = TicketModel(
            id=ticket.id,
            reservation_id=ticket.reservation_id,
            ticket_number=ticket.ticket_number,
            qr_payload=ticket.qr_payload,
            qr_image_url=ticket.qr_image_url,
            pdf_url=ticket.pdf_url,
            status=ticket.status.value,
            generated_by=ticket.generated_by,
        )
        if ticket.generated_at:
            model.generated_at = ticket.generated_at

        try:
            async with self.session.begin_nested():
                self.session.add(model)
        except IntegrityError as e:
            message = str(e.orig).lower()
            if 'foreign key' in message:
                raise
            if 'ticket_number' in message:
                raise TicketNumberCollisionError(ticket.ticket_number) from e
            if 'reservation_id' in message:
                raise ConflictError('Ticket already generated') from e
            raise

        return self._model_to_entity(model)

    @Logger.io
    async def get_by_id(self, *, ticket_id: UUID) -> Ticket | None:
        result = await self.session.execute(select(TicketModel).where(TicketModel.id == ticket_id))
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_ticket_number(self, *, ticket_number: str) -> Ticket | None:
        result = await self.session.execute(
            select(TicketModel).where(TicketModel.ticket_number == ticket_number)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_ticket_number_for_update(self, *, ticket_number: str) -> Ticket | None:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.ticket_number == ticket_number)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_reservation_id(self, *, reservation_id: UUID) -> Ticket | None:
        result = await self.session.execute(
            select(TicketModel).where(TicketModel.reservation_id == reservation_id)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def list_tickets(
        self, *, filters: TicketFilter, limit: int, offset: int
    ) -> tuple[List[Ticket], int]:
        stmt = select(TicketModel)
        if filters.status is not None:
            stmt = stmt.where(TicketModel.status == filters.status)
        if filters.q:
            stmt = stmt.where(TicketModel.ticket_number.ilike(f'%{filters.q}%'))

        total = await self.session.scalar(select(func.count()).select_from(stmt.subquery()))
        result = await self.session.execute(
            stmt.order_by(TicketModel.generated_at.desc(), TicketModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()], total or 0

    @Logger.io
    async def update(self, *, ticket: Ticket) -> Ticket:
        await self.session.execute(
            update(TicketModel)
            .where(TicketModel.id == ticket.id)
            .values(
                status=ticket.status.value,
                qr_image_url=ticket.qr_image_url,
                pdf_url=ticket.pdf_url,
            )
        )
        return ticket

    @Logger.io
    async def count_by_status(self) -> dict[TicketStatus, int]:
        result = await self.session.execute(
            select(TicketModel.status, func.count()).group_by(TicketModel.status)
        )
        counts = {status: 0 for status in TicketStatus}
        for status, count in result.all():
            counts[TicketStatus(status)] = count
        return counts

    @Logger.io
    async def delete_by_reservation(self, *, reservation_id: UUID) -> None:
        await self.session.execute(
            delete(TicketModel).where(TicketModel.reservation_id == reservation_id)
        )
