from typing import List
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.interface.i_reservation_command_repo import (
    IReservationCommandRepo,
    ReservationFilter,
)
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.enum.reservation_status import ReservationStatus
from src.service.backoffice.driven_adapter.model.reservation_model import ReservationModel


class ReservationCommandRepoImpl(IReservationCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _model_to_entity(model: ReservationModel) -> Reservation:
        return Reservation(
            id=model.id,
            payer_name=model.payer_name,
            payer_phone=model.payer_phone,
            payer_email=model.payer_email,
            pack_id=model.pack_id,
            pack_name_snapshot=model.pack_name_snapshot,
            unit_price=model.unit_price,
            ticket_template=model.ticket_template,
            quantity=model.quantity,
            total_price=model.total_price,
            total_paid=model.total_paid,
            status=ReservationStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @Logger.io
    async def get_by_id(self, *, reservation_id: UUID) -> Reservation | None:
        result = await self.session.execute(
            select(ReservationModel).where(ReservationModel.id == reservation_id)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_id_for_update(self, *, reservation_id: UUID) -> Reservation | None:
        result = await self.session.execute(
            select(ReservationModel)
            .where(ReservationModel.id == reservation_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def list_reservations(
        self, *, filters: ReservationFilter, limit: int, offset: int
    ) -> tuple[List[Reservation], int]:
        stmt = select(ReservationModel)
        if filters.status is not None:
            stmt = stmt.where(ReservationModel.status == filters.status)
        if filters.pack_id is not None:
            stmt = stmt.where(ReservationModel.pack_id == filters.pack_id)
        if filters.q:
            pattern = f'%{filters.q}%'
            stmt = stmt.where(
                or_(
                    ReservationModel.payer_name.ilike(pattern),
                    ReservationModel.payer_phone.ilike(pattern),
                )
            )

        total = await self.session.scalar(select(func.count()).select_from(stmt.subquery()))
        result = await self.session.execute(
            stmt.order_by(ReservationModel.created_at.desc(), ReservationModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()], total or 0

    @Logger.io
    async def create(self, *, reservation: Reservation) -> Reservation:
        model = ReservationModel(
            id=reservation.id,
            payer_name=reservation.payer_name,
            payer_phone=reservation.payer_phone,
            payer_email=reservation.payer_email,
            pack_id=reservation.pack_id,
            pack_name_snapshot=reservation.pack_name_snapshot,
            unit_price=reservation.unit_price,
            ticket_template=reservation.ticket_template,
            quantity=reservation.quantity,
            total_price=reservation.total_price,
            total_paid=reservation.total_paid,
            status=reservation.status.value,
        )
        if reservation.created_at:
            model.created_at = reservation.created_at
            model.updated_at = reservation.created_at
        self.session.add(model)
        await self.session.flush()
        return self._model_to_entity(model)

    @Logger.io
    async def update(self, *, reservation: Reservation) -> Reservation:
        values: dict = {
            'total_paid': reservation.total_paid,
            'status': reservation.status.value,
            'payer_name': reservation.payer_name,
            'payer_phone': reservation.payer_phone,
            'payer_email': reservation.payer_email,
        }
        if reservation.updated_at:
            values['updated_at'] = reservation.updated_at
        await self.session.execute(
            update(ReservationModel).where(ReservationModel.id == reservation.id).values(**values)
        )
        return reservation

    @Logger.io
    async def delete(self, *, reservation_id: UUID) -> None:
        await self.session.execute(
            delete(ReservationModel).where(ReservationModel.id == reservation_id)
        )
