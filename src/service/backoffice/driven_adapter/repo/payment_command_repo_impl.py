from typing import List
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.interface.i_payment_command_repo import (
    IPaymentCommandRepo,
    PaymentFilter,
)
from src.service.backoffice.domain.entity.payment_entity import Payment
from src.service.backoffice.domain.enum.payment_method import PaymentMethod
from src.service.backoffice.driven_adapter.model.payment_model import PaymentModel


class PaymentCommandRepoImpl(IPaymentCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _model_to_entity(model: PaymentModel) -> Payment:
        return Payment(
            id=model.id,
            reservation_id=model.reservation_id,
            amount=model.amount,
            method=PaymentMethod(model.method),
            created_by=model.created_by,
            comment=model.comment,
            proof_url=model.proof_url,
            created_at=model.created_at,
        )

    @Logger.io
    async def create(self, *, payment: Payment) -> Payment:
        model = PaymentModel(
            id=payment.id,
            reservation_id=payment.reservation_id,
            amount=payment.amount,
            method=payment.method.value,
            created_by=payment.created_by,
            comment=payment.comment,
            proof_url=payment.proof_url,
        )
        if payment.created_at:
            model.created_at = payment.created_at
        self.session.add(model)
        await self.session.flush()
        return self._model_to_entity(model)

    @Logger.io
    async def get_by_id(self, *, payment_id: UUID) -> Payment | None:
        result = await self.session.execute(
            select(PaymentModel).where(PaymentModel.id == payment_id)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def list_by_reservation(self, *, reservation_id: UUID) -> List[Payment]:
        result = await self.session.execute(
            select(PaymentModel)
            .where(PaymentModel.reservation_id == reservation_id)
            .order_by(PaymentModel.created_at, PaymentModel.id)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def list_payments(
        self, *, filters: PaymentFilter, limit: int, offset: int
    ) -> tuple[List[Payment], int]:
        stmt = select(PaymentModel)
        if filters.reservation_id is not None:
            stmt = stmt.where(PaymentModel.reservation_id == filters.reservation_id)
        if filters.q:
            pattern = f'%{filters.q}%'
            stmt = stmt.where(
                or_(PaymentModel.method.ilike(pattern), PaymentModel.comment.ilike(pattern))
            )

        total = await self.session.scalar(select(func.count()).select_from(stmt.subquery()))
        result = await self.session.execute(
            stmt.order_by(PaymentModel.created_at.desc(), PaymentModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()], total or 0

    @Logger.io
    async def delete(self, *, payment_id: UUID) -> None:
        await self.session.execute(delete(PaymentModel).where(PaymentModel.id == payment_id))

    @Logger.io
    async def delete_by_reservation(self, *, reservation_id: UUID) -> List[Payment]:
        payments = await self.list_by_reservation(reservation_id=reservation_id)
        await self.session.execute(
            delete(PaymentModel).where(PaymentModel.reservation_id == reservation_id)
        )
        return payments
