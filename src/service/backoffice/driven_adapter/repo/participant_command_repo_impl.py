from typing import List
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.interface.i_participant_command_repo import (
    IParticipantCommandRepo,
)
from src.service.backoffice.domain.entity.participant_entity import Participant
from src.service.backoffice.driven_adapter.model.participant_model import ParticipantModel


class ParticipantCommandRepoImpl(IParticipantCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _model_to_entity(model: ParticipantModel) -> Participant:
        return Participant(
            id=model.id,
            reservation_id=model.reservation_id,
            name=model.name,
            email=model.email,
            phone=model.phone,
            entrance_validated=model.entrance_validated,
            validated_at=model.validated_at,
            ticket_id=model.ticket_id,
        )

    @Logger.io
    async def create_many(self, *, participants: List[Participant]) -> List[Participant]:
        models = [
            ParticipantModel(
                id=participant.id,
                reservation_id=participant.reservation_id,
                name=participant.name,
                email=participant.email,
                phone=participant.phone,
                entrance_validated=participant.entrance_validated,
            )
            for participant in participants
        ]
        self.session.add_all(models)
        await self.session.flush()
        return [self._model_to_entity(model) for model in models]

    @Logger.io
    async def list_by_reservation(self, *, reservation_id: UUID) -> List[Participant]:
        result = await self.session.execute(
            select(ParticipantModel)
            .where(ParticipantModel.reservation_id == reservation_id)
            .order_by(ParticipantModel.id)
            .execution_options(populate_existing=True)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def update(self, *, participant: Participant) -> Participant:
        await self.session.execute(
            update(ParticipantModel)
            .where(ParticipantModel.id == participant.id)
            .values(
                entrance_validated=participant.entrance_validated,
                validated_at=participant.validated_at,
                ticket_id=participant.ticket_id,
            )
        )
        return participant

    @Logger.io
    async def assign_ticket(self, *, reservation_id: UUID, ticket_id: UUID) -> None:
        await self.session.execute(
            update(ParticipantModel)
            .where(ParticipantModel.reservation_id == reservation_id)
            .values(ticket_id=ticket_id)
        )

    @Logger.io
    async def delete_by_reservation(self, *, reservation_id: UUID) -> None:
        await self.session.execute(
            delete(ParticipantModel).where(ParticipantModel.reservation_id == reservation_id)
        )
