from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.service.backoffice.domain.entity.participant_entity import Participant


class IParticipantCommandRepo(ABC):
    @abstractmethod
    async def create_many(self, *, participants: List[Participant]) -> List[Participant]:
        pass

    @abstractmethod
    async def list_by_reservation(self, *, reservation_id: UUID) -> List[Participant]:
        pass

    @abstractmethod
    async def update(self, *, participant: Participant) -> Participant:
        pass

    @abstractmethod
    async def assign_ticket(self, *, reservation_id: UUID, ticket_id: UUID) -> None:
        pass

    @abstractmethod
    async def delete_by_reservation(self, *, reservation_id: UUID) -> None:
        pass
