from abc import ABC, abstractmethod
from uuid import UUID

from src.service.backoffice.domain.entity.pack_entity import Pack


class IPackQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, pack_id: UUID) -> Pack | None:
        pass
