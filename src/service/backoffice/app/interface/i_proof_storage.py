from abc import ABC, abstractmethod
from uuid import UUID

from src.service.backoffice.app.dto.proof_file import ProofFile


class IProofStorage(ABC):
    @abstractmethod
    async def save(self, *, reservation_id: UUID, proof: ProofFile) -> str:
        """Store the file and return its public URL"""
        pass

    @abstractmethod
    async def delete(self, *, url: str) -> None:
        pass
