from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

import attrs

from src.service.backoffice.domain.entity.payment_entity import Payment


@attrs.frozen
class PaymentFilter:
    reservation_id: Optional[UUID] = None
    q: Optional[str] = None  # case-insensitive match on method or comment


class IPaymentCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def get_by_id(self, *, payment_id: UUID) -> Payment | None:
        pass

    @abstractmethod
    async def list_by_reservation(self, *, reservation_id: UUID) -> List[Payment]:
        """Oldest first"""
        pass

    @abstractmethod
    async def list_payments(
        self, *, filters: PaymentFilter, limit: int, offset: int
    ) -> tuple[List[Payment], int]:
        """Newest first, with the total count matching the filters"""
        pass

    @abstractmethod
    async def delete(self, *, payment_id: UUID) -> None:
        pass

    @abstractmethod
    async def delete_by_reservation(self, *, reservation_id: UUID) -> List[Payment]:
        """Delete every payment of a reservation, returning what was deleted"""
        pass
