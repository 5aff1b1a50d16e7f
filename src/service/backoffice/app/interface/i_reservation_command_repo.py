from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

import attrs

from src.service.backoffice.domain.entity.reservation_entity import Reservation


@attrs.frozen
class ReservationFilter:
    status: Optional[str] = None
    pack_id: Optional[UUID] = None
    q: Optional[str] = None  # case-insensitive match on payer name or phone


class IReservationCommandRepo(ABC):
    """
    Reservation persistence inside a unit of work.

    Every read-compute-write of total_paid or status must go through
    get_by_id_for_update so the row stays locked until commit/rollback.
    """

    @abstractmethod
    async def get_by_id(self, *, reservation_id: UUID) -> Reservation | None:
        pass

    @abstractmethod
    async def get_by_id_for_update(self, *, reservation_id: UUID) -> Reservation | None:
        """Load the reservation holding a row lock (SELECT ... FOR UPDATE)"""
        pass

    @abstractmethod
    async def list_reservations(
        self, *, filters: ReservationFilter, limit: int, offset: int
    ) -> tuple[List[Reservation], int]:
        """Newest first, with the total count matching the filters"""
        pass

    @abstractmethod
    async def create(self, *, reservation: Reservation) -> Reservation:
        pass

    @abstractmethod
    async def update(self, *, reservation: Reservation) -> Reservation:
        """Persist total_paid, status and payer contact"""
        pass

    @abstractmethod
    async def delete(self, *, reservation_id: UUID) -> None:
        pass
