from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import ConflictError
from src.service.backoffice.domain.entity.ticket_entity import Ticket
from src.service.backoffice.domain.enum.ticket_status import TicketStatus


class TicketNumberCollisionError(ConflictError):
    """Raised by create() when the ticket_number unique constraint rejects the row"""

    def __init__(self, ticket_number: str) -> None:
        self.ticket_number = ticket_number
        super().__init__(f'Ticket number {ticket_number} already exists')


@attrs.frozen
class TicketFilter:
    status: Optional[str] = None
    q: Optional[str] = None  # case-insensitive match on ticket number


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, ticket: Ticket) -> Ticket:
        """
        Insert inside a savepoint so a rejected row leaves the outer transaction usable.

        Raises:
            TicketNumberCollisionError: ticket_number already taken
            ConflictError: the reservation already has a ticket
        """
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: UUID) -> Ticket | None:
        pass

    @abstractmethod
    async def get_by_ticket_number(self, *, ticket_number: str) -> Ticket | None:
        pass

    @abstractmethod
    async def get_by_ticket_number_for_update(self, *, ticket_number: str) -> Ticket | None:
        pass

    @abstractmethod
    async def get_by_reservation_id(self, *, reservation_id: UUID) -> Ticket | None:
        pass

    @abstractmethod
    async def list_tickets(
        self, *, filters: TicketFilter, limit: int, offset: int
    ) -> tuple[List[Ticket], int]:
        """Most recently generated first, with the total count matching the filters"""
        pass

    @abstractmethod
    async def update(self, *, ticket: Ticket) -> Ticket:
        """Persist status and artifact references"""
        pass

    @abstractmethod
    async def count_by_status(self) -> dict[TicketStatus, int]:
        pass

    @abstractmethod
    async def delete_by_reservation(self, *, reservation_id: UUID) -> None:
        pass
