"""
In-memory unit of work for use case tests.

Writes go straight into InMemoryStore and are journaled so rollback() can
undo them. get_by_id_for_update / get_by_ticket_number_for_update take a
per-row asyncio.Lock held until commit or rollback, which mirrors
SELECT ... FOR UPDATE closely enough to exercise concurrent callers.
Every repository call yields once to the event loop so concurrent tasks
actually interleave.
"""

import asyncio
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, List
from unittest.mock import AsyncMock, Mock
from uuid import UUID

import attrs

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError
from src.platform.types import generate_uuid7
from src.service.backoffice.app.dto.ticket_artifacts import PdfArtifact, QrArtifact
from src.service.backoffice.app.interface.i_audit_log_repo import AuditLogFilter
from src.service.backoffice.app.interface.i_payment_command_repo import PaymentFilter
from src.service.backoffice.app.interface.i_reservation_command_repo import ReservationFilter
from src.service.backoffice.app.interface.i_ticket_command_repo import (
    TicketFilter,
    TicketNumberCollisionError,
)
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.entity.pack_entity import Pack
from src.service.backoffice.domain.entity.participant_entity import Participant
from src.service.backoffice.domain.entity.payment_entity import Payment
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.entity.ticket_entity import Ticket
from src.service.backoffice.domain.enum.ticket_status import TicketStatus


_MISSING = object()


class InMemoryStore:
    def __init__(self) -> None:
        self.packs: dict[UUID, Pack] = {}
        self.reservations: dict[UUID, Reservation] = {}
        self.payments: dict[UUID, Payment] = {}
        self.tickets: dict[UUID, Ticket] = {}
        self.participants: dict[UUID, Participant] = {}
        self.audit_logs: dict[UUID, AuditLogEntry] = {}
        self.row_locks: defaultdict[Any, asyncio.Lock] = defaultdict(asyncio.Lock)

    def add_pack(self, pack: Pack) -> Pack:
        self.packs[pack.id] = pack
        return pack

    def add_reservation(self, reservation: Reservation) -> Reservation:
        self.reservations[reservation.id] = reservation
        return reservation

    def add_participants(self, participants: List[Participant]) -> List[Participant]:
        for participant in participants:
            self.participants[participant.id] = participant
        return participants

    def add_ticket(self, ticket: Ticket) -> Ticket:
        self.tickets[ticket.id] = ticket
        return ticket

    def payments_of(self, reservation_id: UUID) -> List[Payment]:
        return [p for p in self.payments.values() if p.reservation_id == reservation_id]

    def audit_actions(self) -> List[str]:
        return [entry.action for entry in self.audit_logs.values()]


class _Journal:
    def __init__(self) -> None:
        self._undo: list[tuple[dict, Any, Any]] = []

    def put(self, table: dict, key: Any, value: Any) -> None:
        self._undo.append((table, key, table.get(key, _MISSING)))
        table[key] = value

    def remove(self, table: dict, key: Any) -> None:
        if key in table:
            self._undo.append((table, key, table[key]))
            del table[key]

    def rollback(self) -> None:
        for table, key, previous in reversed(self._undo):
            if previous is _MISSING:
                table.pop(key, None)
            else:
                table[key] = previous
        self._undo.clear()

    def commit(self) -> None:
        self._undo.clear()


class _Repo:
    def __init__(self, uow: 'InMemoryUnitOfWork') -> None:
        self.uow = uow
        self.store = uow.store

    async def _yield(self) -> None:
        await asyncio.sleep(0)


def _contains(value: str | None, q: str) -> bool:
    return value is not None and q.lower() in value.lower()


def _newest_first(rows: list, timestamp: str) -> list:
    return sorted(rows, key=lambda row: (getattr(row, timestamp), row.id), reverse=True)


class FakeReservationRepo(_Repo):
    async def get_by_id(self, *, reservation_id: UUID) -> Reservation | None:
        await self._yield()
        return self.store.reservations.get(reservation_id)

    async def get_by_id_for_update(self, *, reservation_id: UUID) -> Reservation | None:
        await self.uow.lock(('reservation', reservation_id))
        return self.store.reservations.get(reservation_id)

    async def list_reservations(
        self, *, filters: ReservationFilter, limit: int, offset: int
    ) -> tuple[List[Reservation], int]:
        await self._yield()
        matched = [
            r
            for r in self.store.reservations.values()
            if (filters.status is None or r.status == filters.status)
            and (filters.pack_id is None or r.pack_id == filters.pack_id)
            and (
                not filters.q
                or _contains(r.payer_name, filters.q)
                or _contains(r.payer_phone, filters.q)
            )
        ]
        matched = _newest_first(matched, 'created_at')
        return matched[offset : offset + limit], len(matched)

    async def create(self, *, reservation: Reservation) -> Reservation:
        await self._yield()
        self.uow.journal.put(self.store.reservations, reservation.id, reservation)
        return reservation

    async def update(self, *, reservation: Reservation) -> Reservation:
        await self._yield()
        self.uow.journal.put(self.store.reservations, reservation.id, reservation)
        return reservation

    async def delete(self, *, reservation_id: UUID) -> None:
        await self._yield()
        self.uow.journal.remove(self.store.reservations, reservation_id)


class FakePaymentRepo(_Repo):
    async def create(self, *, payment: Payment) -> Payment:
        await self._yield()
        self.uow.journal.put(self.store.payments, payment.id, payment)
        return payment

    async def get_by_id(self, *, payment_id: UUID) -> Payment | None:
        await self._yield()
        return self.store.payments.get(payment_id)

    async def list_by_reservation(self, *, reservation_id: UUID) -> List[Payment]:
        await self._yield()
        return self.store.payments_of(reservation_id)

    async def list_payments(
        self, *, filters: PaymentFilter, limit: int, offset: int
    ) -> tuple[List[Payment], int]:
        await self._yield()
        matched = [
            p
            for p in self.store.payments.values()
            if (filters.reservation_id is None or p.reservation_id == filters.reservation_id)
            and (
                not filters.q or _contains(p.method, filters.q) or _contains(p.comment, filters.q)
            )
        ]
        matched = _newest_first(matched, 'created_at')
        return matched[offset : offset + limit], len(matched)

    async def delete(self, *, payment_id: UUID) -> None:
        await self._yield()
        self.uow.journal.remove(self.store.payments, payment_id)

    async def delete_by_reservation(self, *, reservation_id: UUID) -> List[Payment]:
        deleted = self.store.payments_of(reservation_id)
        for payment in deleted:
            self.uow.journal.remove(self.store.payments, payment.id)
        return deleted


class FakeTicketRepo(_Repo):
    async def create(self, *, ticket: Ticket) -> Ticket:
        await self._yield()
        for existing in self.store.tickets.values():
            if existing.ticket_number == ticket.ticket_number:
                raise TicketNumberCollisionError(ticket.ticket_number)
            if existing.reservation_id == ticket.reservation_id:
                raise ConflictError('Ticket already generated')
        self.uow.journal.put(self.store.tickets, ticket.id, ticket)
        return ticket

    async def get_by_id(self, *, ticket_id: UUID) -> Ticket | None:
        await self._yield()
        return self.store.tickets.get(ticket_id)

    def _find_by_number(self, ticket_number: str) -> Ticket | None:
        return next(
            (t for t in self.store.tickets.values() if t.ticket_number == ticket_number), None
        )

    async def get_by_ticket_number(self, *, ticket_number: str) -> Ticket | None:
        await self._yield()
        return self._find_by_number(ticket_number)

    async def get_by_ticket_number_for_update(self, *, ticket_number: str) -> Ticket | None:
        await self.uow.lock(('ticket', ticket_number))
        return self._find_by_number(ticket_number)

    async def get_by_reservation_id(self, *, reservation_id: UUID) -> Ticket | None:
        await self._yield()
        return next(
            (t for t in self.store.tickets.values() if t.reservation_id == reservation_id), None
        )

    async def list_tickets(
        self, *, filters: TicketFilter, limit: int, offset: int
    ) -> tuple[List[Ticket], int]:
        await self._yield()
        matched = [
            t
            for t in self.store.tickets.values()
            if (filters.status is None or t.status == filters.status)
            and (not filters.q or _contains(t.ticket_number, filters.q))
        ]
        matched = _newest_first(matched, 'generated_at')
        return matched[offset : offset + limit], len(matched)

    async def update(self, *, ticket: Ticket) -> Ticket:
        await self._yield()
        self.uow.journal.put(self.store.tickets, ticket.id, ticket)
        return ticket

    async def count_by_status(self) -> dict[TicketStatus, int]:
        counts = {status: 0 for status in TicketStatus}
        for ticket in self.store.tickets.values():
            counts[ticket.status] += 1
        return counts

    async def delete_by_reservation(self, *, reservation_id: UUID) -> None:
        for ticket in list(self.store.tickets.values()):
            if ticket.reservation_id == reservation_id:
                self.uow.journal.remove(self.store.tickets, ticket.id)


class FakeParticipantRepo(_Repo):
    async def create_many(self, *, participants: List[Participant]) -> List[Participant]:
        await self._yield()
        for participant in participants:
            self.uow.journal.put(self.store.participants, participant.id, participant)
        return participants

    async def list_by_reservation(self, *, reservation_id: UUID) -> List[Participant]:
        await self._yield()
        return [p for p in self.store.participants.values() if p.reservation_id == reservation_id]

    async def update(self, *, participant: Participant) -> Participant:
        await self._yield()
        self.uow.journal.put(self.store.participants, participant.id, participant)
        return participant

    async def assign_ticket(self, *, reservation_id: UUID, ticket_id: UUID) -> None:
        for participant in await self.list_by_reservation(reservation_id=reservation_id):
            self.uow.journal.put(
                self.store.participants,
                participant.id,
                attrs.evolve(participant, ticket_id=ticket_id),
            )

    async def delete_by_reservation(self, *, reservation_id: UUID) -> None:
        for participant in await self.list_by_reservation(reservation_id=reservation_id):
            self.uow.journal.remove(self.store.participants, participant.id)


class FakePackRepo(_Repo):
    async def get_by_id(self, *, pack_id: UUID) -> Pack | None:
        await self._yield()
        return self.store.packs.get(pack_id)


class FakeAuditLogRepo(_Repo):
    async def record(self, *, entry: AuditLogEntry) -> AuditLogEntry:
        await self._yield()
        self.uow.journal.put(self.store.audit_logs, entry.id, entry)
        return entry

    async def list_logs(
        self, *, filters: AuditLogFilter, limit: int, offset: int
    ) -> tuple[List[AuditLogEntry], int]:
        criteria = {k: v for k, v in attrs.asdict(filters).items() if v is not None}
        matched = [
            entry
            for entry in self.store.audit_logs.values()
            if all(str(getattr(entry, k)) == str(v) for k, v in criteria.items())
        ]
        matched.reverse()
        return matched[offset : offset + limit], len(matched)

    async def delete_by_reservation(self, *, reservation_id: UUID) -> int:
        purged = [e for e in self.store.audit_logs.values() if e.reservation_id == reservation_id]
        for entry in purged:
            self.uow.journal.remove(self.store.audit_logs, entry.id)
        return len(purged)


class InMemoryUnitOfWork(AbstractUnitOfWork):
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.journal = _Journal()
        self.commits = 0
        self._held: list[asyncio.Lock] = []

    async def __aenter__(self) -> 'InMemoryUnitOfWork':
        self.journal = _Journal()
        self.reservation_repo = FakeReservationRepo(self)
        self.payment_repo = FakePaymentRepo(self)
        self.ticket_repo = FakeTicketRepo(self)
        self.participant_repo = FakeParticipantRepo(self)
        self.pack_repo = FakePackRepo(self)
        self.audit_log_repo = FakeAuditLogRepo(self)
        await super().__aenter__()
        return self

    async def lock(self, key: Any) -> None:
        row_lock = self.store.row_locks[key]
        if row_lock in self._held:
            return
        await row_lock.acquire()
        self._held.append(row_lock)

    async def _commit(self) -> None:
        self.journal.commit()
        self.commits += 1
        self._release_locks()

    async def rollback(self) -> None:
        self.journal.rollback()
        self._release_locks()

    def _release_locks(self) -> None:
        while self._held:
            self._held.pop().release()


# =============================================================================
# Builders
# =============================================================================


def make_pack(
    *,
    name: str = 'VIP Pass',
    price: int = 10000,
    capacity: int | None = None,
    ticket_template: str | None = 'vip',
    is_active: bool = True,
) -> Pack:
    return Pack(
        id=generate_uuid7(),
        name=name,
        price=price,
        capacity=capacity,
        ticket_template=ticket_template,
        is_active=is_active,
        created_at=datetime.now(timezone.utc),
    )


def make_reservation(
    *, pack: Pack | None = None, quantity: int = 1, payer_email: str | None = 'payer@test.com'
) -> Reservation:
    return Reservation.create(
        payer_name='Awa Ndiaye',
        payer_phone='+221770000000',
        payer_email=payer_email,
        pack=pack or make_pack(),
        quantity=quantity,
    )


def make_participants(reservation: Reservation, *names: str) -> List[Participant]:
    return [
        Participant.create(
            reservation_id=reservation.id, name=name, email=f'{name.lower()}@test.com'
        )
        for name in names
    ]


class RecordingDispatcher:
    """Collects dispatched jobs instead of running them"""

    def __init__(self) -> None:
        self.jobs: list[tuple[str, Any]] = []

    def dispatch(self, *, name: str, job: Any) -> None:
        self.jobs.append((name, job))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.jobs]


class CollaboratorMocks:
    """Mocks for every collaborator a use case reaches outside the unit of work"""

    def __init__(self) -> None:
        self.proof_storage: Mock = AsyncMock()
        self.proof_storage.save = AsyncMock(return_value='/uploads/proofs/proof.png')
        self.proof_storage.delete = AsyncMock()

        self.notifier: Mock = AsyncMock()
        self.dispatcher = RecordingDispatcher()

        self.renderer: Mock = AsyncMock()
        self.renderer.render_qr = AsyncMock(side_effect=self._render_qr)
        self.renderer.render_ticket_pdf = AsyncMock(side_effect=self._render_pdf)

    @staticmethod
    async def _render_qr(*, payload: Any) -> QrArtifact:
        return QrArtifact(
            url=f'/uploads/qr/{payload.ticket_number}.png',
            path=f'/tmp/qr/{payload.ticket_number}.png',
            data_url='data:image/png;base64,AAAA',
        )

    @staticmethod
    async def _render_pdf(*, reservation: Any, ticket_number: str, qr: Any, template: Any) -> PdfArtifact:
        return PdfArtifact(
            url=f'/uploads/tickets/{ticket_number}.pdf',
            path=f'/tmp/tickets/{ticket_number}.pdf',
            content=b'%PDF-1.4',
        )
