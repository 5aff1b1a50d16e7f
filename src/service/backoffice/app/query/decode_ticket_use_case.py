from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import AuthenticationError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.backoffice_metrics import metrics
from src.service.backoffice.app.dto.reservation_summary import ReservationSummary
from src.service.backoffice.app.dto.ticket_result import TicketDetail
from src.service.backoffice.app.interface.i_signer import ISigner
from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload


class DecodeTicketUseCase:
    """
    Read-only inspection of a scanned QR payload, used by scanners before
    they commit to a validation.

    Order matters: the signature is checked before any lookup, so an
    unsigned payload never reveals whether a ticket number exists.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, signer: ISigner) -> None:
        self.uow = uow
        self.signer = signer

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        signer: ISigner = Depends(Provide[Container.signer]),
    ) -> Self:
        return cls(uow=uow, signer=signer)

    @Logger.io
    async def execute(self, *, qr_payload: str) -> TicketDetail:
        try:
            payload = TicketPayload.from_json(qr_payload)
        except ValueError as e:
            metrics.record_scan(stage='decode', result='malformed')
            raise AuthenticationError('Invalid QR payload') from e

        if not self.signer.verify(payload.message, payload.signature):
            metrics.record_scan(stage='decode', result='bad_signature')
            raise AuthenticationError('Invalid QR signature')

        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_ticket_number(
                ticket_number=payload.ticket_number
            )
            if not ticket:
                metrics.record_scan(stage='decode', result='not_found')
                raise NotFoundError('Ticket not found')
            if ticket.reservation_id != payload.reservation_id:
                metrics.record_scan(stage='decode', result='bad_signature')
                raise AuthenticationError('Invalid QR signature')

            reservation = await self.uow.reservation_repo.get_by_id(
                reservation_id=ticket.reservation_id
            )
            if not reservation:
                raise NotFoundError('Reservation not found')
            participants = await self.uow.participant_repo.list_by_reservation(
                reservation_id=ticket.reservation_id
            )

        metrics.record_scan(stage='decode', result='success')
        return TicketDetail(
            ticket=ticket,
            reservation=ReservationSummary.from_reservation(reservation),
            participants=participants,
        )
