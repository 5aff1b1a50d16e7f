from functools import partial
from typing import List, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.dto.new_participant import NewParticipant
from src.service.backoffice.app.dto.reservation_summary import ReservationDetail
from src.service.backoffice.app.interface.i_duplicate_request_guard import (
    IDuplicateRequestGuard,
)
from src.service.backoffice.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.backoffice.app.interface.i_reservation_notifier import IReservationNotifier
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.entity.participant_entity import Participant
from src.service.backoffice.domain.entity.reservation_entity import Reservation
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext


class CreateReservationUseCase:
    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        duplicate_guard: IDuplicateRequestGuard,
        notifier: IReservationNotifier,
        dispatcher: INotificationDispatcher,
    ) -> None:
        self.uow = uow
        self.duplicate_guard = duplicate_guard
        self.notifier = notifier
        self.dispatcher = dispatcher

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        duplicate_guard: IDuplicateRequestGuard = Depends(Provide[Container.duplicate_guard]),
        notifier: IReservationNotifier = Depends(Provide[Container.notifier]),
        dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(
            uow=uow, duplicate_guard=duplicate_guard, notifier=notifier, dispatcher=dispatcher
        )

    @Logger.io
    async def execute(
        self,
        *,
        payer_name: str,
        payer_phone: str,
        pack_id: UUID,
        quantity: int,
        actor_id: Optional[UUID],
        payer_email: Optional[str] = None,
        participants: Optional[List[NewParticipant]] = None,
        context: Optional[RequestContext] = None,
    ) -> ReservationDetail:
        participants = participants or []
        fingerprint = self.duplicate_guard.claim(
            scope='reservation', parts=(payer_phone, payer_email, pack_id, quantity)
        )
        if fingerprint is None:
            raise ConflictError('Duplicate reservation request')

        try:
            async with self.uow:
                pack = await self.uow.pack_repo.get_by_id(pack_id=pack_id)
                if not pack:
                    raise NotFoundError('Pack not found')

                reservation = Reservation.create(
                    payer_name=payer_name,
                    payer_phone=payer_phone,
                    payer_email=payer_email,
                    pack=pack,
                    quantity=quantity,
                )
                pack.validate_can_be_reserved(
                    quantity=quantity, participants_count=len(participants)
                )
                reservation = await self.uow.reservation_repo.create(reservation=reservation)
                created_participants = await self.uow.participant_repo.create_many(
                    participants=[
                        Participant.create(
                            reservation_id=reservation.id,
                            name=p.name,
                            email=p.email,
                            phone=p.phone,
                        )
                        for p in participants
                    ]
                )

                await self.uow.audit_log_repo.record(
                    entry=AuditLogEntry.record(
                        action=AuditAction.RESERVATION_CREATE,
                        entity_type=AuditEntityType.RESERVATION,
                        entity_id=reservation.id,
                        actor_id=actor_id,
                        permission=Permission.RESERVATIONS_EDIT,
                        reservation_id=reservation.id,
                        context=context,
                        changes={
                            'payer_name': reservation.payer_name,
                            'pack_name': reservation.pack_name_snapshot,
                            'quantity': reservation.quantity,
                            'total_price': reservation.total_price,
                            'participants_count': len(created_participants),
                        },
                    )
                )
                await self.uow.commit()
        except Exception:
            self.duplicate_guard.release(fingerprint)
            raise

        self.dispatcher.dispatch(
            name='reservation_confirmation',
            job=partial(
                self.notifier.send_reservation_confirmation,
                reservation=reservation,
                participants=created_participants,
            ),
        )
        return ReservationDetail(
            reservation=reservation, payments=[], participants=created_participants
        )
