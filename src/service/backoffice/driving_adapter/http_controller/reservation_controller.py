from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.command.cancel_reservation_use_case import (
    CancelReservationUseCase,
)
from src.service.backoffice.app.command.create_reservation_use_case import (
    CreateReservationUseCase,
)
from src.service.backoffice.app.command.delete_reservation_use_case import (
    DeleteReservationUseCase,
)
from src.service.backoffice.app.command.update_reservation_use_case import (
    UpdateReservationUseCase,
)
from src.service.backoffice.app.dto.new_participant import NewParticipant
from src.service.backoffice.app.interface.i_audit_log_repo import AuditLogFilter
from src.service.backoffice.app.interface.i_reservation_command_repo import ReservationFilter
from src.service.backoffice.app.query.get_reservation_use_case import GetReservationUseCase
from src.service.backoffice.app.query.list_audit_logs_use_case import ListAuditLogsUseCase
from src.service.backoffice.app.query.list_reservations_use_case import ListReservationsUseCase
from src.service.backoffice.domain.entity.user_entity import UserEntity
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext
from src.service.backoffice.driving_adapter.http_controller.auth.role_auth import (
    get_request_context,
    require_permission,
)
from src.service.backoffice.driving_adapter.http_controller.schema.audit_schema import (
    AuditLogPageResponse,
)
from src.service.backoffice.driving_adapter.http_controller.schema.reservation_schema import (
    ReservationCreateRequest,
    ReservationDetailResponse,
    ReservationPageResponse,
    ReservationResponse,
    ReservationSummaryResponse,
    ReservationUpdateRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_reservation(
    request: ReservationCreateRequest,
    current_user: UserEntity = Depends(require_permission(Permission.RESERVATIONS_EDIT)),
    context: RequestContext = Depends(get_request_context),
    use_case: CreateReservationUseCase = Depends(CreateReservationUseCase.depends),
) -> ReservationDetailResponse:
    with tracer.start_as_current_span('controller.create_reservation') as span:
        span.set_attribute('pack_id', str(request.pack_id))
        span.set_attribute('quantity', request.quantity)

        detail = await use_case.execute(
            payer_name=request.payer_name,
            payer_phone=request.payer_phone,
            payer_email=request.payer_email,
            pack_id=request.pack_id,
            quantity=request.quantity,
            participants=[
                NewParticipant(name=p.name, email=p.email, phone=p.phone)
                for p in request.participants
            ],
            actor_id=current_user.id,
            context=context,
        )

        span.set_attribute('reservation.id', str(detail.reservation.id))
        return ReservationDetailResponse.model_validate(detail)


@router.get('')
@Logger.io
async def list_reservations(
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
    reservation_status: Optional[str] = Query(None, alias='status'),
    pack_id: Optional[UUID] = None,
    q: Optional[str] = None,
    current_user: UserEntity = Depends(require_permission(Permission.RESERVATIONS_VIEW)),
    use_case: ListReservationsUseCase = Depends(ListReservationsUseCase.depends),
) -> ReservationPageResponse:
    page = await use_case.execute(
        filters=ReservationFilter(status=reservation_status, pack_id=pack_id, q=q),
        limit=limit,
        offset=offset,
    )
    return ReservationPageResponse.model_validate(page)


@router.get('/{reservation_id}')
@Logger.io
async def get_reservation(
    reservation_id: UUID,
    current_user: UserEntity = Depends(require_permission(Permission.RESERVATIONS_VIEW)),
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> ReservationDetailResponse:
    detail = await use_case.execute(reservation_id=reservation_id)
    return ReservationDetailResponse.model_validate(detail)


@router.patch('/{reservation_id}')
@Logger.io
async def update_reservation(
    reservation_id: UUID,
    request: ReservationUpdateRequest,
    current_user: UserEntity = Depends(require_permission(Permission.RESERVATIONS_EDIT)),
    context: RequestContext = Depends(get_request_context),
    use_case: UpdateReservationUseCase = Depends(UpdateReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.execute(
        reservation_id=reservation_id,
        payer_name=request.payer_name,
        payer_phone=request.payer_phone,
        payer_email=request.payer_email,
        actor_id=current_user.id,
        context=context,
    )
    return ReservationResponse.model_validate(reservation)


@router.patch('/{reservation_id}/cancel')
@Logger.io
async def cancel_reservation(
    reservation_id: UUID,
    current_user: UserEntity = Depends(require_permission(Permission.RESERVATIONS_EDIT)),
    context: RequestContext = Depends(get_request_context),
    use_case: CancelReservationUseCase = Depends(CancelReservationUseCase.depends),
) -> ReservationSummaryResponse:
    summary = await use_case.execute(
        reservation_id=reservation_id, actor_id=current_user.id, context=context
    )
    return ReservationSummaryResponse.model_validate(summary)


@router.delete('/{reservation_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_reservation(
    reservation_id: UUID,
    current_user: UserEntity = Depends(require_permission(Permission.RESERVATIONS_DELETE)),
    context: RequestContext = Depends(get_request_context),
    use_case: DeleteReservationUseCase = Depends(DeleteReservationUseCase.depends),
) -> None:
    await use_case.execute(reservation_id=reservation_id, actor_id=current_user.id, context=context)


@router.get('/{reservation_id}/audit')
@Logger.io
async def list_reservation_audit(
    reservation_id: UUID,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: UserEntity = Depends(require_permission(Permission.RESERVATIONS_VIEW)),
    use_case: ListAuditLogsUseCase = Depends(ListAuditLogsUseCase.depends),
) -> AuditLogPageResponse:
    page = await use_case.execute(
        filters=AuditLogFilter(reservation_id=reservation_id), limit=limit, offset=offset
    )
    return AuditLogPageResponse.model_validate(page)
