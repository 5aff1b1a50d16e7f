from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.command.create_ticket_use_case import CreateTicketUseCase
from src.service.backoffice.app.command.regenerate_ticket_artifacts_use_case import (
    RegenerateTicketArtifactsUseCase,
)
from src.service.backoffice.app.interface.i_ticket_command_repo import TicketFilter
from src.service.backoffice.app.query.get_ticket_use_case import GetTicketUseCase
from src.service.backoffice.app.query.list_tickets_use_case import ListTicketsUseCase
from src.service.backoffice.domain.entity.user_entity import UserEntity
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext
from src.service.backoffice.driving_adapter.http_controller.auth.role_auth import (
    get_request_context,
    require_permission,
)
from src.service.backoffice.driving_adapter.http_controller.schema.ticket_schema import (
    IssuedTicketResponse,
    TicketCreateRequest,
    TicketDetailResponse,
    TicketPageResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_ticket(
    request: TicketCreateRequest,
    current_user: UserEntity = Depends(require_permission(Permission.TICKETS_GENERATE)),
    context: RequestContext = Depends(get_request_context),
    use_case: CreateTicketUseCase = Depends(CreateTicketUseCase.depends),
) -> IssuedTicketResponse:
    with tracer.start_as_current_span('controller.create_ticket') as span:
        span.set_attribute('reservation.id', str(request.reservation_id))
        result = await use_case.execute(
            reservation_id=request.reservation_id, actor_id=current_user.id, context=context
        )
        span.set_attribute('ticket.number', result.ticket.ticket_number)
        return IssuedTicketResponse.model_validate(result)


@router.get('')
@Logger.io
async def list_tickets(
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
    ticket_status: Optional[str] = Query(None, alias='status'),
    q: Optional[str] = None,
    current_user: UserEntity = Depends(require_permission(Permission.TICKETS_VIEW)),
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> TicketPageResponse:
    page = await use_case.execute(
        filters=TicketFilter(status=ticket_status, q=q), limit=limit, offset=offset
    )
    return TicketPageResponse.model_validate(page)


@router.get('/{ticket_id}')
@Logger.io
async def get_ticket(
    ticket_id: UUID,
    current_user: UserEntity = Depends(require_permission(Permission.TICKETS_VIEW)),
    use_case: GetTicketUseCase = Depends(GetTicketUseCase.depends),
) -> TicketDetailResponse:
    return TicketDetailResponse.model_validate(await use_case.execute(ticket_id=ticket_id))


@router.post('/{ticket_id}/artifacts')
@Logger.io
async def regenerate_ticket_artifacts(
    ticket_id: UUID,
    current_user: UserEntity = Depends(require_permission(Permission.TICKETS_GENERATE)),
    context: RequestContext = Depends(get_request_context),
    use_case: RegenerateTicketArtifactsUseCase = Depends(RegenerateTicketArtifactsUseCase.depends),
) -> IssuedTicketResponse:
    result = await use_case.execute(ticket_id=ticket_id, actor_id=current_user.id, context=context)
    return IssuedTicketResponse.model_validate(result)
