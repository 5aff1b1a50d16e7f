from uuid import UUID

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.command.scan_ticket_use_case import ScanTicketUseCase
from src.service.backoffice.app.command.validate_participant_use_case import (
    ValidateParticipantUseCase,
)
from src.service.backoffice.app.query.decode_ticket_use_case import DecodeTicketUseCase
from src.service.backoffice.app.query.scan_stats_use_case import ScanStatsUseCase
from src.service.backoffice.domain.entity.user_entity import UserEntity
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext
from src.service.backoffice.driving_adapter.http_controller.auth.role_auth import (
    get_request_context,
    require_permission,
)
from src.service.backoffice.driving_adapter.http_controller.schema.scan_schema import (
    DecodeTicketRequest,
    ParticipantValidationResponse,
    ScanStatsResponse,
    TicketScanResponse,
)
from src.service.backoffice.driving_adapter.http_controller.schema.ticket_schema import (
    TicketDetailResponse,
)


router = APIRouter()


@router.post('/decode')
@Logger.io
async def decode_ticket(
    request: DecodeTicketRequest,
    current_user: UserEntity = Depends(require_permission(Permission.SCAN_VALIDATE)),
    use_case: DecodeTicketUseCase = Depends(DecodeTicketUseCase.depends),
) -> TicketDetailResponse:
    return TicketDetailResponse.model_validate(
        await use_case.execute(qr_payload=request.qr_payload)
    )


@router.get('/stats')
@Logger.io
async def scan_stats(
    current_user: UserEntity = Depends(require_permission(Permission.TICKETS_VIEW)),
    use_case: ScanStatsUseCase = Depends(ScanStatsUseCase.depends),
) -> ScanStatsResponse:
    return ScanStatsResponse.model_validate(await use_case.execute())


@router.post('/{ticket_number}')
@Logger.io
async def scan_ticket(
    ticket_number: str,
    current_user: UserEntity = Depends(require_permission(Permission.SCAN_VALIDATE)),
    context: RequestContext = Depends(get_request_context),
    use_case: ScanTicketUseCase = Depends(ScanTicketUseCase.depends),
) -> TicketScanResponse:
    result = await use_case.execute(
        ticket_number=ticket_number, actor_id=current_user.id, context=context
    )
    return TicketScanResponse.model_validate(result)


@router.post('/{ticket_number}/participant/{participant_id}')
@Logger.io
async def validate_participant(
    ticket_number: str,
    participant_id: UUID,
    current_user: UserEntity = Depends(require_permission(Permission.SCAN_VALIDATE)),
    context: RequestContext = Depends(get_request_context),
    use_case: ValidateParticipantUseCase = Depends(ValidateParticipantUseCase.depends),
) -> ParticipantValidationResponse:
    result = await use_case.execute(
        ticket_number=ticket_number,
        participant_id=participant_id,
        actor_id=current_user.id,
        context=context,
    )
    return ParticipantValidationResponse.model_validate(result)
