from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.command.add_payment_use_case import AddPaymentUseCase
from src.service.backoffice.app.command.delete_payment_use_case import DeletePaymentUseCase
from src.service.backoffice.app.dto.proof_file import ProofFile
from src.service.backoffice.app.interface.i_payment_command_repo import PaymentFilter
from src.service.backoffice.app.query.list_payments_use_case import ListPaymentsUseCase
from src.service.backoffice.domain.entity.user_entity import UserEntity
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.value_object.request_context import RequestContext
from src.service.backoffice.driving_adapter.http_controller.auth.role_auth import (
    get_request_context,
    require_permission,
)
from src.service.backoffice.driving_adapter.http_controller.schema.payment_schema import (
    AddPaymentResponse,
    DeletePaymentResponse,
    PaymentPageResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


async def _read_proof(proof: UploadFile) -> ProofFile:
    """Reads at most one byte past the cap so an oversized upload is never buffered whole"""
    max_bytes = settings.MAX_PROOF_FILE_BYTES
    if proof.size is not None and proof.size > max_bytes:
        raise ValidationError('Proof file is too large')
    content = await proof.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise ValidationError('Proof file is too large')
    return ProofFile(filename=proof.filename, content=content, content_type=proof.content_type)


@router.get('/payment')
@Logger.io
async def list_payments(
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
    reservation_id: Optional[UUID] = None,
    q: Optional[str] = None,
    current_user: UserEntity = Depends(require_permission(Permission.PAYMENTS_VIEW)),
    use_case: ListPaymentsUseCase = Depends(ListPaymentsUseCase.depends),
) -> PaymentPageResponse:
    page = await use_case.execute(
        filters=PaymentFilter(reservation_id=reservation_id, q=q), limit=limit, offset=offset
    )
    return PaymentPageResponse.model_validate(page)


@router.post('/reservation/{reservation_id}/payment', status_code=status.HTTP_201_CREATED)
@Logger.io
async def add_payment(
    reservation_id: UUID,
    amount: int = Form(...),
    method: str = Form(...),
    comment: Optional[str] = Form(None),
    proof: Optional[UploadFile] = File(None),
    current_user: UserEntity = Depends(require_permission(Permission.PAYMENTS_ADD)),
    context: RequestContext = Depends(get_request_context),
    use_case: AddPaymentUseCase = Depends(AddPaymentUseCase.depends),
) -> AddPaymentResponse:
    with tracer.start_as_current_span('controller.add_payment') as span:
        span.set_attribute('reservation.id', str(reservation_id))
        span.set_attribute('payment.method', method)

        proof_file = None
        if proof is not None and proof.filename:
            proof_file = await _read_proof(proof)

        result = await use_case.execute(
            reservation_id=reservation_id,
            amount=amount,
            method=method,
            comment=comment,
            proof=proof_file,
            actor_id=current_user.id,
            context=context,
        )
        return AddPaymentResponse.model_validate(result)


@router.delete('/reservation/{reservation_id}/payment/{payment_id}')
@Logger.io
async def delete_payment(
    reservation_id: UUID,
    payment_id: UUID,
    current_user: UserEntity = Depends(require_permission(Permission.PAYMENTS_DELETE)),
    context: RequestContext = Depends(get_request_context),
    use_case: DeletePaymentUseCase = Depends(DeletePaymentUseCase.depends),
) -> DeletePaymentResponse:
    result = await use_case.execute(
        reservation_id=reservation_id,
        payment_id=payment_id,
        actor_id=current_user.id,
        context=context,
    )
    return DeletePaymentResponse.model_validate(result)
