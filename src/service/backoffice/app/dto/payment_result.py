import attrs

from src.service.backoffice.app.dto.reservation_summary import ReservationSummary
from src.service.backoffice.domain.entity.payment_entity import Payment


@attrs.frozen
class AddPaymentResult:
    payment: Payment
    reservation: ReservationSummary


@attrs.frozen
class DeletePaymentResult:
    reservation: ReservationSummary
    message: str = 'Payment deleted'
