from typing import List

from pydantic import BaseModel, ConfigDict

from src.service.backoffice.driving_adapter.http_controller.schema.reservation_schema import (
    PaymentResponse,
    ReservationSummaryResponse,
)


class AddPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment: PaymentResponse
    reservation: ReservationSummaryResponse


class DeletePaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message: str
    reservation: ReservationSummaryResponse


class PaymentPageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    data: List[PaymentResponse]
    total: int
    limit: int
    offset: int
