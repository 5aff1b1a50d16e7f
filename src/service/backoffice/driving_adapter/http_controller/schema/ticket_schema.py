from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.service.backoffice.driving_adapter.http_controller.schema.reservation_schema import (
    ParticipantResponse,
    ReservationSummaryResponse,
    TicketResponse,
)


class TicketCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={'example': {'reservation_id': '01936d8f-5e73-7c4e-a9c5-123456789abc'}}
    )

    reservation_id: UUID


class IssuedTicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ticket: TicketResponse
    reservation: ReservationSummaryResponse
    qr_data_url: Optional[str] = None


class TicketDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ticket: TicketResponse
    reservation: ReservationSummaryResponse
    participants: List[ParticipantResponse]


class TicketPageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    data: List[TicketResponse]
    total: int
    limit: int
    offset: int
