from typing import List

from pydantic import BaseModel, ConfigDict, Field

from src.service.backoffice.domain.enum.ticket_status import TicketStatus
from src.service.backoffice.driving_adapter.http_controller.schema.reservation_schema import (
    ParticipantResponse,
)


class DecodeTicketRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'qr_payload': (
                    '{"ticket_number":"MIP-M1ZK3J2Q-7XQ0BD",'
                    '"reservation_id":"01936d8f-5e73-7c4e-a9c5-123456789abc",'
                    '"timestamp":1736505000,"signature":"<hex>"}'
                )
            }
        }
    )

    qr_payload: str = Field(min_length=1)


class ParticipantValidationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ticket_status: TicketStatus
    participant: ParticipantResponse
    remaining_participants: int


class TicketScanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ticket_status: TicketStatus
    validated_participants: List[ParticipantResponse]


class ScanStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_tickets: int
    total_scanned: int
    valid_tickets: int
    cancelled_tickets: int
    scanned_percentage: float
