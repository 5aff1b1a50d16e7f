from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.service.backoffice.domain.enum.payment_method import PaymentMethod
from src.service.backoffice.domain.enum.reservation_status import ReservationStatus
from src.service.backoffice.domain.enum.ticket_status import TicketStatus


class ParticipantCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None


class ReservationCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'payer_name': 'Awa Ndiaye',
                'payer_phone': '+237690000000',
                'payer_email': 'awa@example.com',
                'pack_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'quantity': 1,
                'participants': [{'name': 'Awa Ndiaye'}, {'name': 'Moussa Diallo'}],
            }
        }
    )

    payer_name: str = Field(min_length=1, max_length=255)
    payer_phone: str = Field(min_length=1, max_length=50)
    payer_email: Optional[str] = None
    pack_id: UUID
    quantity: int = Field(ge=1)
    participants: List[ParticipantCreateRequest] = []


class ReservationUpdateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {'payer_phone': '+221770000001', 'payer_email': 'awa@example.com'}
        }
    )

    payer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    payer_phone: Optional[str] = Field(None, min_length=1, max_length=50)
    payer_email: Optional[str] = None


class ParticipantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    entrance_validated: bool
    validated_at: Optional[datetime] = None
    ticket_id: Optional[UUID] = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    reservation_id: UUID
    amount: int
    method: PaymentMethod
    comment: Optional[str] = None
    proof_url: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None


class TicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    reservation_id: UUID
    ticket_number: str
    status: TicketStatus
    qr_image_url: Optional[str] = None
    pdf_url: Optional[str] = None
    generated_by: Optional[UUID] = None
    generated_at: Optional[datetime] = None


class ReservationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    payer_name: str
    payer_phone: str
    payer_email: Optional[str] = None
    pack_id: UUID
    pack_name_snapshot: str
    unit_price: int
    ticket_template: Optional[str] = None
    quantity: int
    total_price: int
    total_paid: int
    remaining_amount: int
    status: ReservationStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReservationSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: ReservationStatus
    total_price: int
    total_paid: int
    remaining_amount: int
    pack_name: str


class ReservationDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reservation: ReservationResponse
    payments: List[PaymentResponse]
    participants: List[ParticipantResponse]
    ticket: Optional[TicketResponse] = None


class ReservationPageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    data: List[ReservationResponse]
    total: int
    limit: int
    offset: int
