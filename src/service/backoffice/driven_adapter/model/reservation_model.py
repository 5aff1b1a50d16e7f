from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class ReservationModel(Base):
    __tablename__ = 'reservation'

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)  # UUID7
    payer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    payer_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    payer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    pack_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey('pack.id'), nullable=False, index=True
    )
    # Snapshot taken at creation, never follows later pack edits
    pack_name_snapshot: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_price: Mapped[int] = mapped_column(Integer, nullable=False)
    ticket_template: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[int] = mapped_column(Integer, nullable=False)
    total_paid: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), default='pending', nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            'total_paid >= 0 AND total_paid <= total_price', name='ck_reservation_total_paid'
        ),
    )
