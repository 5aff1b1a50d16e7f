"""init_backoffice_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17

Schema:
- pack: Reservable offers (price, capacity, ticket template)
- reservation: Payer, pack snapshot, totals and payment status
- payment: Ledger rows; SUM(amount) always equals reservation.total_paid
- ticket: At most one per reservation, globally unique ticket_number
- participant: Named attendees, validated individually at the entrance
- audit_log: Append-only record of every mutation

Note: user accounts live in an external identity store; actor ids are plain UUIDs.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        'created_at',
        sa.DateTime(timezone=True),
        server_default=sa.text('now()'),
        nullable=False,
    )


def upgrade() -> None:
    """Create all tables with final schema."""

    op.create_table(
        'pack',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('ticket_template', sa.String(length=20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'reservation',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('payer_name', sa.String(length=255), nullable=False),
        sa.Column('payer_phone', sa.String(length=50), nullable=False),
        sa.Column('payer_email', sa.String(length=255), nullable=True),
        sa.Column('pack_id', UUID(as_uuid=True), nullable=False),
        sa.Column('pack_name_snapshot', sa.String(length=255), nullable=False),
        sa.Column('unit_price', sa.Integer(), nullable=False),
        sa.Column('ticket_template', sa.String(length=20), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False),
        sa.Column('total_paid', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        _created_at(),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(['pack_id'], ['pack.id']),
        sa.CheckConstraint(
            'total_paid >= 0 AND total_paid <= total_price', name='ck_reservation_total_paid'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reservation_pack_id', 'reservation', ['pack_id'])
    op.create_index('ix_reservation_status', 'reservation', ['status'])

    op.create_table(
        'ticket',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('reservation_id', UUID(as_uuid=True), nullable=False),
        sa.Column('ticket_number', sa.String(length=64), nullable=False),
        sa.Column('qr_payload', sa.Text(), nullable=False),
        sa.Column('qr_image_url', sa.String(length=500), nullable=True),
        sa.Column('pdf_url', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='valid'),
        sa.Column('generated_by', UUID(as_uuid=True), nullable=True),
        sa.Column(
            'generated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservation.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('reservation_id', name='uq_ticket_reservation_id'),
        sa.UniqueConstraint('ticket_number', name='uq_ticket_ticket_number'),
    )
    op.create_index('ix_ticket_status', 'ticket', ['status'])

    op.create_table(
        'payment',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('reservation_id', UUID(as_uuid=True), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('method', sa.String(length=20), nullable=False),
        sa.Column('proof_url', sa.String(length=500), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_by', UUID(as_uuid=True), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservation.id'], ondelete='CASCADE'),
        sa.CheckConstraint('amount > 0', name='ck_payment_amount_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payment_reservation_id', 'payment', ['reservation_id'])

    op.create_table(
        'participant',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('reservation_id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column(
            'entrance_validated', sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column('validated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ticket_id', UUID(as_uuid=True), nullable=True),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservation.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['ticket_id'], ['ticket.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_participant_reservation_id', 'participant', ['reservation_id'])

    # No foreign keys: entries outlive the rows they describe until explicitly purged
    op.create_table(
        'audit_log',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('actor_id', UUID(as_uuid=True), nullable=True),
        sa.Column('permission', sa.String(length=50), nullable=True),
        sa.Column('entity_type', sa.String(length=50), nullable=False),
        sa.Column('entity_id', UUID(as_uuid=True), nullable=True),
        sa.Column('reservation_id', UUID(as_uuid=True), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('changes', JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='success'),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_log_actor_id', 'audit_log', ['actor_id'])
    op.create_index('ix_audit_log_reservation_id', 'audit_log', ['reservation_id'])
    op.create_index('ix_audit_log_action', 'audit_log', ['action'])
    op.create_index('ix_audit_log_entity', 'audit_log', ['entity_type', 'entity_id'])
    op.create_index('ix_audit_log_created_at', 'audit_log', ['created_at'])


def downgrade() -> None:
    """Drop all tables in reverse order of creation."""
    op.drop_table('audit_log')
    op.drop_table('participant')
    op.drop_table('payment')
    op.drop_table('ticket')
    op.drop_table('reservation')
    op.drop_table('pack')
