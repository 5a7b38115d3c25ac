"""lessons, support tickets and user settings

Revision ID: 0002_lessons_support_settings
Revises: 0001_initial_schema
Create Date: 2026-10-17 09:41:07.582310

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002_lessons_support_settings'
down_revision: Union[str, None] = '0001_initial_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id():
    return sa.Column('id', sa.String(36), primary_key=True)


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'))


def _updated_at():
    return sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'))


def upgrade() -> None:
    op.create_table(
        'lessons',
        _id(),
        sa.Column('class_id', sa.String(36), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('book_day', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False, index=True),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('room', sa.String(255)),
        sa.Column('status', sa.String(16), nullable=False, server_default=sa.text("'scheduled'")),
        sa.Column('notes', sa.Text()),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint(
            "status IN ('scheduled', 'in_progress', 'completed', 'cancelled')",
            name='lessons_status_check'
        ),
    )

    op.create_table(
        'support_tickets',
        _id(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(64), nullable=False),
        sa.Column('priority', sa.String(16), nullable=False, server_default=sa.text("'medium'")),
        sa.Column('status', sa.String(16), nullable=False, server_default=sa.text("'open'")),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('assigned_to', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL')),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint("priority IN ('low', 'medium', 'high', 'urgent')", name='support_tickets_priority_check'),
        sa.CheckConstraint("status IN ('open', 'in_progress', 'resolved', 'closed')", name='support_tickets_status_check'),
    )

    op.create_table(
        'support_ticket_responses',
        _id(),
        sa.Column('ticket_id', sa.String(36), sa.ForeignKey('support_tickets.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_from_support', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        _created_at(),
    )

    op.create_table(
        'user_settings',
        _id(),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('theme', sa.String(16), nullable=False, server_default=sa.text("'light'")),
        sa.Column('language', sa.String(16), nullable=False, server_default=sa.text("'pt-BR'")),
        sa.Column('timezone', sa.String(64), nullable=False, server_default=sa.text("'America/Sao_Paulo'")),
        sa.Column('date_format', sa.String(16), nullable=False, server_default=sa.text("'DD/MM/YYYY'")),
        sa.Column('currency', sa.String(8), nullable=False, server_default=sa.text("'BRL'")),
        sa.Column('email_notifications', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('push_notifications', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('lesson_reminders', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('weekly_reports', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('session_timeout', sa.Integer(), nullable=False, server_default=sa.text('30')),
        _created_at(),
        _updated_at(),
    )


def downgrade() -> None:
    for table in [
        'user_settings',
        'support_ticket_responses',
        'support_tickets',
        'lessons',
    ]:
        op.drop_table(table)
