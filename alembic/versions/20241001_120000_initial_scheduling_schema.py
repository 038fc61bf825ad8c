"""initial scheduling schema: availability, events, bookings, sessions, calendars

Revision ID: 20241001_120000
Revises:
Create Date: 2024-10-01 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20241001_120000'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'weekly_availability',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('slot_duration_minutes', sa.Integer(), nullable=False, server_default='30'),
        _created_at(),
        sa.CheckConstraint('day_of_week >= 0 AND day_of_week <= 6', name='ck_weekly_availability_day'),
        sa.CheckConstraint('slot_duration_minutes > 0', name='ck_weekly_availability_duration'),
    )
    op.create_index('ix_weekly_availability_user_id', 'weekly_availability', ['user_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('min_advance_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('one_booking_per_email', sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'slug', name='uq_events_user_id_slug'),
    )
    op.create_index('ix_events_user_id', 'events', ['user_id'])

    op.create_table(
        'event_availability',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('event_id', sa.String(64), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.CheckConstraint('day_of_week >= 0 AND day_of_week <= 6', name='ck_event_availability_day'),
    )
    op.create_index('ix_event_availability_event_id', 'event_availability', ['event_id'])

    # No unique constraint on (user_id, scheduled_at): freedom is checked in the booking flow
    op.create_table(
        'bookings',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('event_id', sa.String(64), sa.ForeignKey('events.id', ondelete='SET NULL')),
        sa.Column('lead_id', sa.String(64)),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), server_default='30'),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('phone', sa.String(40)),
        sa.Column('note', sa.Text()),
        sa.Column('source', sa.String(50)),
        sa.Column('status', sa.String(16), nullable=False, server_default='pending'),
        _created_at(),
        sa.CheckConstraint("status IN ('pending', 'confirmed', 'cancelled')", name='ck_bookings_status'),
    )
    op.create_index('ix_bookings_user_id', 'bookings', ['user_id'])
    op.create_index('ix_bookings_scheduled_at', 'bookings', ['scheduled_at'])

    op.create_table(
        'clients',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(320)),
        _created_at(),
    )
    op.create_index('ix_clients_user_id', 'clients', ['user_id'])

    op.create_table(
        'sessions',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('client_id', sa.String(64), sa.ForeignKey('clients.id', ondelete='CASCADE')),
        sa.Column('user_id', sa.String(64)),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(timezone=True)),
        sa.Column('duration_minutes', sa.Integer()),
        sa.Column('notes', sa.Text()),
        _created_at(),
    )
    op.create_index('ix_sessions_scheduled_at', 'sessions', ['scheduled_at'])

    op.create_table(
        'calendar_connections',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('provider', sa.String(32), nullable=False, server_default='google'),
        sa.Column('access_token', sa.Text()),
        sa.Column('refresh_token', sa.Text()),
        sa.Column('expires_at', sa.DateTime(timezone=True)),
        sa.Column('calendar_id', sa.String(255)),
        sa.UniqueConstraint('user_id', 'provider', name='uq_calendar_connections_user_provider'),
    )

    op.create_table(
        'user_calendars',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('provider', sa.String(32), nullable=False, server_default='google'),
        sa.Column('calendar_id', sa.String(255), nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )
    op.create_index('ix_user_calendars_user_id', 'user_calendars', ['user_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_user_calendars_user_id', table_name='user_calendars')
    op.drop_table('user_calendars')
    op.drop_table('calendar_connections')
    op.drop_index('ix_sessions_scheduled_at', table_name='sessions')
    op.drop_table('sessions')
    op.drop_index('ix_clients_user_id', table_name='clients')
    op.drop_table('clients')
    op.drop_index('ix_bookings_scheduled_at', table_name='bookings')
    op.drop_index('ix_bookings_user_id', table_name='bookings')
    op.drop_table('bookings')
    op.drop_index('ix_event_availability_event_id', table_name='event_availability')
    op.drop_table('event_availability')
    op.drop_index('ix_events_user_id', table_name='events')
    op.drop_table('events')
    op.drop_index('ix_weekly_availability_user_id', table_name='weekly_availability')
    op.drop_table('weekly_availability')
