"""initial schema with default organisers

Revision ID: 001_initial
Revises:
Create Date: 2025-06-02 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    organisers = op.create_table(
        'organisers',
        sa.Column('organiser_id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
    )
    op.create_index('ix_organisers_organiser_id', 'organisers', ['organiser_id'])

    op.create_table(
        'site_settings',
        sa.Column('setting_id', sa.Integer(), primary_key=True),
        sa.Column('site_name', sa.String(length=200), nullable=False),
        sa.Column('site_description', sa.Text(), nullable=False),
    )

    op.create_table(
        'events',
        sa.Column('event_id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('event_date', sa.DateTime(), nullable=True),
        sa.Column('full_price_tickets', sa.Integer(), nullable=False),
        sa.Column('full_price_cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('concession_tickets', sa.Integer(), nullable=False),
        sa.Column('concession_cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column(
            'organiser_id',
            sa.Integer(),
            sa.ForeignKey('organisers.organiser_id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('created_date', sa.DateTime(), nullable=False),
        sa.Column('published_date', sa.DateTime(), nullable=True),
        sa.Column('last_modified', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_events_event_id', 'events', ['event_id'])
    op.create_index('ix_events_event_date', 'events', ['event_date'])
    op.create_index('ix_events_status', 'events', ['status'])
    op.create_index('ix_events_organiser_id', 'events', ['organiser_id'])
    op.create_index('idx_event_status_date', 'events', ['status', 'event_date'])
    op.create_index('idx_event_status_created', 'events', ['status', 'created_date'])

    op.create_table(
        'bookings',
        sa.Column('booking_id', sa.Integer(), primary_key=True),
        sa.Column(
            'event_id',
            sa.Integer(),
            sa.ForeignKey('events.event_id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('attendee_name', sa.String(length=200), nullable=False),
        sa.Column('full_price_tickets_booked', sa.Integer(), nullable=False),
        sa.Column('concession_tickets_booked', sa.Integer(), nullable=False),
        sa.Column('total_cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('booking_date', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_bookings_booking_id', 'bookings', ['booking_id'])
    op.create_index('ix_bookings_event_id', 'bookings', ['event_id'])
    op.create_index('ix_bookings_booking_date', 'bookings', ['booking_date'])
    op.create_index('idx_booking_event_date', 'bookings', ['event_id', 'booking_date'])

    # Passwords for these ids come from ORGANISER_PASSWORD_<id>
    op.bulk_insert(
        organisers,
        [
            {
                'organiser_id': 1,
                'name': 'Sarah Johnson',
                'description': 'Lead Yoga Instructor and Studio Manager',
            },
            {
                'organiser_id': 2,
                'name': 'Mike Chen',
                'description': 'Assistant Instructor and Event Coordinator',
            },
        ],
    )


def downgrade() -> None:
    op.drop_table('bookings')
    op.drop_table('events')
    op.drop_table('site_settings')
    op.drop_table('organisers')
