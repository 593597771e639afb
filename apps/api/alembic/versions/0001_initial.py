"""Initial schema - accounts, appointments, storage, partners, notifications

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    cols = [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]
    if with_updated:
        cols.append(
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return cols


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Accounts
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('phone_number', sa.String(20), nullable=True, unique=True),
        sa.Column('verified_phone_number', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('payment_customer_id', sa.String(100), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'admins',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('name', sa.String(200), nullable=True),
        sa.Column('phone_number', sa.String(20), nullable=True),
        sa.Column('role', sa.String(20), server_default='ADMIN', nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(with_updated=False),
    )

    op.create_table(
        'verification_codes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('contact', sa.String(255), nullable=False),
        sa.Column('code', sa.String(10), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(with_updated=False),
    )
    op.create_index('idx_verification_codes_contact', 'verification_codes', ['contact'])

    # ==========================================================================
    # Service providers
    # ==========================================================================
    op.create_table(
        'drivers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('phone_number', sa.String(20), nullable=True, unique=True),
        sa.Column('verified_phone_number', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('services', sa.JSON(), nullable=False),
        sa.Column('vehicle_type', sa.String(50), nullable=True),
        sa.Column('has_trailer_hitch', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('is_approved', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('application_complete', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('status', sa.String(20), server_default='Pending', nullable=False),
        sa.Column('dispatch_worker_id', sa.String(100), nullable=True),
        sa.Column('dispatch_team_ids', sa.JSON(), nullable=False),
        sa.Column('payment_account_id', sa.String(100), nullable=True),
        sa.Column('payment_onboarding_complete', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('payment_payouts_enabled', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('agreed_to_terms', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'moving_partners',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('email', sa.String(255), nullable=True, unique=True),
        sa.Column('phone_number', sa.String(20), nullable=True, unique=True),
        sa.Column('verified_phone_number', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('hourly_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('website', sa.String(500), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('dispatch_team_id', sa.String(100), nullable=True),
        sa.Column('is_approved', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('application_complete', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('status', sa.String(20), server_default='INACTIVE', nullable=False),
        sa.Column('payment_account_id', sa.String(100), nullable=True),
        sa.Column('payment_onboarding_complete', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('payment_payouts_enabled', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('agreed_to_terms', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'moving_partner_drivers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('moving_partner_id', sa.Uuid(), sa.ForeignKey('moving_partners.id', ondelete='CASCADE'), nullable=False),
        sa.Column('driver_id', sa.Uuid(), sa.ForeignKey('drivers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint('moving_partner_id', 'driver_id', name='uq_moving_partner_driver'),
    )

    op.create_table(
        'vehicles',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('driver_id', sa.Uuid(), sa.ForeignKey('drivers.id', ondelete='CASCADE'), nullable=True),
        sa.Column('moving_partner_id', sa.Uuid(), sa.ForeignKey('moving_partners.id', ondelete='CASCADE'), nullable=True),
        sa.Column('make', sa.String(100), nullable=False),
        sa.Column('model', sa.String(100), nullable=False),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('license_plate', sa.String(20), nullable=True),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('is_approved', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(with_updated=False),
    )

    # ==========================================================================
    # Appointments
    # ==========================================================================
    op.create_table(
        'appointments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('job_code', sa.String(20), nullable=False, unique=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('moving_partner_id', sa.Uuid(), sa.ForeignKey('moving_partners.id', ondelete='SET NULL'), nullable=True),
        sa.Column('appointment_type', sa.String(50), nullable=False),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('zipcode', sa.String(10), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('time', sa.String(50), nullable=True),
        sa.Column('number_of_units', sa.Integer(), server_default='0', nullable=False),
        sa.Column('plan_type', sa.String(50), nullable=True),
        sa.Column('insurance_coverage', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('delivery_reason', sa.String(255), nullable=True),
        sa.Column('quoted_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('loading_help_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('monthly_storage_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('monthly_insurance_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('invoice_total', sa.Numeric(10, 2), nullable=True),
        sa.Column('status', sa.String(20), server_default='Scheduled', nullable=False),
        sa.Column('called_moving_partner', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('got_hold_of_moving_partner', sa.Boolean(), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_appointments_user', 'appointments', ['user_id', 'date'])
    op.create_index('idx_appointments_status_date', 'appointments', ['status', 'date'])

    op.create_table(
        'appointment_cancellations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('appointment_id', sa.Uuid(), sa.ForeignKey('appointments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('cancellation_fee', sa.Numeric(10, 2), nullable=False),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('cancellation_date', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # ==========================================================================
    # Storage
    # ==========================================================================
    op.create_table(
        'storage_units',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('storage_unit_number', sa.String(50), nullable=False, unique=True),
        sa.Column('barcode', sa.String(100), nullable=True, unique=True),
        sa.Column('status', sa.String(30), server_default='Empty', nullable=False),
        sa.Column('cleaning_photos', sa.JSON(), nullable=False),
        sa.Column('last_cleaned_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_storage_units_status', 'storage_units', ['status'])

    op.create_table(
        'storage_unit_usages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('storage_unit_id', sa.Uuid(), sa.ForeignKey('storage_units.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_appointment_id', sa.Uuid(), sa.ForeignKey('appointments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('end_appointment_id', sa.Uuid(), sa.ForeignKey('appointments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('usage_start_date', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('usage_end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('warehouse_location', sa.String(100), nullable=True),
        sa.Column('warehouse_name', sa.String(100), nullable=True),
        sa.Column('padlock_combo', sa.String(20), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
    )
    op.create_index(
        'uq_storage_unit_usages_active',
        'storage_unit_usages',
        ['storage_unit_id'],
        unique=True,
        postgresql_where=sa.text('usage_end_date IS NULL'),
        sqlite_where=sa.text('usage_end_date IS NULL'),
    )
    op.create_index('idx_storage_unit_usages_user', 'storage_unit_usages', ['user_id'])

    op.create_table(
        'storage_unit_cleanings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('storage_unit_id', sa.Uuid(), sa.ForeignKey('storage_units.id', ondelete='CASCADE'), nullable=False),
        sa.Column('admin_id', sa.Uuid(), sa.ForeignKey('admins.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('cleaned_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )

    # ==========================================================================
    # Audit, notifications, reviews
    # ==========================================================================
    op.create_table(
        'admin_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('admin_id', sa.Uuid(), sa.ForeignKey('admins.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('target_type', sa.String(50), nullable=False),
        sa.Column('target_id', sa.String(64), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        *_timestamps(with_updated=False),
    )
    op.create_index('idx_admin_logs_target', 'admin_logs', ['target_type', 'target_id'])
    op.create_index('idx_admin_logs_admin', 'admin_logs', ['admin_id', 'created_at'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('recipient_type', sa.String(20), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), server_default='UNREAD', nullable=False),
        sa.Column('group_key', sa.String(255), nullable=True),
        sa.Column('group_count', sa.Integer(), server_default='1', nullable=False),
        sa.Column('appointment_id', sa.Uuid(), sa.ForeignKey('appointments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('driver_id', sa.Uuid(), sa.ForeignKey('drivers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('moving_partner_id', sa.Uuid(), sa.ForeignKey('moving_partners.id', ondelete='SET NULL'), nullable=True),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(with_updated=False),
    )
    op.create_index(
        'idx_notif_recipient_status',
        'notifications',
        ['recipient_id', 'recipient_type', 'status', 'created_at'],
    )
    op.create_index('idx_notif_group', 'notifications', ['recipient_id', 'group_key'])

    op.create_table(
        'google_reviews',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('author_name', sa.String(200), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('relative_time_description', sa.String(100), nullable=True),
        sa.Column('profile_photo_url', sa.String(500), nullable=True),
        sa.Column('review_time', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(with_updated=False),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('google_reviews')
    op.drop_index('idx_notif_group', table_name='notifications')
    op.drop_index('idx_notif_recipient_status', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('idx_admin_logs_admin', table_name='admin_logs')
    op.drop_index('idx_admin_logs_target', table_name='admin_logs')
    op.drop_table('admin_logs')
    op.drop_table('storage_unit_cleanings')
    op.drop_index('idx_storage_unit_usages_user', table_name='storage_unit_usages')
    op.drop_index('uq_storage_unit_usages_active', table_name='storage_unit_usages')
    op.drop_table('storage_unit_usages')
    op.drop_index('idx_storage_units_status', table_name='storage_units')
    op.drop_table('storage_units')
    op.drop_table('appointment_cancellations')
    op.drop_index('idx_appointments_status_date', table_name='appointments')
    op.drop_index('idx_appointments_user', table_name='appointments')
    op.drop_table('appointments')
    op.drop_table('vehicles')
    op.drop_table('moving_partner_drivers')
    op.drop_table('moving_partners')
    op.drop_table('drivers')
    op.drop_index('idx_verification_codes_contact', table_name='verification_codes')
    op.drop_table('verification_codes')
    op.drop_table('admins')
    op.drop_table('users')
