"""create_carwash_tables

Revision ID: 3b7c91e2d4a1
Revises: 
Create Date: 2026-10-19 09:12:44.501822

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b7c91e2d4a1'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BOOKING_STATUSES = ('pending', 'confirmed', 'picked-up', 'in-progress', 'completed', 'cancelled')


def upgrade():
    op.create_table(
        'branches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('phone', sa.String(length=20)),
        sa.Column('manager', sa.String(length=255)),
        sa.Column('staff_count', sa.Integer()),
        sa.Column('bank_name', sa.String(length=100)),
        sa.Column('bank_account_number', sa.String(length=50)),
        sa.Column('bank_account_name', sa.String(length=255)),
        sa.Column('operating_hours_open', sa.String(length=5)),
        sa.Column('operating_hours_close', sa.String(length=5)),
        sa.Column('pickup_coverage_radius', sa.Float()),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
        sa.Column('status', sa.Enum('active', 'inactive', name='branch_status'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_branches_id', 'branches', ['id'])

    op.create_table(
        'services',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('category', sa.Enum('car-regular', 'car-premium', 'motorcycle', name='service_category'), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('pickup_fee', sa.Integer(), nullable=False),
        sa.Column('supports_pickup', sa.Boolean(), nullable=False),
        sa.Column('duration', sa.Integer()),
        sa.Column('features', sa.JSON()),
        sa.Column('loyalty_points_reward', sa.Integer()),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_services_id', 'services', ['id'])

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('email', sa.String(length=255)),
        sa.Column('vehicle_plate_numbers', sa.JSON()),
        sa.Column('total_bookings', sa.Integer(), nullable=False),
        sa.Column('total_loyalty_points', sa.Integer(), nullable=False),
        sa.Column('join_date', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_customers_id', 'customers', ['id'])
    op.create_index('ix_customers_phone', 'customers', ['phone'], unique=True)

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('booking_code', sa.String(length=20), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=20), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('booking_date', sa.Date(), nullable=False),
        sa.Column('booking_time', sa.String(length=5), nullable=False),
        sa.Column('subtotal_price', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False),
        sa.Column('is_pickup_service', sa.Boolean(), nullable=False),
        sa.Column('pickup_address', sa.Text()),
        sa.Column('pickup_notes', sa.Text()),
        sa.Column('vehicle_plate_number', sa.String(length=20), nullable=False),
        sa.Column('payment_method', sa.Enum('cash', 'transfer', 'qris', 'card', name='payment_method'), nullable=False),
        sa.Column('payment_proof', sa.String(length=500)),
        sa.Column('payment_proof_public_id', sa.String(length=255)),
        sa.Column('notes', sa.Text()),
        sa.Column('loyalty_points_used', sa.Integer(), nullable=False),
        sa.Column('loyalty_points_earned', sa.Integer(), nullable=False),
        sa.Column('points_credited', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('points_credited_at', sa.DateTime(timezone=True)),
        sa.Column('status', sa.Enum(*BOOKING_STATUSES, name='booking_status'), nullable=False),
        sa.Column('booking_source', sa.Enum('online', 'offline', name='booking_source'), nullable=False),
        sa.Column('created_by_admin', sa.Boolean(), nullable=False),
        sa.Column('admin_username', sa.String(length=100)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_bookings_id', 'bookings', ['id'])
    op.create_index('ix_bookings_booking_code', 'bookings', ['booking_code'])
    op.create_index('ix_bookings_customer_phone', 'bookings', ['customer_phone'])
    op.create_index('ix_bookings_booking_date', 'bookings', ['booking_date'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])

    op.create_table(
        'loyalty_transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('booking_id', sa.Integer(), sa.ForeignKey('bookings.id', ondelete='SET NULL')),
        sa.Column('type', sa.Enum('earn', 'redeem', 'adjust', name='loyalty_transaction_type'), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_loyalty_transactions_id', 'loyalty_transactions', ['id'])
    op.create_index('ix_loyalty_transactions_customer_id', 'loyalty_transactions', ['customer_id'])

def downgrade():
    op.drop_table('loyalty_transactions')
    op.drop_table('bookings')
    op.drop_table('customers')
    op.drop_table('services')
    op.drop_table('branches')
    for enum_name in ('loyalty_transaction_type', 'booking_source', 'booking_status',
                      'payment_method', 'service_category', 'branch_status'):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
