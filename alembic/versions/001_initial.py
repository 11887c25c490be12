"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255)),
        sa.Column('role', sa.Enum('ADMIN', 'STAFF', name='userrole'), default='STAFF'),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('refresh_token', sa.String(500)),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create orders table
    op.create_table(
        'orders',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('table_id', sa.String(50), nullable=False),
        sa.Column('session_id', sa.String(36), nullable=False, server_default=''),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='new'),
        sa.Column('payment_status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('order_note', sa.Text()),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_index('ix_orders_table_payment', 'orders', ['table_id', 'payment_status'])
    op.create_index('ix_orders_timestamp', 'orders', ['timestamp'])

    # Create waiter_calls table
    op.create_table(
        'waiter_calls',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('table_id', sa.String(50), nullable=False),
        sa.Column('message', sa.Text()),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_index('ix_waiter_calls_table_timestamp', 'waiter_calls', ['table_id', 'timestamp'])


def downgrade() -> None:
    op.drop_index('ix_waiter_calls_table_timestamp', table_name='waiter_calls')
    op.drop_table('waiter_calls')
    op.drop_index('ix_orders_timestamp', table_name='orders')
    op.drop_index('ix_orders_table_payment', table_name='orders')
    op.drop_table('orders')
    op.drop_table('users')
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
