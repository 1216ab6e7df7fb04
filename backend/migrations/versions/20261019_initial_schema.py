"""Initial schema: logins, inventory items, stock, orders and order items

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19

This migration adds:
1. logins (identity store; bcrypt hashes, admin flag)
2. items and stocks (catalog plus one stock row per item)
3. orders and order_items (order lines priced from the catalog)

All business tables carry the audit/soft-delete columns
(created_by, created_date, updated_by, updated_date, is_active, is_deleted).
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_initial'
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns():
    return [
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('created_date', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.Column('updated_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default='0'),
    ]


def upgrade():
    # ==========================================================================
    # 1. LOGINS
    # ==========================================================================
    op.create_table('logins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('created_date', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username', name='uq_logins_username'),
        sa.UniqueConstraint('email', name='uq_logins_email'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('logins', schema=None) as batch_op:
        batch_op.create_index('ix_logins_username', ['username'], unique=False)

    # ==========================================================================
    # 2. ITEMS / STOCKS
    # ==========================================================================
    op.create_table('items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('item_name', sa.String(length=100), nullable=False),
        sa.Column('item_code', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=12, scale=2), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('items', schema=None) as batch_op:
        batch_op.create_index('ix_items_code_deleted', ['item_code', 'is_deleted'], unique=False)
        batch_op.create_index('ix_items_is_deleted', ['is_deleted'], unique=False)

    op.create_table('stocks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('item_id', sa.Integer(), nullable=False),
        sa.Column('quantity_available', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('warehouse_location', sa.String(length=100), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['item_id'], ['items.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('item_id', name='uq_stocks_item'),
        sa.CheckConstraint('quantity_available >= 0', name='ck_stocks_quantity_non_negative'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('stocks', schema=None) as batch_op:
        batch_op.create_index('ix_stocks_item_id', ['item_id'], unique=False)
        batch_op.create_index('ix_stocks_is_deleted', ['is_deleted'], unique=False)

    # ==========================================================================
    # 3. ORDERS / ORDER ITEMS
    # ==========================================================================
    op.create_table('orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_number', sa.String(length=50), nullable=False),
        sa.Column('customer_name', sa.String(length=100), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='Pending'),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_number', name='uq_orders_order_number'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('orders', schema=None) as batch_op:
        batch_op.create_index('ix_orders_created_by_deleted', ['created_by', 'is_deleted'], unique=False)
        batch_op.create_index('ix_orders_status', ['status'], unique=False)
        batch_op.create_index('ix_orders_is_deleted', ['is_deleted'], unique=False)

    op.create_table('order_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('item_id', sa.Integer(), nullable=False),
        sa.Column('item_name', sa.String(length=100), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=12, scale=2), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ),
        sa.ForeignKeyConstraint(['item_id'], ['items.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('order_items', schema=None) as batch_op:
        batch_op.create_index('ix_order_items_order_deleted', ['order_id', 'is_deleted'], unique=False)
        batch_op.create_index('ix_order_items_order_id', ['order_id'], unique=False)
        batch_op.create_index('ix_order_items_item_id', ['item_id'], unique=False)
        batch_op.create_index('ix_order_items_is_deleted', ['is_deleted'], unique=False)


def downgrade():
    with op.batch_alter_table('order_items', schema=None) as batch_op:
        batch_op.drop_index('ix_order_items_is_deleted')
        batch_op.drop_index('ix_order_items_item_id')
        batch_op.drop_index('ix_order_items_order_id')
        batch_op.drop_index('ix_order_items_order_deleted')
    op.drop_table('order_items')

    with op.batch_alter_table('orders', schema=None) as batch_op:
        batch_op.drop_index('ix_orders_is_deleted')
        batch_op.drop_index('ix_orders_status')
        batch_op.drop_index('ix_orders_created_by_deleted')
    op.drop_table('orders')

    with op.batch_alter_table('stocks', schema=None) as batch_op:
        batch_op.drop_index('ix_stocks_is_deleted')
        batch_op.drop_index('ix_stocks_item_id')
    op.drop_table('stocks')

    with op.batch_alter_table('items', schema=None) as batch_op:
        batch_op.drop_index('ix_items_is_deleted')
        batch_op.drop_index('ix_items_code_deleted')
    op.drop_table('items')

    with op.batch_alter_table('logins', schema=None) as batch_op:
        batch_op.drop_index('ix_logins_username')
    op.drop_table('logins')
