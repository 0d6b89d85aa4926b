"""Initial schema: staff, catalog, sales, attendance, terminal tokens

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19

This migration adds:
1. staff_members (PIN-only credentials, cached clock status)
2. products (services and retail items; stock fields only for retail)
3. transactions and transaction_lines (immutable sales ledger)
4. attendance_records (one row per shift)
5. clock_tokens (single-use terminal codes)
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ==========================================================================
    # 1. STAFF
    # ==========================================================================
    op.create_table('staff_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('job_title', sa.String(length=120), nullable=False),
        sa.Column('pin_hash', sa.String(length=255), nullable=False),
        sa.Column('is_clocked_in', sa.Boolean(), nullable=False),
        sa.Column('last_clock_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint("role IN ('STAFF', 'SUPERVISOR', 'MANAGER')", name='ck_staff_role'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_staff_clocked_in', 'staff_members', ['is_clocked_in'], unique=False)

    # ==========================================================================
    # 2. CATALOG
    # ==========================================================================
    op.create_table('products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(length=64), nullable=False),
        sa.Column('sub_category', sa.String(length=120), nullable=False),
        sa.Column('is_retail', sa.Boolean(), nullable=False),
        sa.Column('stock_level', sa.Integer(), nullable=True),
        sa.Column('min_reorder_point', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
        sa.CheckConstraint('stock_level IS NULL OR stock_level >= 0', name='ck_products_stock_non_negative'),
        sa.CheckConstraint(
            '(is_retail AND stock_level IS NOT NULL AND min_reorder_point IS NOT NULL) OR '
            '(NOT is_retail AND stock_level IS NULL AND min_reorder_point IS NULL)',
            name='ck_products_retail_stock_fields',
        ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_products_category', 'products', ['category'], unique=False)

    # ==========================================================================
    # 3. SALES LEDGER
    # ==========================================================================
    op.create_table('transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=True),
        sa.Column('staff_name', sa.String(length=120), nullable=False),
        sa.Column('total_amount', sa.Integer(), nullable=False),
        sa.Column('payment_method', sa.String(length=16), nullable=False),
        sa.CheckConstraint("payment_method IN ('Cash', 'Card', 'Transfer')", name='ck_transactions_payment'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff_members.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_transactions_created', 'transactions', ['created_at'], unique=False)
    op.create_index('ix_transactions_staff_created', 'transactions', ['staff_id', 'created_at'], unique=False)
    op.create_index(op.f('ix_transactions_staff_id'), 'transactions', ['staff_id'], unique=False)

    op.create_table('transaction_lines',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('transaction_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=True),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=64), nullable=False),
        sa.Column('is_retail', sa.Boolean(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price_at_sale', sa.Integer(), nullable=False),
        sa.Column('line_total', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity >= 1', name='ck_transaction_lines_quantity'),
        sa.CheckConstraint('price_at_sale >= 0', name='ck_transaction_lines_price'),
        sa.ForeignKeyConstraint(['transaction_id'], ['transactions.id']),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index(op.f('ix_transaction_lines_transaction_id'), 'transaction_lines', ['transaction_id'], unique=False)
    op.create_index(op.f('ix_transaction_lines_product_id'), 'transaction_lines', ['product_id'], unique=False)

    # ==========================================================================
    # 4. ATTENDANCE
    # ==========================================================================
    op.create_table('attendance_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=True),
        sa.Column('staff_name', sa.String(length=120), nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('clock_in_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('clock_out_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration_hours', sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(['staff_id'], ['staff_members.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_attendance_staff_open', 'attendance_records', ['staff_id', 'clock_out_at'], unique=False)
    op.create_index('ix_attendance_clock_in', 'attendance_records', ['clock_in_at'], unique=False)
    op.create_index(op.f('ix_attendance_records_staff_id'), 'attendance_records', ['staff_id'], unique=False)

    # ==========================================================================
    # 5. TERMINAL TOKENS
    # ==========================================================================
    op.create_table('clock_tokens',
        sa.Column('token', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('token')
    )
    op.create_index('ix_clock_tokens_expires', 'clock_tokens', ['expires_at'], unique=False)


def downgrade():
    op.drop_index('ix_clock_tokens_expires', table_name='clock_tokens')
    op.drop_table('clock_tokens')

    op.drop_index(op.f('ix_attendance_records_staff_id'), table_name='attendance_records')
    op.drop_index('ix_attendance_clock_in', table_name='attendance_records')
    op.drop_index('ix_attendance_staff_open', table_name='attendance_records')
    op.drop_table('attendance_records')

    op.drop_index(op.f('ix_transaction_lines_product_id'), table_name='transaction_lines')
    op.drop_index(op.f('ix_transaction_lines_transaction_id'), table_name='transaction_lines')
    op.drop_table('transaction_lines')

    op.drop_index(op.f('ix_transactions_staff_id'), table_name='transactions')
    op.drop_index('ix_transactions_staff_created', table_name='transactions')
    op.drop_index('ix_transactions_created', table_name='transactions')
    op.drop_table('transactions')

    op.drop_index('ix_products_category', table_name='products')
    op.drop_table('products')

    op.drop_index('ix_staff_clocked_in', table_name='staff_members')
    op.drop_table('staff_members')
