"""create boutique tables

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-19 10:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


product_category = sa.Enum('Bags', 'Shoes', 'Accessories', name='productcategory')
order_status = sa.Enum('Paid', 'Unpaid', name='orderstatus')
expense_category = sa.Enum('Rent', 'Utilities', 'Marketing', 'Staff', 'Other', name='expensecategory')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'products',
        sa.Column('id', sa.String(length=40), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('category', product_category, nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('cost_price', sa.Numeric(15, 2), nullable=False),
        sa.Column('sell_price', sa.Numeric(15, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('quantity >= 0', name='ck_products_quantity_non_negative'),
    )
    op.create_index('ix_products_name', 'products', ['name'])

    op.create_table(
        'orders',
        sa.Column('id', sa.String(length=40), primary_key=True),
        sa.Column('product_name', sa.String(length=100), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', order_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('quantity > 0', name='ck_orders_quantity_positive'),
    )

    op.create_table(
        'expenses',
        sa.Column('id', sa.String(length=40), primary_key=True),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('category', expense_category, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'stock_purchases',
        sa.Column('id', sa.String(length=40), primary_key=True),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'withdrawals',
        sa.Column('id', sa.String(length=40), primary_key=True),
        sa.Column('amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('note', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'capital_injections',
        sa.Column('id', sa.String(length=40), primary_key=True),
        sa.Column('amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('source', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('capital_injections')
    op.drop_table('withdrawals')
    op.drop_table('stock_purchases')
    op.drop_table('expenses')
    op.drop_table('orders')
    op.drop_index('ix_products_name', table_name='products')
    op.drop_table('products')

    bind = op.get_bind()
    expense_category.drop(bind, checkfirst=True)
    order_status.drop(bind, checkfirst=True)
    product_category.drop(bind, checkfirst=True)
