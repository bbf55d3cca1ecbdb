"""create users, transactions, monthly_sales and business_metrics tables

Revision ID: 3f1c9a7d2b4e
Revises: 
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b4e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('user_id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True, server_default=sa.func.now()),
        sa.UniqueConstraint('email', name='uq_user_email'),
    )
    op.create_table(
        'transactions',
        sa.Column('transaction_id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.user_id'), nullable=False),
        sa.Column('transaction_date', sa.Date, nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('amount', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('transaction_type', sa.Enum('Income', 'Expense', name='transaction_type'), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True, server_default=sa.func.now()),
    )
    op.create_index('idx_transactions_user_date', 'transactions', ['user_id', 'transaction_date'])
    op.create_table(
        'monthly_sales',
        sa.Column('sales_id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.user_id'), nullable=False),
        sa.Column('year', sa.Integer, nullable=False),
        sa.Column('month', sa.SmallInteger, nullable=False),  # 1-12
        sa.Column('month_name', sa.String(20), nullable=False),
        sa.Column('sales_amount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.UniqueConstraint('user_id', 'year', 'month', name='uq_monthly_sales_user_period'),
    )
    op.create_table(
        'business_metrics',
        sa.Column('metric_id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.user_id'), nullable=False),
        sa.Column('metric_date', sa.Date, nullable=False),
        sa.Column('total_sales', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('total_expenses', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('net_profit', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.UniqueConstraint('user_id', 'metric_date', name='uq_business_metrics_user_date'),
    )


def downgrade() -> None:
    op.drop_table('business_metrics')
    op.drop_table('monthly_sales')
    op.drop_index('idx_transactions_user_date', table_name='transactions')
    op.drop_table('transactions')
    op.drop_table('users')
