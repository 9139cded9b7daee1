"""initial create registrations

Revision ID: 001
Revises:
Create Date: 2025-02-03 10:15:00.000000

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
    # Criar tabela registrations
    op.create_table(
        'registrations',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=200), nullable=False),
        sa.Column('plan_id', sa.String(length=100), nullable=False),
        sa.Column('plan_title', sa.String(length=200), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('monthly_payment', sa.Float(), nullable=False),
        sa.Column('amortization_months', sa.Integer(), nullable=False),
        sa.Column('payment_method', sa.String(length=100), nullable=True),
        sa.Column('number_of_installments', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Listagem do painel é sempre ordenada por data de criação
    op.create_index('ix_registrations_created_at', 'registrations', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_registrations_created_at', table_name='registrations')
    op.drop_table('registrations')
