"""create countdown table

Revision ID: 4c1d9e2a7b30
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c1d9e2a7b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Databases bootstrapped with `flask db-reset` already have the table
    if 'countdown' in set(insp.get_table_names()):
        return

    op.create_table(
        'countdown',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('target_value', sa.Integer(), nullable=False),
        sa.Column('current_value', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('target_value >= 1', name='ck_countdown_target_positive'),
        sa.CheckConstraint(
            'current_value >= 0 AND current_value <= target_value',
            name='ck_countdown_current_in_range',
        ),
    )


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'countdown' in set(insp.get_table_names()):
        op.drop_table('countdown')
