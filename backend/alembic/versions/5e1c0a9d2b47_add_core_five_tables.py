"""add core_five_logs and milestones_seen tables

Revision ID: 5e1c0a9d2b47
Revises:
Create Date: 2026-02-09 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5e1c0a9d2b47'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()
    if 'core_five_logs' not in tables:
        op.create_table(
            'core_five_logs',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.String(), nullable=False),
            sa.Column('pillar', sa.String(length=20), nullable=False),
            sa.Column('value', sa.Float(), nullable=False),
            sa.Column('details', sa.JSON(), nullable=True),
            sa.Column('logged_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column('week_start', sa.Date(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )
        op.create_index('ix_core_five_logs_id', 'core_five_logs', ['id'])
        op.create_index('ix_core_five_logs_user_id', 'core_five_logs', ['user_id'])
        op.create_index('ix_core_five_logs_week_start', 'core_five_logs', ['week_start'])
    if 'milestones_seen' not in tables:
        op.create_table(
            'milestones_seen',
            sa.Column('user_id', sa.String(), primary_key=True),
            sa.Column('milestone_id', sa.String(length=40), primary_key=True),
            sa.Column('seen_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )


def downgrade() -> None:
    # Safe drop if exists
    op.execute('DROP TABLE IF EXISTS milestones_seen')
    op.execute('DROP TABLE IF EXISTS core_five_logs')
