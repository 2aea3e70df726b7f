"""create wins, reflections and profiles collections

Revision ID: 5e1c0a7d2b91
Revises:
Create Date: 2025-12-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5e1c0a7d2b91'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'wins',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('situation', sa.String(), nullable=False),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('impact', sa.String(), nullable=False),
        sa.Column('impact_type', sa.String(length=32), nullable=False),
        sa.Column('evidence', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_wins_user_id', 'wins', ['user_id'])
    op.create_index('ix_wins_date', 'wins', ['date'])

    op.create_table(
        'reflections',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('week_start_date', sa.Date(), nullable=False),
        sa.Column('went_well', sa.String(), nullable=True),
        sa.Column('unblocked', sa.String(), nullable=True),
        sa.Column('proud_of', sa.String(), nullable=True),
        sa.Column('focused_on', sa.String(), nullable=True),
        sa.Column('contributed', sa.String(), nullable=True),
        sa.Column('impact', sa.String(), nullable=True),
        sa.Column('learned', sa.String(), nullable=True),
        sa.Column('carry_forward', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_reflections_user_id', 'reflections', ['user_id'])
    op.create_index('ix_reflections_week_start_date', 'reflections', ['week_start_date'])

    op.create_table(
        'profiles',
        sa.Column('user_id', sa.String(), primary_key=True),
        sa.Column('display_name', sa.String(), server_default='', nullable=False),
        sa.Column('email', sa.String(), server_default='', nullable=False),
        sa.Column('role', sa.String(), nullable=True),
        sa.Column('bio', sa.String(), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=True),
        sa.Column('photo_url', sa.String(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('profiles')
    op.drop_index('ix_reflections_week_start_date', table_name='reflections')
    op.drop_index('ix_reflections_user_id', table_name='reflections')
    op.drop_table('reflections')
    op.drop_index('ix_wins_date', table_name='wins')
    op.drop_index('ix_wins_user_id', table_name='wins')
    op.drop_table('wins')
