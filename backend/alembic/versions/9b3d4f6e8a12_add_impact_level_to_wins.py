"""add impact_level to wins

Revision ID: 9b3d4f6e8a12
Revises: 5e1c0a7d2b91
Create Date: 2026-01-15 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9b3d4f6e8a12'
down_revision: Union[str, Sequence[str], None] = '5e1c0a7d2b91'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Nullable on purpose: existing rows read back as Medium
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    cols = {c['name'] for c in inspector.get_columns('wins')}
    if 'impact_level' not in cols:
        op.add_column('wins', sa.Column('impact_level', sa.String(length=10), nullable=True))


def downgrade() -> None:
    op.drop_column('wins', 'impact_level')
