"""create kv_store table holding room, player and answer records

Revision ID: 4c2a9e1d7b30
Revises:
Create Date: 2026-10-17 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2a9e1d7b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'kv_store' in insp.get_table_names():
        return
    op.create_table(
        'kv_store',
        sa.Column('key', sa.String(length=255), primary_key=True),
        sa.Column('value', sa.JSON(), nullable=False),
    )


def downgrade():
    op.drop_table('kv_store')
