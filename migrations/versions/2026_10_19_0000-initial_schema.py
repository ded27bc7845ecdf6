"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - short_links table: short code mappings with expiry and click counter
    - visits table: append-only visit ledger
    """
    op.create_table(
        'short_links',
        sa.Column('code', sa.String(length=32), nullable=False),
        sa.Column('long_url', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expiry_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_accessed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('code')
    )
    op.create_index('ix_short_links_created_at', 'short_links', ['created_at'])

    # No foreign key to short_links: the ledger is independent history
    op.create_table(
        'visits',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('code', sa.String(length=32), nullable=False),
        sa.Column('visited_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ip', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.Column('referrer', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_visits_code', 'visits', ['code'])
    op.create_index('ix_visits_visited_at', 'visits', ['visited_at'])


def downgrade() -> None:
    """
    Drop all tables and indexes.
    """
    op.drop_index('ix_visits_visited_at', table_name='visits')
    op.drop_index('ix_visits_code', table_name='visits')
    op.drop_table('visits')
    op.drop_index('ix_short_links_created_at', table_name='short_links')
    op.drop_table('short_links')
