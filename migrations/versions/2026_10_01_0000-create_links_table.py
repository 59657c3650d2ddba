"""Create links table

Revision ID: 001_links
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_links'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the links table.

    The unique index on short_code is what keeps codes unique when several
    requests insert the same code at once.
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    if 'links' in existing_tables:
        return

    op.create_table(
        'links',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('original_url', sa.Text(), nullable=False),
        sa.Column('short_code', sa.String(length=8), nullable=False),
        sa.Column('click_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_clicked_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('click_count >= 0', name='ck_links_click_count_non_negative'),
    )

    op.create_index(
        'ix_links_short_code',
        'links',
        ['short_code'],
        unique=True
    )

    op.create_index(
        'ix_links_created_at',
        'links',
        ['created_at']
    )


def downgrade() -> None:
    """Drop the links table and its indexes."""
    op.drop_index('ix_links_created_at', table_name='links')
    op.drop_index('ix_links_short_code', table_name='links')
    op.drop_table('links')
