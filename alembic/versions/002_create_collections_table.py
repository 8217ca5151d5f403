"""Create collections table.

Revision ID: 002
Revises: 001
Create Date: 2026-10-05

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create collections table."""
    op.create_table(
        'collections',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('owner_id', sa.String(100), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=True, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(1000), nullable=True),
        sa.Column('cover_image_url', sa.String(1000), nullable=True),
        sa.Column('type', sa.String(10), nullable=False, server_default='manual'),
        sa.Column('sort_order', sa.String(20), nullable=False, server_default='manual'),
        # Membership: at most one of these is non-empty
        sa.Column('manual_members', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('rules', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('visibility', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true', index=True),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_draft', sa.Boolean(), nullable=False, server_default='true', index=True),
        sa.Column('is_trending', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_seasonal', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_sale', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('seo_title', sa.String(255), nullable=True),
        sa.Column('seo_description', sa.Text(), nullable=True),
        sa.Column('placement', postgresql.JSONB(), nullable=True),
        sa.Column('placement_priority', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('scheduled_publish_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Seller listing, most recently updated first
    op.create_index(
        'ix_collections_owner_updated',
        'collections',
        ['owner_id', 'updated_at'],
    )


def downgrade() -> None:
    """Drop collections table."""
    op.drop_index('ix_collections_owner_updated', table_name='collections')
    op.drop_table('collections')
