"""Add explicit post_tag_link table

Revision ID: 0002_add_post_tag_link
Revises: 0001_initial
Create Date: 2026-10-12

Leaves post_tags in place; scripts/migrate_post_tags.py copies its rows here.
"""
from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = '0002_add_post_tag_link'
down_revision = '0001_initial'
branch_labels = None
depends_on = None


def _has_table(name: str) -> bool:
    return name in sa.inspect(op.get_bind()).get_table_names()


def upgrade() -> None:
    if _has_table('post_tag_link'):
        return
    op.create_table(
        'post_tag_link',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('post_id', sa.Integer(), sa.ForeignKey('post.id', ondelete='CASCADE'), nullable=False),
        sa.Column('tag_id', sa.Integer(), sa.ForeignKey('tag.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('post_id', 'tag_id', name='uq_post_tag_link_pair'),
    )
    op.create_index('ix_post_tag_link_post_id', 'post_tag_link', ['post_id'])
    op.create_index('ix_post_tag_link_tag_id', 'post_tag_link', ['tag_id'])


def downgrade() -> None:
    op.drop_index('ix_post_tag_link_tag_id', table_name='post_tag_link')
    op.drop_index('ix_post_tag_link_post_id', table_name='post_tag_link')
    op.drop_table('post_tag_link')
