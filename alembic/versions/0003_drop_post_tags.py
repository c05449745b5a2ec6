"""Drop the implicit post_tags association

Revision ID: 0003_drop_post_tags
Revises: 0002_add_post_tag_link
Create Date: 2026-10-12

Run only after scripts/migrate_post_tags.py has copied every pair into
post_tag_link. Downgrade recreates post_tags and fills it back from
post_tag_link.
"""
from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = '0003_drop_post_tags'
down_revision = '0002_add_post_tag_link'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.drop_table('post_tags')


def downgrade() -> None:
    op.create_table(
        'post_tags',
        sa.Column('post_id', sa.Integer(), sa.ForeignKey('post.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Integer(), sa.ForeignKey('tag.id', ondelete='CASCADE'), primary_key=True),
    )
    op.execute(
        "INSERT INTO post_tags (post_id, tag_id) "
        "SELECT post_id, tag_id FROM post_tag_link"
    )
