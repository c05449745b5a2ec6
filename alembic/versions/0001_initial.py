"""Initial schema: post, tag and the implicit post_tags association

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-12
"""
from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'post',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=256), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_post_id', 'post', ['id'])

    op.create_table(
        'tag',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
    )
    op.create_index('ix_tag_id', 'tag', ['id'])
    op.create_index('ix_tag_name', 'tag', ['name'], unique=True)

    op.create_table(
        'post_tags',
        sa.Column('post_id', sa.Integer(), sa.ForeignKey('post.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Integer(), sa.ForeignKey('tag.id', ondelete='CASCADE'), primary_key=True),
    )


def downgrade() -> None:
    op.drop_table('post_tags')
    op.drop_index('ix_tag_name', table_name='tag')
    op.drop_index('ix_tag_id', table_name='tag')
    op.drop_table('tag')
    op.drop_index('ix_post_id', table_name='post')
    op.drop_table('post')
