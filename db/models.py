from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


# Legacy implicit association. No fields of its own; the ORM manages rows
# through Post.tags / Tag.posts. Dropped by revision 0003 once the rows have
# been copied into post_tag_link.
post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("post.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
)


class Post(Base):
    __tablename__ = "post"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(256), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    tags = relationship("Tag", secondary=post_tags, back_populates="posts", order_by="Tag.id")
    tag_links = relationship("PostTagLink", back_populates="post", cascade="all, delete-orphan")
    # Convenience read-only relationship listing tags linked through post_tag_link
    linked_tags = relationship("Tag", secondary="post_tag_link", viewonly=True, order_by="Tag.id")

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<Post {self.id} {self.title!r}>"


class Tag(Base):
    __tablename__ = "tag"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False, unique=True, index=True)

    posts = relationship("Post", secondary=post_tags, back_populates="tags")
    post_links = relationship("PostTagLink", back_populates="tag", cascade="all, delete-orphan")
    linked_posts = relationship("Post", secondary="post_tag_link", viewonly=True)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<Tag {self.id} {self.name!r}>"


class PostTagLink(Base):
    """Explicit association between a Post and a Tag.

    Replaces the implicit post_tags table. The (post_id, tag_id) pair is
    unique; that constraint is the only guard against duplicate links.
    """

    __tablename__ = "post_tag_link"
    __table_args__ = (UniqueConstraint("post_id", "tag_id", name="uq_post_tag_link_pair"),)

    id = Column(Integer, primary_key=True)
    post_id = Column(Integer, ForeignKey("post.id", ondelete="CASCADE"), nullable=False, index=True)
    tag_id = Column(Integer, ForeignKey("tag.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    post = relationship("Post", back_populates="tag_links")
    tag = relationship("Tag", back_populates="post_links")

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<PostTagLink p={self.post_id} t={self.tag_id}>"
