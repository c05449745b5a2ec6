"""db package exports for the project's database layer.

Re-exports commonly used symbols to simplify imports in scripts
(e.g. `from db import Base, get_session`).
"""
from .models import Base, Post, PostTagLink, Tag, post_tags  # noqa: F401
from .session import get_session, reconfigure  # noqa: F401

__all__ = ["Base", "Post", "PostTagLink", "Tag", "post_tags", "get_session", "reconfigure"]
