from __future__ import annotations

import sys
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from db import session as session_mod
from db.models import Base, Post, Tag
from db.session import ENV_VAR, get_session


def _point_at(url: str, monkeypatch) -> None:
    monkeypatch.setenv(ENV_VAR, url)
    session_mod.reconfigure(url)


@pytest.fixture
def db_url(tmp_path: Path, monkeypatch) -> str:
    """Fresh SQLite file with the full ORM schema (post_tags and post_tag_link both present)."""
    url = f"sqlite:///{(tmp_path / 'post_tags.db').as_posix()}"
    _point_at(url, monkeypatch)
    Base.metadata.create_all(bind=session_mod.engine)
    yield url
    session_mod.engine.dispose()


@pytest.fixture
def unreachable_db_url(tmp_path: Path, monkeypatch) -> str:
    # SQLite will not create the missing parent directory, so connecting fails
    url = f"sqlite:///{(tmp_path / 'missing' / 'post_tags.db').as_posix()}"
    _point_at(url, monkeypatch)
    return url


@pytest.fixture
def session_closes(monkeypatch) -> list:
    """Record every session closed through get_session (bound to whatever engine is current)."""
    closed: list = []

    class _TrackingSession(Session):
        def close(self) -> None:
            closed.append(self)
            super().close()

    # Bind at call time so the fixture works whichever database fixture ran first
    monkeypatch.setattr(
        session_mod,
        "SessionLocal",
        lambda: _TrackingSession(bind=session_mod.engine, autoflush=False),
    )
    return closed


@pytest.fixture
def seed(db_url):
    """Insert posts and tags with explicit ids, plus their implicit associations.

    `associations` maps post id -> tag ids in the order they are appended.
    """
    def _seed(associations: dict[int, list[int]], extra_tags: list[int] | None = None) -> None:
        tag_ids = {tid for tids in associations.values() for tid in tids} | set(extra_tags or [])
        with get_session() as session:
            tags = {tid: Tag(id=tid, name=f"tag-{tid}") for tid in sorted(tag_ids)}
            session.add_all(tags.values())
            for pid, tids in associations.items():
                post = Post(id=pid, title=f"post-{pid}")
                post.tags.extend(tags[tid] for tid in tids)
                session.add(post)
            session.commit()
    return _seed
