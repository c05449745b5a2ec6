from __future__ import annotations

import os
from typing import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.pool import NullPool
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session

ROOT = Path(__file__).resolve().parents[1]

ENV_VAR = "POSTTAGS_DB_URL"
DEFAULT_DB_URL = "sqlite:///./data/post_tags.db"


def _normalize_sqlite_url(db_url: str) -> str:
    """Ensure sqlite file URLs are absolute and anchored at repo root when relative.

    This prevents mismatched files when different processes have different CWDs.
    """
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return db_url
    db_path = url.database or ""
    # skip in-memory URLs
    if db_path in ("", ":memory:"):
        return db_url
    p = Path(db_path)
    if p.is_absolute():
        return db_url
    return url.set(database=str((ROOT / p).resolve())).render_as_string(hide_password=False)


def _build_engine(db_url: str) -> Engine:
    # NullPool releases the connection as soon as the session closes
    eng = create_engine(db_url, future=True, poolclass=NullPool)
    if eng.dialect.name == "sqlite":
        # SQLite only enforces foreign keys (and their CASCADEs) when asked
        @event.listens_for(eng, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):  # type: ignore[override]
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    return eng


DB_URL = _normalize_sqlite_url(os.environ.get(ENV_VAR, DEFAULT_DB_URL))
engine = _build_engine(DB_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Yield a session bound to the configured database; always closed on exit.

    If POSTTAGS_DB_URL names a different database than the current engine,
    the engine is rebuilt first so `--db-url` flags set by scripts take effect.
    """
    env_url = os.environ.get(ENV_VAR)
    if env_url:
        target_url = _normalize_sqlite_url(env_url)
        if target_url != DB_URL:
            reconfigure(target_url)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def reconfigure(db_url: str) -> None:
    """Rebuild the SQLAlchemy engine/session for a new DB URL."""
    global DB_URL, engine, SessionLocal
    engine.dispose()
    DB_URL = _normalize_sqlite_url(db_url)
    engine = _build_engine(DB_URL)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)
