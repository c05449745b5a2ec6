"""Run the Alembic revisions in-process against a temporary SQLite file."""
from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config

from db import session as session_mod
from db.session import ENV_VAR
from scripts.migrate_post_tags import copy_associations

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def alembic_db(tmp_path: Path, monkeypatch):
    url = f"sqlite:///{(tmp_path / 'alembic.db').as_posix()}"
    monkeypatch.setenv(ENV_VAR, url)
    session_mod.reconfigure(url)
    cfg = Config(str(REPO_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(REPO_ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    yield cfg, url
    session_mod.engine.dispose()


def _tables(url: str) -> set[str]:
    eng = sa.create_engine(url)
    try:
        return set(sa.inspect(eng).get_table_names())
    finally:
        eng.dispose()


def _exec(url: str, *statements: str) -> None:
    eng = sa.create_engine(url)
    try:
        with eng.begin() as conn:
            for stmt in statements:
                conn.execute(sa.text(stmt))
    finally:
        eng.dispose()


def _rows(url: str, sql: str) -> list[tuple]:
    eng = sa.create_engine(url)
    try:
        with eng.connect() as conn:
            return [tuple(r) for r in conn.execute(sa.text(sql))]
    finally:
        eng.dispose()


def test_staged_upgrade_copy_and_drop(alembic_db):
    cfg, url = alembic_db
    command.upgrade(cfg, "0001_initial")
    assert {"post", "tag", "post_tags"} <= _tables(url)
    assert "post_tag_link" not in _tables(url)

    _exec(
        url,
        "INSERT INTO post (id, title) VALUES (1, 'a'), (2, 'b')",
        "INSERT INTO tag (id, name) VALUES (10, 'x'), (11, 'y')",
        "INSERT INTO post_tags (post_id, tag_id) VALUES (1, 10), (1, 11), (2, 10)",
    )

    command.upgrade(cfg, "0002_add_post_tag_link")
    assert "post_tag_link" in _tables(url)

    assert copy_associations() == 3

    command.upgrade(cfg, "head")
    tables = _tables(url)
    assert "post_tags" not in tables
    assert _rows(url, "SELECT post_id, tag_id FROM post_tag_link ORDER BY id") == [(1, 10), (1, 11), (2, 10)]


def test_downgrade_restores_implicit_rows(alembic_db):
    cfg, url = alembic_db
    command.upgrade(cfg, "head")
    _exec(
        url,
        "INSERT INTO post (id, title) VALUES (1, 'a')",
        "INSERT INTO tag (id, name) VALUES (10, 'x')",
        "INSERT INTO post_tag_link (post_id, tag_id) VALUES (1, 10)",
    )

    command.downgrade(cfg, "0002_add_post_tag_link")

    assert _rows(url, "SELECT post_id, tag_id FROM post_tags") == [(1, 10)]


def test_unique_pair_constraint_from_migration(alembic_db):
    cfg, url = alembic_db
    command.upgrade(cfg, "0002_add_post_tag_link")
    _exec(
        url,
        "INSERT INTO post (id, title) VALUES (1, 'a')",
        "INSERT INTO tag (id, name) VALUES (10, 'x')",
        "INSERT INTO post_tag_link (post_id, tag_id) VALUES (1, 10)",
    )
    with pytest.raises(sa.exc.IntegrityError):
        _exec(url, "INSERT INTO post_tag_link (post_id, tag_id) VALUES (1, 10)")
