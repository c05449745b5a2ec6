#!/usr/bin/env python3
"""Project database bootstrapper

Creates or upgrades the database schema to an Alembic revision (default: head).

The post_tags -> post_tag_link move is staged across revisions:
  0001_initial             post, tag and the implicit post_tags table
  0002_add_post_tag_link   adds the explicit post_tag_link table
  0003_drop_post_tags      drops post_tags (run only after copying, see migrate_post_tags.py)

Examples:
  python scripts/bootstrap_db.py --db-url sqlite:///./data/post_tags.db --revision 0002_add_post_tag_link
  python scripts/bootstrap_db.py --db-url sqlite:///./data/post_tags.db
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.util import CommandError
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from db.session import DEFAULT_DB_URL, ENV_VAR, _normalize_sqlite_url


def _ensure_sqlite_dir(db_url: str) -> None:
    # Create parent directory for SQLite files if needed
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def _run_alembic_upgrade(db_url: str, revision: str) -> int:
    ini_path = PROJECT_ROOT / "alembic.ini"
    if not ini_path.is_file():
        print(f"[error] alembic.ini not found at {ini_path}")
        return 2

    cfg = Config(str(ini_path))
    # Ensure script location and URL are set correctly
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", db_url)
    print(f"Running Alembic upgrade to {revision}...")
    try:
        command.upgrade(cfg, revision)
    except (CommandError, SQLAlchemyError) as e:
        print(f"[error] Alembic upgrade failed: {e}")
        return 2
    print("Alembic upgrade complete.")
    return 0


def parse_args(argv: list[str]) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Bootstrap/upgrade the project database schema")
    ap.add_argument("--db-url", dest="db_url", default=os.environ.get(ENV_VAR, DEFAULT_DB_URL),
                    help=f"Target database URL (overrides env var {ENV_VAR})")
    ap.add_argument("--revision", default="head", help="Alembic revision to upgrade to (default: head)")
    return ap.parse_args(argv)


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    db_url = _normalize_sqlite_url(args.db_url)
    print(f"Target DB URL: {db_url}")
    _ensure_sqlite_dir(db_url)
    return _run_alembic_upgrade(db_url, args.revision)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
