#!/usr/bin/env python3
"""Delete every post_tag_link row so a failed copy can be re-run.

Dry-run by default; use --apply to commit. Prefer passing --db-url over setting env vars.
Example:
    python scripts/clear_post_tags.py --db-url sqlite:///./data/post_tags.db --apply
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import delete, func, select

from db.models import PostTagLink
from db.session import ENV_VAR, get_session


def clear_links(session, apply: bool) -> int:
    count = session.scalar(select(func.count()).select_from(PostTagLink))
    if apply and count:
        session.execute(delete(PostTagLink))
        session.commit()
    return count


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Delete all post_tag_link rows (dry-run by default)")
    ap.add_argument("--db-url", dest="db_url", help=f"Database URL (overrides {ENV_VAR})")
    ap.add_argument("--apply", action="store_true", help="Commit deletion")
    args = ap.parse_args(argv)

    if args.db_url:
        os.environ[ENV_VAR] = args.db_url

    with get_session() as session:
        count = clear_links(session, apply=args.apply)
    print(json.dumps({"links": count, "deleted": count if args.apply else 0, "applied": args.apply}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
