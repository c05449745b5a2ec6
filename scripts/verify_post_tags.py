#!/usr/bin/env python3
"""Compare implicit post_tags pairs with explicit post_tag_link pairs.

Prints a JSON report; exits 0 when both sides hold exactly the same pairs,
1 otherwise. Run after scripts/migrate_post_tags.py and before dropping
post_tags.
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

from sqlalchemy import select

from db.models import PostTagLink, post_tags
from db.session import ENV_VAR, get_session


def compare_pairs(session) -> dict:
    implicit = {tuple(r) for r in session.execute(select(post_tags.c.post_id, post_tags.c.tag_id))}
    explicit_rows = [tuple(r) for r in session.execute(select(PostTagLink.post_id, PostTagLink.tag_id))]
    explicit = set(explicit_rows)
    missing = sorted(implicit - explicit)
    unexpected = sorted(explicit - implicit)
    return {
        "implicit": len(implicit),
        "explicit": len(explicit_rows),
        "missing": [list(p) for p in missing],
        "unexpected": [list(p) for p in unexpected],
        "ok": not missing and not unexpected,
    }


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Verify post_tag_link mirrors post_tags")
    ap.add_argument("--db-url", dest="db_url", help=f"Database URL (overrides {ENV_VAR})")
    args = ap.parse_args(argv)

    if args.db_url:
        os.environ[ENV_VAR] = args.db_url

    with get_session() as session:
        report = compare_pairs(session)
    print(json.dumps(report, indent=2))
    return 0 if report["ok"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
