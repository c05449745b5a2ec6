#!/usr/bin/env python3
"""Copy Post <-> Tag associations from the implicit post_tags table into post_tag_link.

Run once, after upgrading to revision 0002_add_post_tag_link and before
upgrading to head (which drops post_tags):

  python scripts/bootstrap_db.py --db-url sqlite:///./data/post_tags.db --revision 0002_add_post_tag_link
  python scripts/migrate_post_tags.py --db-url sqlite:///./data/post_tags.db
  python scripts/verify_post_tags.py --db-url sqlite:///./data/post_tags.db
  python scripts/bootstrap_db.py --db-url sqlite:///./data/post_tags.db

Each link is committed on its own. A failure partway leaves the links written
so far in place; clear them (scripts/clear_post_tags.py --apply) before
re-running, otherwise the unique (post_id, tag_id) constraint rejects the
first pair that already exists.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Tuple

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import joinedload

from db.models import Post, PostTagLink, post_tags
from db.session import ENV_VAR, get_session

_log = logging.getLogger(__name__)


class LegacyRelationMissing(RuntimeError):
    """The implicit post_tags table is gone; there is nothing left to copy from."""


def collect_pairs(session) -> List[Tuple[int, int]]:
    """Return (post_id, tag_id) for every implicit association, posts then tags in id order.

    Posts and their tags come back from one joined query.
    """
    posts = session.query(Post).options(joinedload(Post.tags)).order_by(Post.id).all()
    return [(post.id, tag.id) for post in posts for tag in post.tags]


def copy_associations(dry_run: bool = False) -> int:
    with get_session() as session:
        if not sa_inspect(session.bind).has_table(post_tags.name):
            raise LegacyRelationMissing(
                f"table {post_tags.name!r} not found; was the database already upgraded to head?"
            )
        pairs = collect_pairs(session)
        _log.debug("Fetched %d post/tag pairs", len(pairs))
        if dry_run:
            for post_id, tag_id in pairs:
                _log.info("[dry-run] would link post=%s tag=%s", post_id, tag_id)
            return len(pairs)

        for post_id, tag_id in pairs:
            session.add(PostTagLink(post_id=post_id, tag_id=tag_id))
            session.commit()
        _log.info("Copied %d post/tag associations into %s", len(pairs), PostTagLink.__tablename__)
        return len(pairs)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Copy implicit post_tags rows into post_tag_link")
    ap.add_argument("--db-url", dest="db_url", help=f"Database URL (overrides {ENV_VAR})")
    ap.add_argument("--dry-run", action="store_true", help="List the pairs without writing")
    ap.add_argument("--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.db_url:
        os.environ[ENV_VAR] = args.db_url

    try:
        written = copy_associations(dry_run=args.dry_run)
    except IntegrityError as e:
        _log.error("Constraint violation, copy aborted (clear post_tag_link before re-running): %s", e.orig)
        return 3
    except OperationalError as e:
        _log.error("Database error, copy aborted: %s", e.orig)
        return 2
    except LegacyRelationMissing as e:
        _log.error("%s", e)
        return 4
    except Exception:
        _log.exception("Copy aborted by unexpected error")
        raise

    print(json.dumps({"written": 0 if args.dry_run else written, "pairs": written, "dry_run": args.dry_run}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
