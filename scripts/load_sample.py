#!/usr/bin/env python3
"""Load sample posts and tags (with their implicit post_tags associations) from JSON.

Fixture format: a list of {"title": str, "tags": [str, ...]}. Tags are created
once by name and shared across posts.

  python scripts/load_sample.py --db-url sqlite:///./data/post_tags.db --file tests/fixtures/sample_posts.json
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

from db.models import Post, Tag
from db.session import ENV_VAR, get_session


def load_sample(fixture_path: Path) -> dict:
    with fixture_path.open("r", encoding="utf-8") as fh:
        items = json.load(fh)

    inserted_posts = 0
    inserted_tags = 0
    with get_session() as session:
        tags_by_name = {t.name: t for t in session.query(Tag).all()}
        for it in items:
            post = Post(title=it["title"])
            for name in it.get("tags") or []:
                tag = tags_by_name.get(name)
                if tag is None:
                    tag = Tag(name=name)
                    tags_by_name[name] = tag
                    inserted_tags += 1
                if tag not in post.tags:
                    post.tags.append(tag)
            session.add(post)
            inserted_posts += 1
        session.commit()
    return {"posts": inserted_posts, "tags": inserted_tags}


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Load sample posts/tags into the database")
    ap.add_argument("--db-url", dest="db_url", help=f"Database URL (overrides {ENV_VAR})")
    ap.add_argument("--file", required=True, help="Path to the JSON fixture")
    args = ap.parse_args(argv)

    if args.db_url:
        os.environ[ENV_VAR] = args.db_url

    path = Path(args.file)
    if not path.is_file():
        print(f"[error] fixture not found: {path}")
        return 2
    print(json.dumps(load_sample(path)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
