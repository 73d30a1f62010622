#!/usr/bin/env python3
"""
Publish an article straight into the JSON data file.

Usage:
  python scripts/add_article.py --title "Hello" [--type news] (--content "..." | --content-file post.md) [--data-file ./data.json]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the sfhb package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sfhb.core.config import get_settings  # noqa: E402
from sfhb.services.article_service import ArticleService  # noqa: E402


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Publish an article")
    ap.add_argument("--title", required=True, help="Article title")
    ap.add_argument("--type", default="", help="Article type (free text)")
    group = ap.add_mutually_exclusive_group(required=True)
    group.add_argument("--content", help="Article body")
    group.add_argument("--content-file", help="Read the article body from this file")
    ap.add_argument("--data-file", default=settings.data_file, help="Path to the data file (default: DATA_FILE)")
    args = ap.parse_args()

    title = (args.title or "").strip()
    if not title:
        raise SystemExit("Title must not be empty")
    if args.content_file:
        content = Path(args.content_file).read_text(encoding="utf-8")
    else:
        content = args.content or ""

    # Local access: the writer token is not checked.
    svc = ArticleService(args.data_file)
    article = svc.create_article(title, args.type, content)
    print("OK: article published")
    print(f"  ID: {article.id}")
    print(f"  Created: {article.created.isoformat()}")
    print(f"  File: {svc.data_file}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
