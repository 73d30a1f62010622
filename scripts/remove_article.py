#!/usr/bin/env python3
"""
Delete an article from the JSON data file.

Usage:
  python scripts/remove_article.py <article-id> [--data-file ./data.json]
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
from sfhb.services.article_service import (  # noqa: E402
    ArticleNotFoundError,
    ArticleService,
    InvalidArticleIdError,
)


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Delete an article")
    ap.add_argument("article_id", help="ID of the article to delete")
    ap.add_argument("--data-file", default=settings.data_file, help="Path to the data file (default: DATA_FILE)")
    args = ap.parse_args()

    svc = ArticleService(args.data_file)
    try:
        article = svc.get_article(args.article_id)
        svc.delete_article(args.article_id)
    except InvalidArticleIdError:
        raise SystemExit(f"Invalid article id '{args.article_id}'")
    except ArticleNotFoundError:
        raise SystemExit(f"Article '{args.article_id}' not found in {svc.data_file}")
    print("OK: article deleted")
    print(f"  ID: {article.id}")
    print(f"  Title: {article.title}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
