"""Domain helpers for articles (record type, identifiers, timestamps)."""
from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

# RFC 3339 timestamps from the legacy service carry up to 9 fractional digits.
_FRACTION_RE = re.compile(r"\.(\d+)")


@dataclass(frozen=True)
class Article:
    """A single published record. Never mutated after creation."""

    id: uuid.UUID
    title: str
    type: str
    content: str
    created: datetime


def parse_article_id(value: str | uuid.UUID | None) -> uuid.UUID:
    """Parse an article identifier, raising ValueError when malformed."""
    if isinstance(value, uuid.UUID):
        return value
    if value is not None and not isinstance(value, str):
        raise ValueError(f"article id must be a string, got {type(value).__name__}")
    candidate = (value or "").strip()
    if not candidate:
        raise ValueError("empty article id")
    return uuid.UUID(candidate)


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime (naive -> UTC)."""
    text = (value or "").strip()
    if not text:
        raise ValueError("empty timestamp")
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    # datetime only keeps microseconds
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string")
    return value


def article_from_dict(data: Mapping[str, Any]) -> Article:
    """Build an Article from its JSON object form."""
    if not isinstance(data, Mapping):
        raise ValueError("article must be an object")
    raw_id = data.get("id")
    if not isinstance(raw_id, str):
        raise ValueError("article id must be a string")
    raw_created = data.get("created")
    if not isinstance(raw_created, str):
        raise ValueError("article created must be a string")
    return Article(
        id=parse_article_id(raw_id),
        title=_text(data, "title"),
        type=_text(data, "type"),
        content=_text(data, "content"),
        created=parse_timestamp(raw_created),
    )


def article_to_dict(article: Article) -> dict:
    return {
        "id": str(article.id),
        "title": article.title,
        "type": article.type,
        "content": article.content,
        "created": format_timestamp(article.created),
    }


def newest_first(articles: Iterable[Article]) -> list[Article]:
    """Sort by creation time, newest first. Ties keep their collection order."""
    return sorted(articles, key=lambda a: a.created, reverse=True)
