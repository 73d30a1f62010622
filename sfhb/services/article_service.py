"""
Article use cases: list, lookup, publish and delete.

ArticleService owns the in-memory collection. Every operation runs as one
critical section under a single lock: refresh from disk when needed, read or
mutate, persist. A failed persist rolls the in-memory collection back so
memory and disk stay in agreement.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from sfhb.core.security import token_matches
from sfhb.domain.articles import Article, newest_first, parse_article_id
from sfhb.repositories import json_storage

logger = logging.getLogger(__name__)


class ArticleError(Exception):
    """Base exception for article workflow."""


class ArticleNotFoundError(ArticleError):
    """Raised when no article matches the given id."""


class InvalidArticleIdError(ArticleError):
    """Raised when the id is not a valid identifier."""


class ForbiddenError(ArticleError):
    """Raised when the writer token does not match the configured secret."""


class StorageUnavailableError(ArticleError):
    """Raised when the data file cannot be read, decoded or written."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArticleService:
    """Concurrency-safe access to the article collection backed by a JSON file."""

    def __init__(
        self,
        data_file: str | Path,
        *,
        token_secret: str = "",
        refresh_on_read: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], uuid.UUID]] = None,
    ) -> None:
        self.data_file = Path(data_file)
        self.refresh_on_read = refresh_on_read
        self._token_secret = token_secret or ""
        self._clock = clock or _utcnow
        self._id_factory = id_factory or uuid.uuid4
        self._lock = threading.Lock()
        self._articles: list[Article] = []
        self._loaded = False

    @property
    def auth_enabled(self) -> bool:
        return bool(self._token_secret)

    # -------------------------------------- helpers --------------------------------------
    def _refresh(self, *, force: bool = False) -> None:
        """Load the collection from disk. Caller must hold the lock."""
        if self._loaded and not (force or self.refresh_on_read):
            return
        try:
            articles = json_storage.load(self.data_file)
        except json_storage.StorageError as exc:
            logger.error("Failed to load articles from %s: %s", self.data_file, exc, exc_info=exc)
            raise StorageUnavailableError("article storage unavailable") from exc
        self._articles = articles
        self._loaded = True

    def _persist(self, previous: list[Article]) -> None:
        """Save the collection, restoring ``previous`` on failure. Caller must hold the lock."""
        try:
            json_storage.save(self.data_file, self._articles)
        except json_storage.StorageError as exc:
            self._articles = previous
            logger.error("Failed to save articles to %s: %s", self.data_file, exc, exc_info=exc)
            raise StorageUnavailableError("article storage unavailable") from exc

    def _parse_id(self, article_id: str) -> uuid.UUID:
        try:
            return parse_article_id(article_id)
        except (TypeError, ValueError) as exc:
            raise InvalidArticleIdError(f"invalid article id: {article_id!r}") from exc

    def authorize(self, token: str | None) -> None:
        if not token_matches(token, self._token_secret):
            raise ForbiddenError("invalid token")

    # -------------------------------------- use cases --------------------------------------
    def reload(self) -> int:
        """Re-read the data file; returns the number of articles loaded."""
        with self._lock:
            self._refresh(force=True)
            return len(self._articles)

    def list_articles(self) -> list[Article]:
        with self._lock:
            self._refresh()
            return newest_first(self._articles)

    def get_article(self, article_id: str) -> Article:
        wanted = self._parse_id(article_id)
        with self._lock:
            self._refresh()
            for article in self._articles:
                if article.id == wanted:
                    return article
        raise ArticleNotFoundError(f"article {wanted} not found")

    def create_article(
        self,
        title: str | None = "",
        type: str | None = "",
        content: str | None = "",
        token: str | None = None,
    ) -> Article:
        self.authorize(token)
        with self._lock:
            self._refresh()
            existing = {a.id for a in self._articles}
            new_id = self._id_factory()
            while new_id in existing:
                new_id = self._id_factory()
            article = Article(
                id=new_id,
                title=title or "",
                type=type or "",
                content=content or "",
                created=self._clock(),
            )
            previous = self._articles
            self._articles = previous + [article]
            self._persist(previous)
        logger.info("Created article %s", article.id)
        return article

    def delete_article(self, article_id: str, token: str | None = None) -> None:
        self.authorize(token)
        wanted = self._parse_id(article_id)
        with self._lock:
            self._refresh()
            previous = self._articles
            remaining = [a for a in previous if a.id != wanted]
            if len(remaining) == len(previous):
                raise ArticleNotFoundError(f"article {wanted} not found")
            self._articles = remaining
            self._persist(previous)
        logger.info("Deleted article %s", wanted)
