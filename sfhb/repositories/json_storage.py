"""
JSON file persistence for the article collection.

The whole collection is one JSON array of article objects. Reads decode the
full file; writes replace it in full through a temporary file and an atomic
rename, so a failed write never leaves a truncated data file behind.
"""

from __future__ import annotations

from pathlib import Path
import json
import os
import tempfile
from typing import Iterable

from sfhb.domain.articles import Article, article_from_dict, article_to_dict


class StorageError(Exception):
    """Base class for data file failures."""


class CorruptDataError(StorageError):
    """Raised when the data file exists but cannot be decoded."""


class StorageReadError(StorageError):
    """Raised when the data file cannot be read."""


class StorageWriteError(StorageError):
    """Raised when the data file cannot be written."""


def dumps(articles: Iterable[Article]) -> str:
    return json.dumps([article_to_dict(a) for a in articles], ensure_ascii=False, indent=2)


def loads(raw: str | bytes) -> list[Article]:
    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise CorruptDataError(f"invalid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise CorruptDataError("expected a JSON array of articles")
    articles = []
    for index, item in enumerate(payload):
        try:
            articles.append(article_from_dict(item))
        except ValueError as exc:
            raise CorruptDataError(f"invalid article at index {index}: {exc}") from exc
    return articles


def read_articles(path: str | Path) -> list[Article]:
    """Decode the data file. FileNotFoundError propagates when it is missing."""
    data_file = Path(path)
    try:
        raw = data_file.read_bytes()
    except FileNotFoundError:
        raise
    except OSError as exc:
        raise StorageReadError(f"cannot read {data_file}: {exc}") from exc
    return loads(raw)


def load(path: str | Path) -> list[Article]:
    """Decode the data file; a missing file is an empty collection."""
    try:
        return read_articles(path)
    except FileNotFoundError:
        return []


def _target_mode(data_file: Path) -> int:
    """Permission bits for the rewritten file: keep the current ones, else honor the umask."""
    try:
        return data_file.stat().st_mode & 0o777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save(path: str | Path, articles: Iterable[Article]) -> None:
    """Replace the data file with the given collection."""
    data_file = Path(path)
    payload = dumps(articles).encode("utf-8")
    tmp_name = None
    try:
        data_file.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{data_file.name}.", suffix=".tmp", dir=data_file.parent)
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0600 files
        os.chmod(tmp_name, _target_mode(data_file))
        os.replace(tmp_name, data_file)
        tmp_name = None
    except OSError as exc:
        raise StorageWriteError(f"cannot write {data_file}: {exc}") from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
