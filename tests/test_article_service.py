from __future__ import annotations

import json
import sys
import threading
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Make the sfhb package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sfhb.repositories import json_storage  # noqa: E402
import sfhb.services.article_service as article_service  # noqa: E402
from sfhb.services.article_service import (  # noqa: E402
    ArticleNotFoundError,
    ArticleService,
    ForbiddenError,
    InvalidArticleIdError,
    StorageUnavailableError,
)

SECRET = "s3cret"
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self) -> None:
        self.now = BASE_TIME

    def set(self, seconds: int) -> None:
        self.now = BASE_TIME + timedelta(seconds=seconds)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def data_file(tmp_path):
    return tmp_path / "data.json"


@pytest.fixture()
def svc(data_file):
    return ArticleService(data_file, token_secret=SECRET)


def test_empty_store_lists_nothing(svc, data_file):
    assert svc.list_articles() == []
    assert not data_file.exists()


def test_create_assigns_id_and_timestamp_and_persists(svc, data_file):
    before = datetime.now(timezone.utc)
    article = svc.create_article("Hello", "news", "Body", token=SECRET)
    after = datetime.now(timezone.utc)

    assert isinstance(article.id, uuid.UUID)
    assert before <= article.created <= after
    assert (article.title, article.type, article.content) == ("Hello", "news", "Body")
    assert json_storage.load(data_file) == [article]


def test_create_ignores_caller_supplied_id_and_created(svc):
    caller_id = uuid.uuid4()
    payload = {
        "id": str(caller_id),
        "created": "1999-01-01T00:00:00Z",
        "title": "t",
        "type": "x",
        "content": "c",
    }
    article = svc.create_article(payload["title"], payload["type"], payload["content"], token=SECRET)

    assert article.id != caller_id
    assert article.created.year != 1999
    assert abs(datetime.now(timezone.utc) - article.created) < timedelta(minutes=1)


def test_ids_are_unique(svc):
    ids = {svc.create_article(f"a{i}", "", "", token=SECRET).id for i in range(25)}
    assert len(ids) == 25


def test_list_is_newest_first(data_file):
    clock = FakeClock()
    svc = ArticleService(data_file, token_secret=SECRET, clock=clock)
    clock.set(1)
    a = svc.create_article("A", "", "", token=SECRET)
    clock.set(3)
    b = svc.create_article("B", "", "", token=SECRET)
    clock.set(2)
    c = svc.create_article("C", "", "", token=SECRET)

    assert [x.id for x in svc.list_articles()] == [b.id, c.id, a.id]


def test_get_returns_matching_article(svc):
    created = svc.create_article("Find me", "", "", token=SECRET)
    svc.create_article("Other", "", "", token=SECRET)

    assert svc.get_article(str(created.id)) == created


def test_get_unknown_id_raises_not_found(svc):
    with pytest.raises(ArticleNotFoundError):
        svc.get_article(str(uuid.uuid4()))


@pytest.mark.parametrize("bad_id", ["", "abc", "1234", "6f1c2b7e-3c1d-4c8e-9a51-0b1f0c9e8dZZ"])
def test_get_malformed_id_raises_invalid(svc, bad_id):
    with pytest.raises(InvalidArticleIdError):
        svc.get_article(bad_id)


def test_delete_removes_article(svc, data_file):
    keep = svc.create_article("keep", "", "", token=SECRET)
    gone = svc.create_article("gone", "", "", token=SECRET)

    svc.delete_article(str(gone.id), token=SECRET)

    with pytest.raises(ArticleNotFoundError):
        svc.get_article(str(gone.id))
    assert svc.list_articles() == [keep]
    assert json_storage.load(data_file) == [keep]


def test_delete_unknown_id_raises_not_found_and_writes_nothing(svc, data_file):
    svc.create_article("only", "", "", token=SECRET)
    before = data_file.read_bytes()

    with pytest.raises(ArticleNotFoundError):
        svc.delete_article(str(uuid.uuid4()), token=SECRET)

    assert data_file.read_bytes() == before


def test_delete_malformed_id_raises_invalid(svc):
    with pytest.raises(InvalidArticleIdError):
        svc.delete_article("not-an-id", token=SECRET)


@pytest.mark.parametrize("token", [None, "", "wrong", SECRET + " "])
def test_writes_require_matching_token(svc, data_file, token):
    existing = svc.create_article("existing", "", "", token=SECRET)

    with pytest.raises(ForbiddenError):
        svc.create_article("intruder", "", "", token=token)
    with pytest.raises(ForbiddenError):
        svc.delete_article(str(existing.id), token=token)

    assert svc.list_articles() == [existing]
    assert json_storage.load(data_file) == [existing]


def test_empty_secret_disables_auth(data_file):
    svc = ArticleService(data_file, token_secret="")
    assert svc.auth_enabled is False

    article = svc.create_article("open", "", "", token=None)
    svc.delete_article(str(article.id), token="anything")

    assert svc.list_articles() == []


def test_concurrent_creates_lose_nothing(svc, data_file):
    workers = 16
    per_worker = 5
    barrier = threading.Barrier(workers)
    errors = []

    def writer(n: int) -> None:
        barrier.wait()
        try:
            for i in range(per_worker):
                svc.create_article(f"w{n}-{i}", "", "", token=SECRET)
        except Exception as exc:  # surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    listed = svc.list_articles()
    assert len(listed) == workers * per_worker
    assert len({a.id for a in listed}) == workers * per_worker
    assert len(json_storage.load(data_file)) == workers * per_worker


def test_failed_save_rolls_back_create(data_file, monkeypatch):
    svc = ArticleService(data_file, token_secret=SECRET, refresh_on_read=False)
    kept = svc.create_article("kept", "", "", token=SECRET)

    def broken_save(path, articles):
        raise json_storage.StorageWriteError("disk full")

    monkeypatch.setattr(article_service.json_storage, "save", broken_save)

    with pytest.raises(StorageUnavailableError):
        svc.create_article("lost", "", "", token=SECRET)
    with pytest.raises(StorageUnavailableError):
        svc.delete_article(str(kept.id), token=SECRET)

    assert svc.list_articles() == [kept]


def test_corrupt_file_surfaces_storage_unavailable(svc, data_file):
    data_file.write_text("{broken", encoding="utf-8")

    with pytest.raises(StorageUnavailableError) as excinfo:
        svc.list_articles()
    assert isinstance(excinfo.value.__cause__, json_storage.CorruptDataError)
    with pytest.raises(StorageUnavailableError):
        svc.create_article("x", "", "", token=SECRET)
    assert data_file.read_text(encoding="utf-8") == "{broken"


def test_refresh_on_read_picks_up_external_edits(svc, data_file):
    svc.create_article("mine", "", "", token=SECRET)
    external = {
        "id": str(uuid.uuid4()),
        "title": "external",
        "type": "",
        "content": "",
        "created": "2030-01-01T00:00:00+00:00",
    }
    raw = json.loads(data_file.read_text(encoding="utf-8"))
    data_file.write_text(json.dumps(raw + [external]), encoding="utf-8")

    titles = [a.title for a in svc.list_articles()]

    assert titles == ["external", "mine"]


def test_cached_mode_reads_file_once(data_file):
    svc = ArticleService(data_file, token_secret=SECRET, refresh_on_read=False)
    created = svc.create_article("cached", "", "", token=SECRET)
    data_file.write_text("[]", encoding="utf-8")

    assert svc.list_articles() == [created]
    assert svc.get_article(str(created.id)) == created

    assert svc.reload() == 0
    assert svc.list_articles() == []


def test_state_survives_restart(data_file):
    first = ArticleService(data_file, token_secret=SECRET, refresh_on_read=False)
    article = first.create_article("durable", "", "", token=SECRET)

    second = ArticleService(data_file, token_secret=SECRET, refresh_on_read=False)

    assert second.list_articles() == [article]


@pytest.mark.parametrize("bad_id", [12345, 3.5, ["x"]])
def test_non_string_id_raises_invalid(svc, bad_id):
    with pytest.raises(InvalidArticleIdError):
        svc.get_article(bad_id)
    with pytest.raises(InvalidArticleIdError):
        svc.delete_article(bad_id, token=SECRET)


def test_storage_failure_is_logged_with_traceback(svc, data_file, caplog):
    data_file.write_text("{broken", encoding="utf-8")

    with caplog.at_level("ERROR", logger="sfhb.services.article_service"):
        with pytest.raises(StorageUnavailableError):
            svc.list_articles()

    records = [r for r in caplog.records if r.levelname == "ERROR"]
    assert records
    assert records[0].exc_info is not None
    assert isinstance(records[0].exc_info[1], json_storage.CorruptDataError)


def test_create_treats_none_fields_as_empty(svc):
    article = svc.create_article("t", None, None, token=SECRET)
    assert (article.type, article.content) == ("", "")
