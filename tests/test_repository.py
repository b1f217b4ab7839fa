"""Tests for the confession repository (the persistent store)."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from confession_wall.core.errors import InputValidationError, NotFoundError, StoreError
from confession_wall.db.session import build_engine, build_session_factory, create_tables
from confession_wall.models import Comment, Confession, ConfessionStatus
from confession_wall.repositories import ConfessionRepository


def test_create_confession_defaults(repository, db_session) -> None:
    """A new confession is pending with zeroed counters."""
    confession_id = repository.create_confession("I skipped every lecture", "college")

    rows = repository.list_all()
    assert [row.id for row in rows] == [confession_id]
    confession = rows[0]
    assert confession.status == ConfessionStatus.PENDING.value
    assert confession.likes == 0
    assert confession.reports_count == 0
    assert confession.nickname == "Anonymous"
    assert confession.created_at is not None


def test_create_confession_keeps_nickname(repository) -> None:
    confession_id = repository.create_confession("Cried at a cartoon", "funny", "  owl  ")
    assert repository.get_confession(confession_id).nickname == "owl"


@pytest.mark.parametrize(
    ("content", "category"),
    [("", "love"), ("   ", "love"), ("text", ""), (None, "love"), ("text", None)],
)
def test_create_confession_requires_content_and_category(repository, content, category) -> None:
    with pytest.raises(InputValidationError, match="Content and category are required"):
        repository.create_confession(content, category)
    assert repository.list_all() == []


def test_list_approved_filters_and_orders(repository, make_confession) -> None:
    """Only approved confessions reach the feed, newest first."""
    older = make_confession("older", status=ConfessionStatus.APPROVED)
    make_confession("pending one")
    make_confession("rejected one", status=ConfessionStatus.REJECTED)
    newer = make_confession("newer", status=ConfessionStatus.APPROVED)

    feed = repository.list_approved()
    assert [c.id for c in feed] == [newer.id, older.id]
    assert all(c.status == "approved" for c in feed)


def test_list_all_orders_by_reports_then_newest(repository, make_confession) -> None:
    first = make_confession("first")
    second = make_confession("second")
    reported = make_confession("reported")
    repository.increment_reports(first.id)
    repository.increment_reports(reported.id)
    repository.increment_reports(reported.id)

    assert [c.id for c in repository.list_all()] == [reported.id, first.id, second.id]


def test_set_status_is_reversible(repository, make_confession) -> None:
    confession = make_confession()
    repository.set_status(confession.id, ConfessionStatus.APPROVED)
    repository.set_status(confession.id, ConfessionStatus.REJECTED)

    assert confession.id not in [c.id for c in repository.list_approved()]

    repository.set_status(confession.id, ConfessionStatus.APPROVED)
    assert confession.id in [c.id for c in repository.list_approved()]


def test_set_status_missing_confession(repository) -> None:
    with pytest.raises(NotFoundError, match="Confession not found"):
        repository.set_status(999, ConfessionStatus.APPROVED)


def test_set_status_same_value_still_succeeds(repository, make_confession) -> None:
    confession = make_confession()
    repository.set_status(confession.id, ConfessionStatus.PENDING)
    repository.set_status(confession.id, ConfessionStatus.PENDING)


def test_increment_counters(repository, make_confession, db_session) -> None:
    confession = make_confession()
    for _ in range(3):
        repository.increment_likes(confession.id)
    repository.increment_reports(confession.id)

    db_session.expire_all()
    stored = repository.get_confession(confession.id)
    assert stored.likes == 3
    assert stored.reports_count == 1


def test_increment_likes_returns_written_count(repository, make_confession) -> None:
    confession = make_confession(content="counted")
    assert repository.increment_likes(confession.id) == ("counted", 1)
    assert repository.increment_likes(confession.id) == ("counted", 2)


def test_increment_missing_confession(repository) -> None:
    with pytest.raises(NotFoundError):
        repository.increment_likes(42)
    with pytest.raises(NotFoundError):
        repository.increment_reports(42)


def test_delete_confession_cascades_to_comments(repository, make_confession, db_session) -> None:
    confession = make_confession()
    other = make_confession("keep me")
    repository.create_comment(confession.id, "same here")
    repository.create_comment(confession.id, "me too")
    repository.create_comment(other.id, "unrelated")

    repository.delete_confession(confession.id)

    assert repository.list_comments(confession.id) == []
    remaining = db_session.scalars(select(Comment)).all()
    assert [c.confession_id for c in remaining] == [other.id]
    assert repository.get_confession(confession.id) is None


def test_delete_missing_confession(repository) -> None:
    with pytest.raises(NotFoundError):
        repository.delete_confession(999)


def test_comments_are_oldest_first(repository, make_confession) -> None:
    confession = make_confession()
    first = repository.create_comment(confession.id, "first", "ant")
    second = repository.create_comment(confession.id, "second")

    comments = repository.list_comments(confession.id)
    assert [c.id for c in comments] == [first, second]
    assert comments[0].nickname == "ant"
    assert comments[1].nickname == "Anonymous"


def test_create_comment_requires_content(repository, make_confession) -> None:
    confession = make_confession()
    with pytest.raises(InputValidationError, match="Comment content required"):
        repository.create_comment(confession.id, "  ")


def test_create_comment_for_missing_confession(repository) -> None:
    with pytest.raises(NotFoundError):
        repository.create_comment(404, "orphan")
    assert repository.list_comments(404) == []


def test_delete_comment_is_unconditional(repository, make_confession) -> None:
    confession = make_confession()
    comment_id = repository.create_comment(confession.id, "bye")

    repository.delete_comment(comment_id)
    repository.delete_comment(comment_id)
    repository.delete_comment(123456)

    assert repository.list_comments(confession.id) == []


def test_count_by_status(repository, make_confession) -> None:
    make_confession()
    make_confession(status=ConfessionStatus.APPROVED)
    reported = make_confession(status=ConfessionStatus.APPROVED)
    repository.increment_reports(reported.id)

    assert repository.count_by_status() == {"pending": 1, "approved": 2}
    assert repository.count_reported() == 1


def test_database_failure_becomes_store_error(repository, mocker) -> None:
    mocker.patch.object(
        repository.session,
        "scalars",
        side_effect=OperationalError("SELECT", {}, Exception("disk I/O error")),
    )
    with pytest.raises(StoreError) as excinfo:
        repository.list_approved()
    assert "disk" not in str(excinfo.value)


def test_concurrent_likes_are_not_lost(tmp_path: Path) -> None:
    """Parallel like requests on separate connections all land."""
    engine = build_engine(f"sqlite:///{tmp_path / 'likes.db'}")
    create_tables(engine)
    factory = build_session_factory(engine)

    with factory() as session:
        confession_id = ConfessionRepository(session).create_confession("popular", "funny")

    def like() -> None:
        with factory() as session:
            ConfessionRepository(session).increment_likes(confession_id)

    total = 40
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: like(), range(total)))

    with factory() as session:
        assert session.get(Confession, confession_id).likes == total
    engine.dispose()
