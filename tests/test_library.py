"""Tests for favorites, reading history and profile stats."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

from mangafas.auth.models import Role, User
from mangafas.config import Settings
from mangafas.library.models import HISTORY_LIMIT
from mangafas.platform import Platform


class _Clock:
    def __init__(self):
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


def _setup(tmpdir: str):
    platform = Platform(settings=Settings(data_dir=Path(tmpdir)), clock=_Clock())
    for user_id, role in (
        ("owner", Role.owner),
        ("leader", Role.group_leader),
        ("apprentice", Role.apprentice_contributor),
        ("reader", Role.member),
    ):
        platform.users.create_user(
            User(id=user_id, display_name=user_id.title(), email=f"{user_id}@example.com", role=role)
        )
    return platform


def test_add_and_remove_favorites():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        reader = platform.user("reader")

        assert platform.library.add_favorite(reader, "title-1")
        assert platform.library.add_favorite(reader, "title-2")
        assert not platform.library.add_favorite(reader, "title-1")
        assert [f.title_id for f in platform.library.favorites_of("reader")] == ["title-2", "title-1"]
        assert platform.library.is_favorited("reader", "title-1")
        assert not platform.library.is_favorited("owner", "title-1")

        assert platform.library.remove_favorite(reader, "title-1")
        assert not platform.library.remove_favorite(reader, "title-1")
        assert not platform.library.is_favorited("reader", "title-1")


def test_favorites_need_an_account():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        assert not platform.library.add_favorite(None, "title-1")
        assert not platform.library.remove_favorite(None, "title-1")
        assert not platform.library.add_favorite(platform.user("reader"), "")


def test_record_read_replaces_chapter_and_bumps_favorite():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        reader = platform.user("reader")
        platform.library.add_favorite(reader, "title-1")
        assert platform.library.favorites_of("reader")[0].last_read == ""

        platform.library.record_read(reader, "title-1", "ch-1", 1)
        platform.library.record_read(reader, "title-2", "ch-9", 9, progress=40)
        again = platform.library.record_read(reader, "title-1", "ch-1", 1, progress=80)

        history = platform.library.history_of("reader")
        assert [h.chapter_id for h in history] == ["ch-1", "ch-9"]
        assert history[0].id == again.id
        assert history[0].progress == 80
        assert platform.library.history_of("reader", limit=1) == history[:1]
        assert platform.library.favorites_of("reader")[0].last_read == again.read_at


def test_record_read_validation():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        reader = platform.user("reader")
        assert platform.library.record_read(reader, "title-1", "ch-1", 1, progress=101) is None
        assert platform.library.record_read(reader, "title-1", "ch-1", 1, progress=-1) is None
        assert platform.library.record_read(reader, "", "ch-1", 1) is None
        assert platform.library.history_of("reader") == []


def test_history_keeps_newest_entries():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        reader = platform.user("reader")
        for n in range(HISTORY_LIMIT + 5):
            platform.library.record_read(reader, "title-1", f"ch-{n}", n)
        platform.library.record_read(platform.user("owner"), "title-1", "ch-0", 0)

        history = platform.library.history_of("reader")
        assert len(history) == HISTORY_LIMIT
        assert history[0].chapter_id == f"ch-{HISTORY_LIMIT + 4}"
        assert history[-1].chapter_id == "ch-5"
        assert len(platform.library.history_of("owner")) == 1


def test_user_stats_counts_activity():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        leader, apprentice = platform.user("leader"), platform.user("apprentice")

        title_id = platform.content.submit("title", {"title": "Iron Lotus"}, leader)
        platform.content.submit("chapter", {"title_id": title_id, "number": 1}, leader)
        approved = platform.content.submit("title", {"title": "Moon Blade"}, apprentice)
        platform.content.approve(approved, platform.user("owner"))
        platform.content.submit("title", {"title": "Queued"}, apprentice)

        platform.library.add_favorite(apprentice, title_id)
        platform.library.record_read(apprentice, title_id, "ch-1", 1)
        platform.library.record_read(apprentice, title_id, "ch-2", 2)
        platform.comments.add_comment(title_id, apprentice, "great")
        gone = platform.comments.add_comment(title_id, apprentice, "oops")
        platform.comments.delete(gone.id, apprentice)

        stats = platform.accounts.user_stats("apprentice")
        assert stats.favorites == 1
        assert stats.reading_history == 2
        assert stats.titles_read == 1
        assert stats.chapters_read == 2
        assert stats.comments_written == 1
        assert stats.titles_uploaded == 1
        assert stats.chapters_uploaded == 0
        assert stats.submissions_pending == 1

        leader_stats = platform.accounts.user_stats("leader")
        assert (leader_stats.titles_uploaded, leader_stats.chapters_uploaded) == (1, 1)
        assert platform.accounts.user_stats("ghost") is None


def test_delete_user_clears_library():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        reader = platform.user("reader")
        platform.library.add_favorite(reader, "title-1")
        platform.library.record_read(reader, "title-1", "ch-1", 1)
        platform.library.add_favorite(platform.user("leader"), "title-1")

        assert platform.accounts.delete_user("reader", platform.user("owner"))
        assert platform.library.favorites_of("reader") == []
        assert platform.library.history_of("reader") == []
        assert platform.library.is_favorited("leader", "title-1")
