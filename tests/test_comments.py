"""Tests for comment authoring, votes and moderation."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

from mangafas.auth.models import Role, User
from mangafas.comments.models import CommentStatus
from mangafas.config import Settings
from mangafas.notifications.models import NotificationType
from mangafas.platform import Platform


class _Clock:
    def __init__(self):
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        # every reading moves time forward so timestamps are distinct
        self.now += timedelta(seconds=1)
        return self.now


def _setup(tmpdir: str):
    platform = Platform(settings=Settings(data_dir=Path(tmpdir)), clock=_Clock())
    for user_id, role in (
        ("owner", Role.owner),
        ("senior", Role.senior_contributor),
        ("alice", Role.member),
        ("bob", Role.member),
    ):
        platform.users.create_user(
            User(id=user_id, display_name=user_id.title(), email=f"{user_id}@example.com", role=role)
        )
    return platform


def test_add_top_level_comment():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        c = platform.comments.add_comment("title-1", platform.user("alice"), "  Great read!  ")

        assert c is not None
        assert c.body == "Great read!"
        assert c.status is CommentStatus.active
        assert platform.comments.top_level("title-1") == [c]


def test_blank_body_is_refused():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        assert platform.comments.add_comment("title-1", platform.user("alice"), "   ") is None


def test_banned_authors_cannot_comment():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        owner = platform.user("owner")
        platform.suspensions.issue("alice", owner, "flame", "temporary", days=1, kind="comment")
        platform.suspensions.issue("bob", owner, "spam", "permanent", kind="site")

        assert platform.comments.add_comment("title-1", platform.user("alice"), "hi") is None
        assert platform.comments.add_comment("title-1", platform.user("bob"), "hi") is None
        assert platform.comments.add_comment("title-1", platform.user("senior"), "hi") is not None


def test_top_level_is_newest_first_and_scoped_to_chapter():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        alice = platform.user("alice")
        first = platform.comments.add_comment("title-1", alice, "first")
        second = platform.comments.add_comment("title-1", alice, "second")
        on_chapter = platform.comments.add_comment("title-1", alice, "chapter", chapter_id="chapter-1")

        assert [c.id for c in platform.comments.top_level("title-1")] == [second.id, first.id]
        assert [c.id for c in platform.comments.top_level("title-1", "chapter-1")] == [on_chapter.id]


def test_replies_oldest_first_and_flattened():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        alice, bob = platform.user("alice"), platform.user("bob")
        root = platform.comments.add_comment("title-1", alice, "root")
        reply = platform.comments.add_comment("title-1", bob, "reply", parent_id=root.id)
        nested = platform.comments.add_comment("title-1", alice, "reply to reply", parent_id=reply.id)

        assert nested.parent_id == root.id
        assert [c.id for c in platform.comments.replies_of(root.id)] == [reply.id, nested.id]
        assert platform.comments.top_level("title-1") == [root]


def test_reply_must_match_parent_target():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        alice = platform.user("alice")
        root = platform.comments.add_comment("title-1", alice, "root")
        assert platform.comments.add_comment("title-2", alice, "x", parent_id=root.id) is None
        assert platform.comments.add_comment("title-1", alice, "x", parent_id="comment-missing") is None


def test_edit_once_by_author():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        alice, bob = platform.user("alice"), platform.user("bob")
        c = platform.comments.add_comment("title-1", alice, "typo")

        assert not platform.comments.edit(c.id, "hijack", bob)
        assert platform.comments.edit(c.id, "fixed", alice)
        assert not platform.comments.edit(c.id, "again", alice)

        edited = platform.comments.get(c.id)
        assert edited.body == "fixed"
        assert edited.is_edited
        assert edited.updated_at > edited.created_at


def test_likes_and_dislikes_are_exclusive():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        c = platform.comments.add_comment("title-1", platform.user("alice"), "vote me")
        bob = platform.user("bob")

        c = platform.comments.toggle_like(c.id, bob)
        assert c.likes == ["bob"] and c.dislikes == []

        c = platform.comments.toggle_dislike(c.id, bob)
        assert c.likes == [] and c.dislikes == ["bob"]

        c = platform.comments.toggle_dislike(c.id, bob)
        assert c.likes == [] and c.dislikes == []


def test_like_twice_restores_like_set():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        c = platform.comments.add_comment("title-1", platform.user("alice"), "vote me")
        platform.comments.toggle_like(c.id, platform.user("owner"))

        c = platform.comments.toggle_like(c.id, platform.user("bob"))
        assert c.likes == ["owner", "bob"]
        c = platform.comments.toggle_like(c.id, platform.user("bob"))
        assert c.likes == ["owner"]
        assert platform.comments.get(c.id).dislikes == []


def test_hide_then_restore():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        senior = platform.user("senior")
        c = platform.comments.add_comment("title-1", platform.user("alice"), "rude words")

        assert platform.comments.hide(c.id, senior, "Offensive language")
        hidden = platform.comments.get(c.id)
        assert hidden.status is CommentStatus.hidden
        assert hidden.moderated_by == "senior"
        assert hidden.moderation_reason == "Offensive language"
        assert platform.comments.top_level("title-1") == []

        notice = platform.notifications.list("alice")[0]
        assert notice.type is NotificationType.comment_hidden
        assert "Offensive language" in notice.message

        assert not platform.comments.hide(c.id, senior, "again")
        assert platform.comments.restore(c.id, senior)
        restored = platform.comments.get(c.id)
        assert restored.status is CommentStatus.active
        assert restored.moderation_reason == ""
        assert platform.notifications.list("alice")[0].type is NotificationType.comment_restored
        assert not platform.comments.restore(c.id, senior)


def test_moderation_requires_capability():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        c = platform.comments.add_comment("title-1", platform.user("alice"), "hello")
        bob = platform.user("bob")
        assert not platform.comments.hide(c.id, bob, "nope")
        assert not platform.comments.hide(c.id, platform.user("senior"), "  ")
        assert platform.comments.get(c.id).status is CommentStatus.active


def test_delete_by_author_and_by_moderator():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        alice, bob, senior = platform.user("alice"), platform.user("bob"), platform.user("senior")
        own = platform.comments.add_comment("title-1", alice, "mine")
        other = platform.comments.add_comment("title-1", alice, "also mine")

        assert not platform.comments.delete(own.id, bob)
        assert platform.comments.delete(own.id, alice)
        assert platform.comments.get(own.id).moderated_by == ""
        assert not platform.comments.delete(own.id, alice)

        assert platform.comments.hide(other.id, senior, "spam")
        assert platform.comments.delete(other.id, senior)
        deleted = platform.comments.get(other.id)
        assert deleted.status is CommentStatus.deleted
        assert deleted.moderated_by == "senior"
        assert not platform.comments.restore(other.id, senior)


def test_moderated_and_stats():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        alice, senior = platform.user("alice"), platform.user("senior")
        a = platform.comments.add_comment("title-1", alice, "a")
        b = platform.comments.add_comment("title-1", alice, "b")
        platform.comments.add_comment("title-1", alice, "c")

        platform.comments.hide(a.id, senior, "spam")
        platform.comments.delete(b.id, senior)

        assert [c.id for c in platform.comments.moderated()] == [b.id, a.id]
        stats = platform.comments.stats()
        assert stats == {"total": 3, "active": 1, "hidden": 1, "deleted": 1, "reports": 0}
        assert len(platform.comments.by_user("alice")) == 3
