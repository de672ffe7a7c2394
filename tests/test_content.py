"""Tests for the submission, review and publication pipeline."""

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from mangafas.auth.models import Role, User
from mangafas.config import Settings
from mangafas.content.catalog import CatalogError, JsonCatalog
from mangafas.content.models import ContentKind, PendingContent, ReviewStatus
from mangafas.notifications.models import NotificationType
from mangafas.platform import Platform


def _clock():
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _setup(tmpdir: str):
    platform = Platform(settings=Settings(data_dir=Path(tmpdir)), clock=_clock)
    for user_id, role in (
        ("owner", Role.owner),
        ("mod", Role.moderator),
        ("leader", Role.group_leader),
        ("senior", Role.senior_contributor),
        ("apprentice", Role.apprentice_contributor),
        ("reader", Role.member),
    ):
        platform.users.create_user(
            User(id=user_id, display_name=user_id.title(), email=f"{user_id}@example.com", role=role)
        )
    return platform


def _types(platform, user_id):
    return [n.type for n in platform.notifications.list(user_id)]


def test_apprentice_submission_goes_to_review():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        pending_id = platform.content.submit("title", {"title": "Moon Blade"}, platform.user("apprentice"))

        item = platform.content.get(pending_id)
        assert item is not None
        assert item.status is ReviewStatus.pending
        assert platform.content.pending_count() == 1
        assert platform.catalog.list_titles() == []

        # every administrator hears about it, the submitter gets a receipt
        assert NotificationType.content_pending_approval in _types(platform, "owner")
        assert NotificationType.content_pending_approval in _types(platform, "mod")
        assert _types(platform, "apprentice") == [NotificationType.content_submitted]
        assert _types(platform, "leader") == []


def test_trusted_rank_publishes_directly():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        published_id = platform.content.submit("title", {"title": "Iron Lotus"}, platform.user("leader"))

        assert published_id.startswith("title-")
        assert platform.catalog.get_title(published_id)["title"] == "Iron Lotus"
        assert platform.content.list_all() == []


def test_member_and_banned_users_cannot_submit():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        assert platform.content.submit("title", {"title": "X"}, platform.user("reader")) is None

        platform.suspensions.issue("apprentice", platform.user("mod"), "spam", "permanent")
        assert platform.content.submit("title", {"title": "X"}, platform.user("apprentice")) is None
        assert platform.content.list_all() == []


def test_submit_for_review_refuses_trusted_ranks():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        assert platform.content.submit_for_review("title", {"title": "X"}, platform.user("leader")) is None
        assert platform.content.submit_for_review("title", {"title": "X"}, platform.user("reader")) is None


def test_approve_publishes_and_notifies():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        pending_id = platform.content.submit("title", {"title": "Moon Blade"}, platform.user("apprentice"))

        assert platform.content.approve(pending_id, platform.user("mod"), notes="Looks good")

        item = platform.content.get(pending_id)
        assert item.status is ReviewStatus.approved
        assert item.reviewed_by == "mod"
        assert item.review_notes == "Looks good"
        assert platform.catalog.get_title(item.published_id)["title"] == "Moon Blade"

        latest = platform.notifications.list("apprentice")[0]
        assert latest.type is NotificationType.content_approved
        assert "Moon Blade" in latest.message
        assert latest.payload.published_id == item.published_id


def test_second_decision_is_refused():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        pending_id = platform.content.submit("title", {"title": "Moon Blade"}, platform.user("apprentice"))
        owner = platform.user("owner")

        assert platform.content.approve(pending_id, owner)
        inbox_size = len(platform.notifications.list("apprentice"))

        assert not platform.content.reject(pending_id, owner, "too late")
        assert not platform.content.approve(pending_id, owner)
        assert platform.content.get(pending_id).status is ReviewStatus.approved
        assert len(platform.notifications.list("apprentice")) == inbox_size
        assert len(platform.catalog.list_titles()) == 1


def test_reject_uses_default_reason():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        pending_id = platform.content.submit("title", {"title": "Moon Blade"}, platform.user("senior"))

        assert platform.content.reject(pending_id, platform.user("owner"))

        latest = platform.notifications.list("senior")[0]
        assert latest.type is NotificationType.content_rejected
        assert "No reason given" in latest.message
        assert platform.content.list_pending() == []
        assert platform.catalog.list_titles() == []


def test_review_requires_administrator():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        pending_id = platform.content.submit("title", {"title": "Moon Blade"}, platform.user("apprentice"))
        assert not platform.content.approve(pending_id, platform.user("leader"))
        assert not platform.content.reject(pending_id, platform.user("senior"))
        assert platform.content.get(pending_id).status is ReviewStatus.pending


def test_chapter_approval_bumps_chapter_count():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        title_id = platform.content.submit("title", {"title": "Iron Lotus"}, platform.user("leader"))
        pending_id = platform.content.submit(
            "chapter",
            {"title_id": title_id, "number": 1, "title": "Awakening"},
            platform.user("apprentice"),
        )
        assert platform.content.get(pending_id).display_name == "Chapter 1: Awakening"

        assert platform.content.approve(pending_id, platform.user("owner"))
        assert platform.catalog.get_title(title_id)["chapters_count"] == 1
        assert [c["number"] for c in platform.catalog.chapters_of(title_id)] == [1]


def test_catalog_error_leaves_item_pending():
    with tempfile.TemporaryDirectory() as tmpdir:
        platform = _setup(tmpdir)
        pending_id = platform.content.submit(
            "chapter", {"title_id": "title-missing", "number": 3}, platform.user("apprentice")
        )

        assert not platform.content.approve(pending_id, platform.user("owner"))
        assert platform.content.get(pending_id).status is ReviewStatus.pending


def test_json_catalog_validation():
    with tempfile.TemporaryDirectory() as tmpdir:
        catalog = JsonCatalog(tmpdir, _clock)
        with pytest.raises(CatalogError):
            catalog.materialize(ContentKind.title, {"title": "  "})

        title_id = catalog.materialize(ContentKind.title, {"title": "Solo"})
        record = catalog.get_title(title_id)
        assert record["views"] == 0
        assert record["chapters_count"] == 0


def test_pending_content_roundtrip_defaults():
    item = PendingContent.from_dict({"id": "pending-1", "kind": "title", "payload": {"title": "A"}})
    assert item.status is ReviewStatus.pending
    assert item.display_name == "A"
    assert item.to_dict()["kind"] == "title"
