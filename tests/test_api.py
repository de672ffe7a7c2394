"""Tests for the REST API."""

import tempfile
from pathlib import Path

from fastapi.testclient import TestClient

from mangafas.auth.models import Role, User
from mangafas.config import Settings
from mangafas.platform import Platform
from web.backend.app.main import app
from web.backend.app.middleware.auth import get_platform


def _client(tmpdir: str):
    platform = Platform(settings=Settings(data_dir=Path(tmpdir)))
    for user_id, role in (
        ("owner", Role.owner),
        ("senior", Role.senior_contributor),
        ("apprentice", Role.apprentice_contributor),
        ("alice", Role.member),
        ("bob", Role.member),
    ):
        platform.users.create_user(
            User(id=user_id, display_name=user_id.title(), email=f"{user_id}@example.com", role=role)
        )
    app.dependency_overrides[get_platform] = lambda: platform
    return TestClient(app), platform


def _as(user_id: str) -> dict:
    return {"X-User-Id": user_id}


def test_health():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy"}


def test_unknown_actor_is_401():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        assert client.get("/api/users/me").status_code == 401
        assert client.get("/api/users/me", headers=_as("ghost")).status_code == 401


def test_me_reports_capabilities():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        body = client.get("/api/users/me", headers=_as("senior")).json()
        assert body["user"]["role"] == "senior_contributor"
        assert body["permissions"]["can_moderate_comments"] is True
        assert body["permissions"]["can_administer"] is False
        assert body["permissions"]["upload_requires_approval"] is True
        assert body["banned"] is False


def test_missing_capability_is_403():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        resp = client.put("/api/users/bob/role", json={"role": "owner"}, headers=_as("alice"))
        assert resp.status_code == 403
        resp = client.post(
            "/api/suspensions",
            json={"user_id": "bob", "reason": "spam", "duration": "permanent"},
            headers=_as("senior"),
        )
        assert resp.status_code == 403


def test_business_failure_is_ok_false():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        ban = {"user_id": "bob", "reason": "spam", "duration": "permanent"}
        first = client.post("/api/suspensions", json=ban, headers=_as("owner")).json()
        second = client.post("/api/suspensions", json=ban, headers=_as("owner"))
        assert first["ok"] is True
        assert second.status_code == 200
        assert second.json()["ok"] is False

        status_body = client.get("/api/suspensions/users/bob", headers=_as("bob")).json()
        assert status_body["banned"] is True
        assert status_body["site"]["id"] == first["id"]


def test_overlong_ban_is_rejected_by_validation():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, platform = _client(tmpdir)
        ban = {"user_id": "bob", "reason": "spam", "duration": "temporary", "days": 3_000_000}
        resp = client.post("/api/suspensions", json=ban, headers=_as("owner"))
        assert resp.status_code == 422
        assert not platform.suspensions.is_banned("bob")


def test_register_and_change_role():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, platform = _client(tmpdir)
        created = client.post("/api/users", json={"display_name": "Kaito", "email": "kaito@example.com"}).json()
        assert created["ok"] is True
        dup = client.post("/api/users", json={"display_name": "K2", "email": "kaito@example.com"}).json()
        assert dup["ok"] is False

        resp = client.put(f"/api/users/{created['id']}/role", json={"role": "group_leader"}, headers=_as("owner"))
        assert resp.json()["ok"] is True
        assert platform.user(created["id"]).role is Role.group_leader


def test_submission_review_flow():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        assert client.post(
            "/api/content/submissions", json={"kind": "title", "payload": {"title": "X"}}, headers=_as("alice")
        ).status_code == 403

        submitted = client.post(
            "/api/content/submissions",
            json={"kind": "title", "payload": {"title": "Moon Blade"}},
            headers=_as("apprentice"),
        ).json()
        assert submitted["ok"] is True
        assert submitted["pending"] is True

        queue = client.get("/api/content/submissions/pending", headers=_as("owner")).json()
        assert [i["id"] for i in queue] == [submitted["id"]]

        approved = client.post(
            f"/api/content/submissions/{submitted['id']}/approve", json={"notes": "nice"}, headers=_as("owner")
        ).json()
        assert approved["ok"] is True
        again = client.post(f"/api/content/submissions/{submitted['id']}/reject", headers=_as("owner")).json()
        assert again["ok"] is False

        titles = client.get("/api/content/titles").json()
        assert [t["title"] for t in titles] == ["Moon Blade"]

        inbox = client.get("/api/notifications", headers=_as("apprentice")).json()
        assert inbox[0]["type"] == "content_approved"


def test_comment_moderation_flow():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        posted = client.post(
            "/api/comments", json={"content_id": "title-1", "body": "rude"}, headers=_as("alice")
        ).json()
        comment_id = posted["id"]

        reported = client.post(
            f"/api/comments/{comment_id}/report", json={"reason": "offensive"}, headers=_as("bob")
        ).json()
        assert reported["ok"] is True
        dup = client.post(f"/api/comments/{comment_id}/report", json={"reason": "spam"}, headers=_as("bob"))
        assert dup.json()["ok"] is False

        assert client.post(
            f"/api/comments/{comment_id}/hide", json={"reason": "Offensive"}, headers=_as("bob")
        ).status_code == 403
        hidden = client.post(
            f"/api/comments/{comment_id}/hide", json={"reason": "Offensive"}, headers=_as("senior")
        ).json()
        assert hidden["ok"] is True
        assert client.get("/api/comments", params={"content_id": "title-1"}).json() == []

        resolved = client.post(
            f"/api/reports/{reported['id']}/resolve", json={"status": "resolved"}, headers=_as("senior")
        ).json()
        assert resolved["ok"] is True

        unread = client.get("/api/notifications/unread-count", headers=_as("alice")).json()
        assert unread["count"] == 1


def test_user_report_needs_administrator_to_resolve():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        report = client.post("/api/reports/users/alice", json={"reason": "harassment"}, headers=_as("bob")).json()
        resp = client.post(f"/api/reports/{report['id']}/resolve", json={}, headers=_as("senior"))
        assert resp.status_code == 403
        resp = client.post(f"/api/reports/{report['id']}/resolve", json={}, headers=_as("owner"))
        assert resp.json()["ok"] is True


def test_thread_includes_replies():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        root = client.post("/api/comments", json={"content_id": "t", "body": "root"}, headers=_as("alice")).json()
        client.post(
            "/api/comments", json={"content_id": "t", "body": "reply", "parent_id": root["id"]}, headers=_as("bob")
        )
        thread = client.get("/api/comments", params={"content_id": "t"}).json()
        assert len(thread) == 1
        assert [r["body"] for r in thread[0]["replies"]] == ["reply"]

        liked = client.post(f"/api/comments/{root['id']}/like", headers=_as("bob")).json()
        assert liked == {"ok": True, "likes": 1, "dislikes": 0}


def test_notifications_mark_read():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, platform = _client(tmpdir)
        platform.suspensions.issue("bob", platform.user("owner"), "spam", "temporary", days=1)
        inbox = client.get("/api/notifications", headers=_as("bob")).json()
        assert len(inbox) == 1

        assert client.post(f"/api/notifications/{inbox[0]['id']}/read", headers=_as("alice")).json()["ok"] is False
        assert client.post(f"/api/notifications/{inbox[0]['id']}/read", headers=_as("bob")).json()["ok"] is True
        assert client.get("/api/notifications", params={"unread_only": True}, headers=_as("bob")).json() == []


def test_store_failure_is_503():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        (Path(tmpdir) / "comments.json").write_text("{broken")
        resp = client.get("/api/comments", params={"content_id": "title-1"})
        assert resp.status_code == 503


def test_library_favorites_and_history():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = _client(tmpdir)
        assert client.post("/api/library/favorites/title-1", headers=_as("alice")).json()["ok"] is True
        assert client.post("/api/library/favorites/title-1", headers=_as("alice")).json()["ok"] is False
        status_body = client.get("/api/library/favorites/title-1", headers=_as("alice")).json()
        assert status_body == {"title_id": "title-1", "favorited": True}

        read = {"title_id": "title-1", "chapter_id": "ch-1", "chapter_number": 1, "progress": 60}
        assert client.post("/api/library/history", json=read, headers=_as("alice")).json()["ok"] is True
        bad = dict(read, progress=150)
        assert client.post("/api/library/history", json=bad, headers=_as("alice")).status_code == 422

        history = client.get("/api/library/history", headers=_as("alice")).json()
        assert [h["chapter_id"] for h in history] == ["ch-1"]
        favorites = client.get("/api/library/favorites", headers=_as("alice")).json()
        assert favorites[0]["last_read"] == history[0]["read_at"]

        assert client.delete("/api/library/favorites/title-1", headers=_as("alice")).json()["ok"] is True
        assert client.get("/api/library/favorites", headers=_as("alice")).json() == []


def test_user_stats_visibility():
    with tempfile.TemporaryDirectory() as tmpdir:
        client, platform = _client(tmpdir)
        platform.library.add_favorite(platform.user("alice"), "title-1")

        own = client.get("/api/users/alice/stats", headers=_as("alice")).json()
        assert own["favorites"] == 1
        assert client.get("/api/users/alice/stats", headers=_as("bob")).status_code == 403
        assert client.get("/api/users/alice/stats", headers=_as("senior")).status_code == 200
        assert client.get("/api/users/ghost/stats", headers=_as("senior")).status_code == 404
