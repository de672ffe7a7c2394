"""File-based JSON storage for comments and reports."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from mangafas.comments.models import Comment, CommentStatus, Report, ReportStatus, ReportTarget
from mangafas.storage import JsonCollection


class CommentStore:
    """Storage path: ``<data_dir>/comments.json`` -- list of comment dicts."""

    def __init__(self, base_dir: str | Path) -> None:
        self._comments = JsonCollection(Path(base_dir) / "comments.json")

    def create(self, comment: Comment) -> Comment:
        with self._comments.transaction() as records:
            records.append(comment.to_dict())
        return comment

    def get(self, comment_id: str) -> Optional[Comment]:
        d = self._comments.find(comment_id)
        return Comment.from_dict(d) if d else None

    def all(self) -> list[Comment]:
        return [Comment.from_dict(d) for d in self._comments.load()]

    def update(self, comment_id: str, change: Callable[[Comment], bool]) -> Optional[Comment]:
        """Apply *change* to one comment atomically.

        *change* mutates the comment in place and returns False to abort
        without writing.  Returns the updated comment, or None.
        """
        with self._comments.transaction() as records:
            for i, d in enumerate(records):
                if d["id"] != comment_id:
                    continue
                comment = Comment.from_dict(d)
                if not change(comment):
                    return None
                records[i] = comment.to_dict()
                return comment
        return None

    def scrub_user(self, user_id: str, now: datetime) -> int:
        """Soft-delete a user's comments and drop their votes everywhere."""
        removed = 0
        with self._comments.transaction() as records:
            for d in records:
                if d["author_id"] == user_id and d.get("status") != CommentStatus.deleted.value:
                    d["status"] = CommentStatus.deleted.value
                    d["updated_at"] = now.isoformat()
                    removed += 1
                d["likes"] = [u for u in d.get("likes", []) if u != user_id]
                d["dislikes"] = [u for u in d.get("dislikes", []) if u != user_id]
        return removed


class ReportStore:
    """Storage path: ``<data_dir>/reports.json`` -- list of report dicts."""

    def __init__(self, base_dir: str | Path) -> None:
        self._reports = JsonCollection(Path(base_dir) / "reports.json")

    def create_unless_open(self, report: Report) -> bool:
        """Add *report* unless the reporter already has an open one on the target."""
        with self._reports.transaction() as records:
            for d in records:
                if (
                    d["reporter_id"] == report.reporter_id
                    and d["target_id"] == report.target_id
                    and d.get("target_kind") == report.target_kind.value
                    and d.get("status") == ReportStatus.pending.value
                ):
                    return False
            records.append(report.to_dict())
            return True

    def get(self, report_id: str) -> Optional[Report]:
        d = self._reports.find(report_id)
        return Report.from_dict(d) if d else None

    def list(
        self,
        status: Optional[ReportStatus] = None,
        target_kind: Optional[ReportTarget] = None,
    ) -> list[Report]:
        reports = [Report.from_dict(d) for d in self._reports.load()]
        if status is not None:
            reports = [r for r in reports if r.status is status]
        if target_kind is not None:
            reports = [r for r in reports if r.target_kind is target_kind]
        return reports

    def resolve(
        self,
        report_id: str,
        status: ReportStatus,
        resolver_id: str,
        notes: str,
        now: datetime,
    ) -> Optional[Report]:
        """Close a pending report. Returns None if missing or already closed."""
        with self._reports.transaction() as records:
            for d in records:
                if d["id"] != report_id:
                    continue
                if d.get("status") != ReportStatus.pending.value:
                    return None
                d["status"] = status.value
                d["resolved_by"] = resolver_id
                d["resolved_at"] = now.isoformat()
                d["notes"] = notes
                return Report.from_dict(d)
        return None

    def delete_open_by(self, reporter_id: str) -> int:
        with self._reports.transaction() as records:
            original_len = len(records)
            records[:] = [
                d
                for d in records
                if not (d["reporter_id"] == reporter_id and d.get("status") == ReportStatus.pending.value)
            ]
            return original_len - len(records)
