"""Live catalog of published titles and chapters.

The moderation pipeline only needs :meth:`Catalog.materialize`; the JSON
implementation here is what the CLI and web app wire in by default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

from mangafas.content.models import ContentKind
from mangafas.storage import Clock, JsonCollection, new_id, utcnow


class CatalogError(ValueError):
    """The payload cannot be published (e.g. chapter for a missing title)."""


class Catalog(Protocol):
    def materialize(self, kind: ContentKind, payload: dict) -> str:
        """Publish *payload* and return the new content id."""
        ...


class JsonCatalog:
    """File-based catalog.

    Storage path: ``<data_dir>/catalog/`` with:
    - ``titles.json`` -- list of title dicts
    - ``chapters.json`` -- list of chapter dicts
    """

    def __init__(self, base_dir: str | Path, clock: Clock = utcnow) -> None:
        base = Path(base_dir) / "catalog"
        self._titles = JsonCollection(base / "titles.json")
        self._chapters = JsonCollection(base / "chapters.json")
        self._clock = clock

    def materialize(self, kind: ContentKind, payload: dict) -> str:
        kind = ContentKind(kind)
        now = self._clock().isoformat()
        if kind is ContentKind.title:
            if not str(payload.get("title", "")).strip():
                raise CatalogError("A title needs a non-empty 'title'")
            record = {
                **payload,
                "id": new_id("title"),
                "views": 0,
                "chapters_count": 0,
                "created_at": now,
                "updated_at": now,
            }
            with self._titles.transaction() as titles:
                titles.append(record)
            return record["id"]

        title_id = payload.get("title_id", "")
        record = {**payload, "id": new_id("chapter"), "created_at": now}
        with self._titles.transaction() as titles:
            title = next((t for t in titles if t["id"] == title_id), None)
            if title is None:
                raise CatalogError(f"Title '{title_id}' not found")
            with self._chapters.transaction() as chapters:
                chapters.append(record)
                title["chapters_count"] = sum(1 for c in chapters if c.get("title_id") == title_id)
            title["updated_at"] = now
        return record["id"]

    def get_title(self, title_id: str) -> Optional[dict]:
        return self._titles.find(title_id)

    def list_titles(self) -> list[dict]:
        return self._titles.load()

    def chapters_of(self, title_id: str) -> list[dict]:
        chapters = [c for c in self._chapters.load() if c.get("title_id") == title_id]
        return sorted(chapters, key=lambda c: c.get("number", 0))

    def uploads_by(self, user_id: str) -> tuple[int, int]:
        """Return ``(titles, chapters)`` published from *user_id*'s uploads."""
        titles = sum(1 for t in self._titles.load() if t.get("uploaded_by") == user_id)
        chapters = sum(1 for c in self._chapters.load() if c.get("uploaded_by") == user_id)
        return titles, chapters
