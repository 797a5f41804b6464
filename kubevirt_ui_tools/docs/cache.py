"""Local JSON cache of fetched documentation pages."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

log = logging.getLogger(__name__)

_MAX_AGE = timedelta(days=7)
_MAX_SNIPPETS = 5
_FRACTION_RE = re.compile(r"\.(\d+)")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _format_ts(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_ts(text: str) -> datetime:
    text = text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _lines(text: str) -> list[str]:
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [p[:-1] if p.endswith("\r") else p for p in parts]


@dataclass
class DocPage:
    """A documentation page converted to markdown."""

    section_id: str
    title: str
    repo_path: str
    content: str
    fetched_at: datetime

    def is_stale(self) -> bool:
        """A page older than seven days is stale."""
        return _now() - self.fetched_at >= _MAX_AGE

    def to_dict(self) -> dict:
        return {
            "section_id": self.section_id,
            "title": self.title,
            "repo_path": self.repo_path,
            "content": self.content,
            "fetched_at": _format_ts(self.fetched_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DocPage":
        return cls(
            section_id=str(data["section_id"]),
            title=str(data["title"]),
            repo_path=str(data["repo_path"]),
            content=str(data["content"]),
            fetched_at=_parse_ts(data["fetched_at"]),
        )


@dataclass
class SearchHit:
    """A page that matched a search, with context snippets."""

    section_id: str
    title: str
    snippets: list[str] = field(default_factory=list)


@dataclass
class DocsCache:
    """Cached pages plus the AsciiDoc attributes used to render them."""

    pages: dict[str, DocPage] = field(default_factory=dict)
    attributes: dict[str, str] = field(default_factory=dict)
    attributes_fetched_at: datetime | None = None

    @classmethod
    def load(cls, path) -> "DocsCache":
        """Read the cache from ``path``; start empty if it is missing or unreadable."""
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError:
            log.info("No existing docs cache at %s, starting fresh", path)
            return cls()
        try:
            data = json.loads(raw)
            fetched = data.get("attributes_fetched_at")
            cache = cls(
                pages={key: DocPage.from_dict(value) for key, value in data["pages"].items()},
                attributes={str(k): str(v) for k, v in data["attributes"].items()},
                attributes_fetched_at=_parse_ts(fetched) if fetched is not None else None,
            )
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            log.warning("Failed to parse docs-cache.json (%s), starting fresh", exc)
            return cls()
        log.info("Loaded docs cache from %s", path)
        return cache

    def to_dict(self) -> dict:
        return {
            "pages": {key: page.to_dict() for key, page in self.pages.items()},
            "attributes": dict(self.attributes),
            "attributes_fetched_at": (
                _format_ts(self.attributes_fetched_at)
                if self.attributes_fetched_at is not None
                else None
            ),
        }

    def save(self, path) -> None:
        """Write the cache to ``path``; failures are logged, not raised."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            log.warning("Could not create docs cache dir: %s", exc)
            return
        try:
            path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            log.warning("Failed to write docs-cache.json: %s", exc)
            return
        log.info("Docs cache saved to %s (%d pages)", path, len(self.pages))

    def attributes_stale(self) -> bool:
        """Attributes never fetched, or fetched seven or more days ago, are stale."""
        if self.attributes_fetched_at is None:
            return True
        return _now() - self.attributes_fetched_at >= _MAX_AGE

    def search(self, query: str) -> list[SearchHit]:
        """Return pages containing every query term, sorted by section id."""
        terms = [term.lower() for term in query.split()]
        if not terms:
            return []

        hits: list[SearchHit] = []
        for page in self.pages.values():
            content_lower = page.content.lower()
            title_lower = page.title.lower()
            if not all(t in content_lower or t in title_lower for t in terms):
                continue

            lines = _lines(page.content)
            snippets: list[str] = []
            for i, line in enumerate(lines):
                line_lower = line.lower()
                if any(t in line_lower for t in terms):
                    snippets.append("\n".join(lines[max(i - 1, 0) : i + 2]))
                    if len(snippets) >= _MAX_SNIPPETS:
                        break

            hits.append(SearchHit(section_id=page.section_id, title=page.title, snippets=snippets))

        hits.sort(key=lambda hit: hit.section_id)
        return hits