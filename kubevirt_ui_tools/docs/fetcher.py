"""Fetch OpenShift documentation sources and render them into the docs cache."""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import requests

from kubevirt_ui_tools.docs import asciidoc
from kubevirt_ui_tools.docs.cache import DocPage, DocsCache

log = logging.getLogger(__name__)

RAW_BASE = "https://raw.githubusercontent.com/openshift/openshift-docs/main"
ATTRS_PATH = "_attributes/common-attributes.adoc"

_TIMEOUT_SECONDS = 30
_INCLUDE_RE = re.compile(r"^include::(modules/[^\[]+|snippets/[^\[]+)\[([^\]]*)\]")
_LEVELOFFSET_RE = re.compile(r"leveloffset=\+?(\d+)")


class FetchError(Exception):
    """A documentation source could not be downloaded."""


def _lines(text: str) -> list[str]:
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [p[:-1] if p.endswith("\r") else p for p in parts]


def _section_id_for_path(path: str) -> str:
    while path.startswith("virt/"):
        path = path[len("virt/") :]
    return path.replace("/", "-").replace(".adoc", "")


class DocsFetcher:
    """Downloads AsciiDoc assemblies, resolves includes and stores markdown in a cache."""

    def __init__(self, cache: DocsCache, cache_path, session=None) -> None:
        self.cache = cache
        self.cache_path = Path(cache_path)
        self.session = session if session is not None else requests.Session()

    def _merged_cached_attributes(self) -> dict[str, str]:
        merged = asciidoc.build_default_attributes()
        merged.update(self.cache.attributes)
        return merged

    def ensure_attributes(self) -> dict[str, str]:
        """Return fresh attributes, downloading them again when the cached set is stale."""
        if not self.cache.attributes_stale() and self.cache.attributes:
            return self._merged_cached_attributes()

        url = f"{RAW_BASE}/{ATTRS_PATH}"
        log.debug("Fetching attributes from %s", url)
        try:
            body = self.session.get(url, timeout=_TIMEOUT_SECONDS).text
        except requests.RequestException as exc:
            log.warning("Failed to fetch attributes: %s", exc)
            return self._merged_cached_attributes()

        attrs = asciidoc.parse_attributes(body)
        self.cache.attributes = dict(attrs)
        self.cache.attributes_fetched_at = datetime.now(timezone.utc)
        self.cache.save(self.cache_path)
        return attrs

    def _fetch_raw(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=_TIMEOUT_SECONDS)
        except requests.RequestException as exc:
            raise FetchError(f"HTTP error fetching {url}: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise FetchError(f"HTTP {response.status_code} {response.reason} for {url}")
        try:
            return response.text
        except requests.RequestException as exc:
            raise FetchError(f"Failed to read body from {url}: {exc}") from exc

    def resolve_includes(self, content: str) -> str:
        """Replace ``include::modules/...`` and ``include::snippets/...`` lines with their files."""
        result: list[str] = []
        for line in _lines(content):
            match = _INCLUDE_RE.match(line.strip())
            if match is None:
                result.append(line)
                continue

            module_path, options = match.group(1), match.group(2)
            offset_match = _LEVELOFFSET_RE.search(options)
            offset = int(offset_match.group(1)) if offset_match else 0

            try:
                module_content = self._fetch_raw(f"{RAW_BASE}/{module_path}")
            except FetchError as exc:
                log.debug("Could not resolve include %s: %s", module_path, exc)
                continue

            prefix = "=" * offset
            for module_line in _lines(module_content):
                if offset > 0 and module_line.startswith("=") and " " in module_line:
                    result.append(prefix + module_line)
                else:
                    result.append(module_line)

        return "\n".join(result)

    def _cached_fresh(self, section_id: str, force: bool) -> DocPage | None:
        if force:
            return None
        page = self.cache.pages.get(section_id)
        if page is not None and not page.is_stale():
            return replace(page)
        return None

    def _render(self, repo_path: str, section_id: str) -> DocPage:
        attrs = self.ensure_attributes()
        url = f"{RAW_BASE}/{repo_path}"
        log.debug("Fetching %s", url)
        assembly = self._fetch_raw(url)
        resolved = self.resolve_includes(assembly)
        title, content = asciidoc.to_markdown(resolved, attrs)

        page = DocPage(
            section_id=section_id,
            title=title or section_id,
            repo_path=repo_path,
            content=content,
            fetched_at=datetime.now(timezone.utc),
        )
        self.cache.pages[section_id] = replace(page)
        self.cache.save(self.cache_path)
        return page

    def fetch_and_process(self, directory: str, file: str, section_id: str, force: bool = False) -> DocPage:
        """Return the rendered page of an indexed section, from the cache when it is fresh."""
        cached = self._cached_fresh(section_id, force)
        if cached is not None:
            return cached
        return self._render(f"{directory}/{file}", section_id)

    def fetch_arbitrary_path(self, path: str, force: bool = False) -> DocPage:
        """Return the rendered page of any repository path, from the cache when it is fresh."""
        section_id = _section_id_for_path(path)
        cached = self._cached_fresh(section_id, force)
        if cached is not None:
            return cached
        return self._render(path, section_id)