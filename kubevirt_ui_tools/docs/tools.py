"""Documentation tools: list, fetch and search OpenShift Virtualization docs."""

from __future__ import annotations

from typing import Any, Mapping

from kubevirt_ui_tools.docs import index
from kubevirt_ui_tools.docs.cache import DocsCache
from kubevirt_ui_tools.docs.fetcher import DocsFetcher, FetchError
from kubevirt_ui_tools.docs.index import SECTIONS


class DocsToolError(Exception):
    """A documentation tool call could not be completed."""


def all_tools() -> list[dict]:
    """Descriptions and input schemas of the documentation tools."""
    return [
        {
            "name": "list_product_doc_sections",
            "description": (
                "List available OpenShift Virtualization documentation sections from the "
                "openshift-docs GitHub repository. Shows curated index with cache status and tags."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "filter": {
                        "type": "string",
                        "description": (
                            "Optional keyword filter on title, id, or tags "
                            "(e.g. 'networking', 'storage', 'migration')"
                        ),
                    }
                },
            },
        },
        {
            "name": "fetch_product_doc",
            "description": (
                "Fetch an OpenShift Virtualization documentation page from the openshift-docs "
                "GitHub repository (openshift/openshift-docs main branch, virt/ directory). "
                "Converts AsciiDoc to compact markdown with include resolution and attribute "
                "substitution. Results are cached locally for 7 days."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "section": {
                        "type": "string",
                        "description": (
                            "Section ID from the curated index (e.g. 'about', "
                            "'networking-overview', 'storage-overview'). Use "
                            "list_product_doc_sections to see available IDs."
                        ),
                    },
                    "path": {
                        "type": "string",
                        "description": (
                            "Specific repo path for files not in the curated index (e.g. "
                            "'virt/storage/virt-configuring-local-storage-with-hpp.adoc')"
                        ),
                    },
                    "force_refresh": {
                        "type": "boolean",
                        "description": "Force re-fetch even if cached. Defaults to false.",
                    },
                },
            },
        },
        {
            "name": "search_product_docs",
            "description": (
                "Full-text search across all cached OpenShift Virtualization documentation "
                "pages. Returns matching pages with surrounding context lines. Fetch pages "
                "first using fetch_product_doc if the cache is empty."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Search terms (space-separated, all must match)",
                    }
                },
                "required": ["query"],
            },
        },
    ]


def _str_param(params: Mapping[str, Any], key: str) -> str | None:
    value = params.get(key)
    return value if isinstance(value, str) else None


def _strip_virt(directory: str) -> str:
    while directory.startswith("virt/"):
        directory = directory[len("virt/") :]
    return directory


def list_sections(params: Mapping[str, Any], cache: DocsCache) -> str:
    """Render the curated index, optionally filtered, with each section's cache status."""
    text_filter = _str_param(params, "filter") or ""
    sections = list(SECTIONS) if not text_filter else index.search_sections(text_filter)

    parts = [
        "# OpenShift Virtualization Documentation Index\n",
        "Source: openshift/openshift-docs (main branch)\n",
        f"Sections: {len(SECTIONS)} (showing {len(sections)})\n\n",
    ]

    current_dir = ""
    for section in sections:
        dir_label = _strip_virt(section.dir)
        if dir_label != current_dir:
            current_dir = dir_label
            parts.append(f"\n## {dir_label}\n\n")

        page = cache.pages.get(section.id)
        if page is None:
            status = "not cached"
        elif page.is_stale():
            status = "stale"
        else:
            status = "cached"

        parts.append(
            f"- **{section.title}** (`{section.id}`) — [{status}] tags: "
            f"{', '.join(section.tags)}\n"
        )

    parts.append(f"\n---\nTotal cached pages: {len(cache.pages)}\n")
    parts.append("Use `fetch_product_doc` with a section ID to fetch and cache a page.\n")
    return "".join(parts)


def _render_page(page) -> str:
    return f"# {page.title}\nSource: `{page.repo_path}`\n\n{page.content}"


def fetch_doc(params: Mapping[str, Any], fetcher: DocsFetcher) -> str:
    """Fetch a page by section id or repository path and return it as markdown."""
    section_id = _str_param(params, "section")
    path = _str_param(params, "path")
    force = params.get("force_refresh")
    force = force if isinstance(force, bool) else False

    if section_id is None and path is None:
        raise DocsToolError(
            "At least one of 'section' or 'path' is required. "
            "Use list_product_doc_sections to see available section IDs."
        )

    if section_id is not None:
        section = index.find_section(section_id)
        if section is None:
            raise DocsToolError(
                f"Unknown section ID '{section_id}'. "
                "Use list_product_doc_sections to see available IDs."
            )
        try:
            page = fetcher.fetch_and_process(section.dir, section.file, section.id, force)
        except FetchError as exc:
            raise DocsToolError(f"Failed to fetch section '{section_id}': {exc}") from exc
        return _render_page(page)

    try:
        page = fetcher.fetch_arbitrary_path(path, force)
    except FetchError as exc:
        raise DocsToolError(f"Failed to fetch '{path}': {exc}") from exc
    return _render_page(page)


def search_docs(params: Mapping[str, Any], cache: DocsCache) -> str:
    """Search cached pages and render the matches with their snippets."""
    query = _str_param(params, "query")
    if query is None:
        raise DocsToolError("Missing required parameter: query")
    if not cache.pages:
        raise DocsToolError(
            "No documentation pages cached yet. "
            "Use fetch_product_doc to cache pages first, then search."
        )

    hits = cache.search(query)
    if not hits:
        return (
            f"No matches for '{query}' across {len(cache.pages)} cached pages.\n\n"
            "Tip: fetch more sections with fetch_product_doc to expand the searchable content."
        )

    parts = [
        f"# Search: '{query}'\nMatches in {len(hits)} of {len(cache.pages)} cached pages\n\n"
    ]
    for hit in hits:
        parts.append(f"## {hit.title} (`{hit.section_id}`)\n\n")
        parts.extend(f"```\n{snippet}\n```\n\n" for snippet in hit.snippets)
    return "".join(parts)


def dispatch(name: str, params: Mapping[str, Any], cache: DocsCache, fetcher: DocsFetcher) -> str:
    """Run the documentation tool called ``name``."""
    if name == "list_product_doc_sections":
        return list_sections(params, cache)
    if name == "fetch_product_doc":
        return fetch_doc(params, fetcher)
    if name == "search_product_docs":
        return search_docs(params, cache)
    raise DocsToolError(f"Unknown docs tool: '{name}'")