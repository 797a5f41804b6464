"""Convert OpenShift AsciiDoc sources into compact markdown."""

from __future__ import annotations

import re
from typing import Mapping

_ATTR_RE = re.compile(r"\{([a-zA-Z0-9_-]+)\}")
_XREF_RE = re.compile(r"xref:[^\[]*\[([^\]]*)\]")
_LINK_RE = re.compile(r"link:([^\[]+)\[([^\]]*)\]")
_PASS_RE = re.compile(r"pass:quotes\[([^\]]*)\]")

_ATTR_SKIP_PREFIXES = (
    "ifdef::openshift-origin",
    "ifdef::openshift-rosa",
    "ifdef::openshift-dedicated",
    "ifdef::openshift-rosa-hcp",
    "ifdef::telco-",
)

_MARKDOWN_SKIP_PREFIXES = (
    "ifdef::openshift-origin",
    "ifdef::openshift-rosa",
    "ifdef::openshift-dedicated",
    "ifdef::openshift-rosa-hcp",
)

_METADATA_PREFIXES = (
    ":_mod-docs-content-type:",
    ":context:",
    ":toc:",
    ":imagesdir:",
    ":prewrap",
    ":data-uri",
    ":icons:",
    ":experimental:",
    ":toc-title:",
    "[id=",
    "[role=",
    "[discrete]",
    "include::_attributes/",
)

_ADMONITIONS = frozenset({"[NOTE]", "[IMPORTANT]", "[WARNING]", "[TIP]", "[CAUTION]"})

_HEADINGS = (
    ("== ", "## "),
    ("=== ", "### "),
    ("==== ", "#### "),
    ("===== ", "##### "),
)


def _lines(text: str) -> list[str]:
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [p[:-1] if p.endswith("\r") else p for p in parts]


def build_default_attributes() -> dict[str, str]:
    """Attributes that the documentation build injects on its own."""
    return {
        "product-title": "OpenShift Container Platform",
        "product-version": "4.22",
        "context": "",
    }


def parse_attributes(content: str) -> dict[str, str]:
    """Read ``:name: value`` definitions, skipping blocks for non-default product variants."""
    attrs = build_default_attributes()
    skip_depth = 0

    for line in _lines(content):
        trimmed = line.strip()

        if trimmed.startswith(_ATTR_SKIP_PREFIXES):
            skip_depth += 1
            continue
        if skip_depth > 0:
            if trimmed.startswith("endif::"):
                skip_depth -= 1
            elif trimmed.startswith(("ifdef::", "ifndef::")):
                skip_depth += 1
            continue
        if trimmed.startswith("ifndef::openshift-origin") or trimmed.startswith("endif::"):
            continue

        if trimmed.startswith(":"):
            rest = trimmed[1:]
            colon = rest.find(":")
            if colon >= 0:
                name = rest[:colon].strip()
                value = rest[colon + 1 :].strip()
                if name and not name.startswith("_") and " " not in name:
                    attrs[name] = value

    return attrs


def _is_metadata(trimmed: str) -> bool:
    if trimmed.startswith(_METADATA_PREFIXES) or trimmed == "toc::[]":
        return True
    bracketed = trimmed.startswith("[") and trimmed.endswith("]")
    return bracketed and ("options=" in trimmed or "cols=" in trimmed)


def _flush_table(rows: list[list[str]], out: list[str]) -> None:
    if not rows:
        return
    col_count = max(len(row) for row in rows)
    if col_count == 0:
        return
    for index, row in enumerate(rows):
        cells = row + [""] * (col_count - len(row))
        out.append(f"| {' | '.join(cells)} |")
        if index == 0:
            out.append(f"| {' | '.join(['---'] * col_count)} |")


def to_markdown(content: str, attrs: Mapping[str, str]) -> tuple[str, str]:
    """Render AsciiDoc (includes already resolved) as markdown; return ``(title, markdown)``."""

    def substitute(text: str) -> str:
        result = _ATTR_RE.sub(lambda m: attrs.get(m.group(1), "{" + m.group(1) + "}"), text)
        result = _XREF_RE.sub(r"\1", result)
        result = _LINK_RE.sub(r"[\2](\1)", result)
        result = _PASS_RE.sub(r"\1", result)
        return result.replace("{nbsp}", " ")

    out: list[str] = []
    title = ""
    skip_depth = 0
    in_listing = False
    in_table = False
    table_rows: list[list[str]] = []
    in_admonition = False
    admonition_type = ""
    admonition_lines: list[str] = []

    for line in _lines(content):
        trimmed = line.strip()

        if trimmed.startswith(_MARKDOWN_SKIP_PREFIXES):
            skip_depth += 1
            continue
        if trimmed.startswith("ifndef::openshift-origin") and "," not in trimmed:
            continue
        if trimmed.startswith("ifndef::"):
            if "openshift-origin" in trimmed:
                skip_depth += 1
            continue
        if skip_depth > 0:
            if trimmed.startswith("endif::"):
                skip_depth -= 1
            elif trimmed.startswith(("ifdef::", "ifndef::")):
                skip_depth += 1
            continue
        if trimmed.startswith("endif::"):
            continue

        if _is_metadata(trimmed):
            continue

        if trimmed in ("----", "...."):
            in_listing = not in_listing
            out.append("```")
            continue
        if in_listing:
            out.append(substitute(trimmed))
            continue

        if trimmed in _ADMONITIONS:
            admonition_type = trimmed[1:-1]
            continue
        if trimmed == "====":
            if in_admonition:
                out.extend(f"> **{admonition_type}**: {text}" for text in admonition_lines)
                admonition_lines = []
                in_admonition = False
                admonition_type = ""
            elif admonition_type:
                in_admonition = True
            continue
        if in_admonition:
            text = substitute(trimmed)
            if text:
                admonition_lines.append(text)
            continue

        if trimmed == "|===":
            if in_table:
                _flush_table(table_rows, out)
                table_rows = []
                in_table = False
            else:
                in_table = True
            continue
        if in_table:
            if trimmed.startswith("|"):
                cells = [substitute(cell.strip()) for cell in trimmed.split("|")[1:]]
                if cells:
                    table_rows.append(cells)
            continue

        if trimmed.startswith("= "):
            heading = substitute(trimmed[2:])
            if not title:
                title = heading
            out.append(f"# {heading}")
            continue
        heading_line = next(
            (
                f"{marker}{substitute(trimmed[len(prefix):])}"
                for prefix, marker in _HEADINGS
                if trimmed.startswith(prefix)
            ),
            None,
        )
        if heading_line is not None:
            out.append(heading_line)
            continue

        if trimmed.startswith(".") and not trimmed.startswith("..") and len(trimmed) > 1:
            second = trimmed[1]
            if second.isupper() or second == "{":
                out.append(f"**{substitute(trimmed[1:])}**")
                continue

        if trimmed.startswith("* "):
            out.append(f"- {substitute(trimmed[2:])}")
            continue
        if trimmed.startswith("** "):
            out.append(f"  - {substitute(trimmed[3:])}")
            continue
        if trimmed.startswith(". ") and len(trimmed) > 2:
            out.append(f"1. {substitute(trimmed[2:])}")
            continue

        if trimmed == "+":
            continue
        if trimmed.startswith(("image:", "//", "include::")):
            continue

        if not trimmed:
            if out and out[-1]:
                out.append("")
            continue

        out.append(substitute(trimmed))

    result: list[str] = []
    prev_blank = False
    for text in out:
        if not text:
            if not prev_blank:
                result.append(text)
            prev_blank = True
        else:
            result.append(text)
            prev_blank = False

    while result and not result[-1]:
        result.pop()

    return title, "\n".join(result)