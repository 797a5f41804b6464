"""Scan a Playwright project for test files, page objects and step drivers."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable

_TIER_RE = re.compile(r"tests/(gating|tier1|tier2|fleet-virtualization-acm)/")
_JIRA_RE = re.compile(r"ID\((CNV-\d+)\)")
_TEST_NAME_RE = re.compile(r"""test\(\s*['"`]([^'"`]+)['"`]""")
_DESCRIBE_RE = re.compile(r"""test\.describe(?:\.serial)?\(\s*['"`]([^'"`]+)['"`]""")
_TAG_RE = re.compile(r"tag:\s*\[([^\]]+)\]")
_STEPS_RE = re.compile(r"steps\.(\w+)\.")

_CLASS_RE = re.compile(r"(?:export\s+)?(?:default\s+)?class\s+(\w+)")
_METHOD_RE = re.compile(r"^\s*(public\s+|protected\s+|private\s+)?(async\s+)?(\w+)\s*\(")
_ARROW_RE = re.compile(
    r"^\s*(public\s+|protected\s+|private\s+)?(?:readonly\s+)?(\w+)\s*=\s*(async\s+)?\("
)
_GETTER_RE = re.compile(r"^\s*(public\s+|protected\s+|private\s+)?get\s+(\w+)\s*\(\)")

_SKIP_NAMES = frozenset(
    {"constructor", "if", "for", "while", "switch", "catch", "return", "throw", "await", "try"}
)


class Visibility(Enum):
    """Access modifier of a class member."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


@dataclass
class TestFileInfo:
    """What was found in one spec file."""

    __test__ = False

    file_path: Path
    relative_path: str
    tier: str
    feature: str
    jira_ids: list[str] = field(default_factory=list)
    test_names: list[str] = field(default_factory=list)
    describe_titles: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    step_drivers_used: list[str] = field(default_factory=list)


@dataclass
class MethodInfo:
    """A method declared in a page object or step driver class."""

    name: str
    file_path: Path
    class_name: str
    line_number: int
    is_async: bool
    visibility: Visibility


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def _lines(content: str) -> list[str]:
    return [line[:-1] if line.endswith("\r") else line for line in content.split("\n")]


def walk_dir(directory, ext: str) -> list[Path]:
    """Return files under ``directory`` whose names end with ``ext``, skipping node_modules."""
    root = Path(directory)
    if not root.exists():
        return []

    def accepted(path: Path) -> bool:
        return (
            path.name.endswith(ext)
            and not path.is_symlink()
            and path.is_file()
            and "node_modules" not in str(path)
        )

    if root.is_file():
        return [root] if accepted(root) else []

    found: list[Path] = []
    for current, dirnames, filenames in os.walk(root, followlinks=False):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(current) / name
            if accepted(path):
                found.append(path)
    return found


def parse_visibility(text: str) -> Visibility:
    """Map a modifier keyword to a Visibility; anything else is public."""
    if "private" in text:
        return Visibility.PRIVATE
    if "protected" in text:
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def _strip_spec_suffix(stem: str) -> str:
    while stem.endswith(".spec"):
        stem = stem[: -len(".spec")]
    return stem


def parse_test_file(file_path, playwright_root) -> TestFileInfo:
    """Extract tier, feature, Jira ids, test names, describes, tags and step drivers."""
    path = Path(file_path)
    content = _read_text(path) or ""
    relative_path = _relative(path, Path(playwright_root))

    tier_match = _TIER_RE.search(relative_path)
    tier = tier_match.group(1) if tier_match else "unknown"

    parts = relative_path.split("/")
    if len(parts) > 3:
        feature = "/".join(parts[2:-1])
    else:
        feature = _strip_spec_suffix(path.stem)

    tags = [
        tag
        for match in _TAG_RE.finditer(content)
        for tag in (piece.strip().strip("'\"") for piece in match.group(1).split(","))
        if tag
    ]

    return TestFileInfo(
        file_path=path,
        relative_path=relative_path,
        tier=tier,
        feature=feature,
        jira_ids=_JIRA_RE.findall(content),
        test_names=_TEST_NAME_RE.findall(content),
        describe_titles=_DESCRIBE_RE.findall(content),
        tags=tags,
        step_drivers_used=sorted(set(_STEPS_RE.findall(content))),
    )


def parse_class_methods(file_path) -> list[MethodInfo]:
    """List the methods, arrow-function properties and getters of the class in a file."""
    path = Path(file_path)
    content = _read_text(path)
    if content is None:
        return []

    class_match = _CLASS_RE.search(content)
    class_name = class_match.group(1) if class_match else (path.stem or "Unknown")

    def visibility_of(match: re.Match) -> Visibility:
        modifier = match.group(1)
        return parse_visibility(modifier.strip() if modifier else "public")

    methods: list[MethodInfo] = []
    for line_number, line in enumerate(_lines(content), start=1):
        match = _METHOD_RE.match(line)
        if match:
            name = match.group(3)
            if name not in _SKIP_NAMES:
                methods.append(
                    MethodInfo(
                        name=name,
                        file_path=path,
                        class_name=class_name,
                        line_number=line_number,
                        is_async=match.group(2) is not None,
                        visibility=visibility_of(match),
                    )
                )
            continue

        match = _ARROW_RE.match(line)
        if match:
            methods.append(
                MethodInfo(
                    name=match.group(2),
                    file_path=path,
                    class_name=class_name,
                    line_number=line_number,
                    is_async=match.group(3) is not None,
                    visibility=visibility_of(match),
                )
            )
            continue

        match = _GETTER_RE.match(line)
        if match:
            methods.append(
                MethodInfo(
                    name=match.group(2),
                    file_path=path,
                    class_name=class_name,
                    line_number=line_number,
                    is_async=False,
                    visibility=visibility_of(match),
                )
            )
    return methods


def _scan_methods_in_dir(directory: Path) -> list[MethodInfo]:
    return [method for path in walk_dir(directory, ".ts") for method in parse_class_methods(path)]


class ProjectScanner:
    """Caching scanner over a Playwright project root."""

    def __init__(self, playwright_root) -> None:
        self.playwright_root = Path(playwright_root)
        self.tests_dir = self.playwright_root / "tests"
        self.page_objects_dir = self.playwright_root / "src" / "page-objects"
        self.step_drivers_dir = self.playwright_root / "src" / "step-drivers"
        self.docs_dir = self.playwright_root / "docs"
        self._test_files: list[TestFileInfo] | None = None
        self._po_methods: list[MethodInfo] | None = None
        self._sd_methods: list[MethodInfo] | None = None

    def invalidate_cache(self) -> None:
        """Forget every cached scan result."""
        self._test_files = None
        self._po_methods = None
        self._sd_methods = None

    def scan_test_files(self) -> list[TestFileInfo]:
        """Parse every ``.spec.ts`` file under the tests directory."""
        if self._test_files is None:
            self._test_files = [
                parse_test_file(path, self.playwright_root)
                for path in walk_dir(self.tests_dir, ".spec.ts")
            ]
        return self._test_files

    def scan_page_object_methods(self) -> list[MethodInfo]:
        """Parse the methods of every page object."""
        if self._po_methods is None:
            self._po_methods = _scan_methods_in_dir(self.page_objects_dir)
        return self._po_methods

    def scan_step_driver_methods(self) -> list[MethodInfo]:
        """Parse the methods of every step driver."""
        if self._sd_methods is None:
            self._sd_methods = _scan_methods_in_dir(self.step_drivers_dir)
        return self._sd_methods

    def find_method_references(self, method_name: str, search_dirs: Iterable) -> list[str]:
        """Return relative paths of ``.ts`` files that call ``.method_name(``."""
        pattern = re.compile(r"\." + re.escape(method_name) + r"\s*\(")
        refs: list[str] = []
        for directory in search_dirs:
            for path in walk_dir(directory, ".ts"):
                content = _read_text(path)
                if content is not None and pattern.search(content):
                    refs.append(_relative(path, self.playwright_root))
        return refs

    def scan_docs_for_feature(self, feature: str) -> list[str]:
        """Return relative paths of markdown docs whose path mentions the feature."""
        if not self.docs_dir.exists():
            return []
        feature_lower = feature.lower()
        matches = []
        for path in walk_dir(self.docs_dir, ".md"):
            rel = _relative(path, self.playwright_root)
            if feature_lower in rel.lower():
                matches.append(rel)
        return matches