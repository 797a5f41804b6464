"""Coverage questions answered from a scanned Playwright project."""

from __future__ import annotations

from pathlib import Path

from kubevirt_ui_tools.coverage.scanner import ProjectScanner, Visibility

FEATURE_ALIASES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("virtual-machines", ("virtualmachines", "vm-", "virtual-machine")),
    (
        "vm-detail",
        ("virtual-machine-detail", "vm-tabs", "vm-overview", "vm-console", "vm-configuration"),
    ),
    ("vm-actions", ("vm-lifecycle", "vm-resource", "vm-migration")),
    ("bootable-volumes", ("bootable-volume", "bootable_volume")),
    ("catalog", ("catalog",)),
    ("templates", ("template",)),
    ("instance-types", ("instancetype", "instance-type")),
    ("overview", ("overview",)),
    ("networking", ("network", "nad", "udn", "nnc")),
    ("migration-policies", ("migration-polic", "migrationpolic")),
    ("checkups", ("checkup",)),
    ("quotas", ("quota", "aaq")),
    ("settings", ("cluster-settings", "user-settings")),
    ("storage-migration", ("storage_migration", "storage-migration")),
)


def feature_matches(text: str, feature: str) -> bool:
    """Tell whether ``text`` mentions ``feature`` directly or through a known alias."""
    lower = text.lower()
    feature_lower = feature.lower()
    if feature_lower in lower:
        return True
    for key, aliases in FEATURE_ALIASES:
        if key == feature_lower or feature_lower in aliases:
            if key in lower or any(alias in lower for alias in aliases):
                return True
    return False


def _to_camel_case(text: str) -> str:
    return text[:1].lower() + text[1:]


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def _unique(items) -> list:
    seen: list = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def get_coverage_for_feature(scanner: ProjectScanner, feature: str) -> dict:
    """Collect the specs, step drivers, page objects, docs and Jira ids of a feature."""
    root = scanner.playwright_root
    feature_lower = feature.lower()
    tests = [
        t
        for t in scanner.scan_test_files()
        if feature_matches(t.relative_path, feature)
        or any(feature_matches(d, feature) for d in t.describe_titles)
        or feature_lower in t.feature.lower()
        or any(feature_matches(tag, feature) for tag in t.tags)
    ]

    used_sd_names = {name for t in tests for name in t.step_drivers_used}

    related_step_drivers = _unique(
        _relative(m.file_path, root)
        for m in scanner.scan_step_driver_methods()
        if _to_camel_case(m.class_name.replace("StepDriver", "")) in used_sd_names
    )

    related_page_objects = _unique(
        _relative(m.file_path, root)
        for m in scanner.scan_page_object_methods()
        if feature_matches(m.class_name, feature) or feature_matches(str(m.file_path), feature)
    )

    return {
        "feature": feature,
        "totalTests": sum(len(t.test_names) for t in tests),
        "specFiles": [
            {
                "path": t.relative_path,
                "tier": t.tier,
                "tests": list(t.test_names),
                "jiraIds": list(t.jira_ids),
                "tags": list(t.tags),
            }
            for t in tests
        ],
        "stepDrivers": related_step_drivers,
        "pageObjects": related_page_objects,
        "docs": scanner.scan_docs_for_feature(feature),
        "jiraIds": sorted({jira for t in tests for jira in t.jira_ids}),
        "stepDriversUsed": sorted(used_sd_names),
    }


def _coverage_percent(total: int, missing: int) -> int:
    return (total - missing) * 100 // total if total else 100


def _public_methods(methods):
    return [m for m in methods if m.visibility is Visibility.PUBLIC and not m.name.startswith("_")]


def get_untested_step_driver_methods(scanner: ProjectScanner) -> dict:
    """List public step driver methods that no other file calls."""
    root = scanner.playwright_root
    methods = _public_methods(scanner.scan_step_driver_methods())
    search_dirs = [scanner.tests_dir, scanner.step_drivers_dir]

    untested = []
    for method in methods:
        self_file = _relative(method.file_path, root)
        refs = scanner.find_method_references(method.name, search_dirs)
        if all(ref == self_file for ref in refs):
            untested.append(
                {
                    "method": method.name,
                    "className": method.class_name,
                    "file": self_file,
                    "line": method.line_number,
                }
            )

    return {
        "totalPublicMethods": len(methods),
        "untestedCount": len(untested),
        "coveragePercent": _coverage_percent(len(methods), len(untested)),
        "untestedMethods": untested,
    }


def get_orphan_page_object_methods(scanner: ProjectScanner) -> dict:
    """List public page object methods never referenced by a step driver or test."""
    root = scanner.playwright_root
    methods = _public_methods(scanner.scan_page_object_methods())
    search_dirs = [scanner.step_drivers_dir, scanner.tests_dir]

    orphans = [
        {
            "method": method.name,
            "className": method.class_name,
            "file": _relative(method.file_path, root),
            "line": method.line_number,
        }
        for method in methods
        if not scanner.find_method_references(method.name, search_dirs)
    ]

    return {
        "totalPublicMethods": len(methods),
        "orphanCount": len(orphans),
        "coveragePercent": _coverage_percent(len(methods), len(orphans)),
        "orphanMethods": orphans,
    }


def get_tier_distribution(scanner: ProjectScanner) -> dict:
    """Count files, tests and Jira ids per test tier."""
    tiers: dict[str, dict] = {}
    for test in scanner.scan_test_files():
        entry = tiers.setdefault(
            test.tier, {"fileCount": 0, "testCount": 0, "jiraIds": [], "files": []}
        )
        entry["fileCount"] += 1
        entry["testCount"] += len(test.test_names)
        for jira in test.jira_ids:
            if jira not in entry["jiraIds"]:
                entry["jiraIds"].append(jira)
        entry["files"].append(test.relative_path)

    return {
        "totalFiles": sum(t["fileCount"] for t in tiers.values()),
        "totalTests": sum(t["testCount"] for t in tiers.values()),
        "tiers": tiers,
    }


def find_tests_by_jira(scanner: ProjectScanner, ticket_id: str) -> dict:
    """Find spec files annotated with the given Jira ticket."""
    normalized = ticket_id.upper().replace(" ", "")
    matches = [
        {
            "file": t.relative_path,
            "tier": t.tier,
            "feature": t.feature,
            "tests": list(t.test_names),
            "jiraIds": list(t.jira_ids),
            "tags": list(t.tags),
        }
        for t in scanner.scan_test_files()
        if any(jira.upper() == normalized for jira in t.jira_ids)
    ]

    if not matches:
        return {
            "ticketId": normalized,
            "found": False,
            "message": f"No tests found for {normalized}",
            "tests": [],
        }
    return {"ticketId": normalized, "found": True, "tests": matches}