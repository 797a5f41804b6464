from pathlib import Path

import pytest

from kubevirt_ui_tools.coverage.scanner import (
    ProjectScanner,
    Visibility,
    parse_class_methods,
    parse_test_file,
    parse_visibility,
    walk_dir,
)


def write_file(root: Path, rel: str, content: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# parse_test_file


def test_parses_tier_from_path(tmp_path):
    path = write_file(
        tmp_path,
        "tests/tier1/checkups/checkups.spec.ts",
        "test.describe('Checkups', () => { test('ID(CNV-12345) should work', async () => {}); });",
    )
    info = parse_test_file(path, tmp_path)
    assert info.tier == "tier1"
    assert info.jira_ids == ["CNV-12345"]
    assert info.feature == "checkups"
    assert info.relative_path == "tests/tier1/checkups/checkups.spec.ts"
    assert info.test_names == ["ID(CNV-12345) should work"]


def test_parses_multiple_jira_ids(tmp_path):
    path = write_file(
        tmp_path,
        "tests/tier2/vm/vm-actions.spec.ts",
        "// ID(CNV-11111) and ID(CNV-22222) test('should do something', async () => {});",
    )
    info = parse_test_file(path, tmp_path)
    assert info.jira_ids == ["CNV-11111", "CNV-22222"]
    assert info.tier == "tier2"


def test_parses_describe_titles(tmp_path):
    path = write_file(
        tmp_path,
        "tests/gating/overview/overview.spec.ts",
        "test.describe('Virtualization Overview', () => {\n"
        "  test.describe.serial('nested', () => {});\n"
        "});",
    )
    info = parse_test_file(path, tmp_path)
    assert "Virtualization Overview" in info.describe_titles
    assert "nested" in info.describe_titles


def test_parses_tags(tmp_path):
    path = write_file(
        tmp_path,
        "tests/tier1/vm/vm.spec.ts",
        "test('my test', { tag: ['@tier1', '@nonpriv'] }, async () => {});",
    )
    info = parse_test_file(path, tmp_path)
    assert "@tier1" in info.tags
    assert "@nonpriv" in info.tags


def test_unknown_tier_for_non_standard_path(tmp_path):
    path = write_file(tmp_path, "some-other/path.spec.ts", "")
    info = parse_test_file(path, tmp_path)
    assert info.tier == "unknown"
    assert info.feature == "path"


def test_step_drivers_used_sorted_and_unique(tmp_path):
    path = write_file(
        tmp_path,
        "tests/tier1/vm/vm.spec.ts",
        "steps.vm.start(); steps.catalog.open(); steps.vm.stop();",
    )
    info = parse_test_file(path, tmp_path)
    assert info.step_drivers_used == ["catalog", "vm"]


def test_nested_feature_directories(tmp_path):
    path = write_file(tmp_path, "tests/tier1/vm/actions/start.spec.ts", "")
    info = parse_test_file(path, tmp_path)
    assert info.feature == "vm/actions"


# parse_class_methods


def test_extracts_public_method(tmp_path):
    path = write_file(
        tmp_path,
        "src/page-objects/vm-page.ts",
        "export default class VirtualMachinePage {\n"
        "  async clickCreateVm() {}\n"
        "  private internalHelper() {}\n"
        "  protected sharedHelper() {}\n"
        "}",
    )
    methods = parse_class_methods(path)
    names = [m.name for m in methods]
    assert "clickCreateVm" in names
    assert "internalHelper" in names
    assert "sharedHelper" in names
    click = next(m for m in methods if m.name == "clickCreateVm")
    assert click.visibility == Visibility.PUBLIC
    assert click.is_async
    assert click.class_name == "VirtualMachinePage"
    assert click.line_number == 2
    internal = next(m for m in methods if m.name == "internalHelper")
    assert internal.visibility == Visibility.PRIVATE
    shared = next(m for m in methods if m.name == "sharedHelper")
    assert shared.visibility == Visibility.PROTECTED


def test_skips_constructor_and_control_flow(tmp_path):
    path = write_file(
        tmp_path,
        "src/step-drivers/sd.ts",
        "class MyDriver {\n"
        "  constructor(page) { if (true) {} for (;;) {} }\n"
        "  doAction() {}\n"
        "}",
    )
    names = [m.name for m in parse_class_methods(path)]
    assert "constructor" not in names
    assert "if" not in names
    assert "for" not in names
    assert "doAction" in names


def test_extracts_arrow_function_property(tmp_path):
    path = write_file(
        tmp_path,
        "src/page-objects/x-page.ts",
        "class XPage {\n"
        "  clickButton = async () => { await this.page.click('button'); }\n"
        "}",
    )
    methods = parse_class_methods(path)
    arrow = next(m for m in methods if m.name == "clickButton")
    assert arrow.is_async


def test_extracts_getter(tmp_path):
    path = write_file(
        tmp_path,
        "src/page-objects/y-page.ts",
        "class YPage {\n  private get title() { return 'x'; }\n}",
    )
    methods = parse_class_methods(path)
    getter = next(m for m in methods if m.name == "title")
    assert getter.visibility == Visibility.PRIVATE
    assert not getter.is_async


def test_class_name_falls_back_to_file_stem(tmp_path):
    path = write_file(tmp_path, "src/page-objects/helpers.ts", "function helper() {}\n")
    methods = parse_class_methods(path)
    assert [m.class_name for m in methods] == ["helpers"]


def test_missing_file_has_no_methods(tmp_path):
    assert parse_class_methods(tmp_path / "absent.ts") == []


# visibility


@pytest.mark.parametrize(
    "text, expected",
    [
        ("private", Visibility.PRIVATE),
        ("protected", Visibility.PROTECTED),
        ("public", Visibility.PUBLIC),
        ("", Visibility.PUBLIC),
    ],
)
def test_parse_visibility_variants(text, expected):
    assert parse_visibility(text) == expected


# walk_dir


def test_walk_dir_skips_node_modules_and_other_extensions(tmp_path):
    keep = write_file(tmp_path, "a/one.ts", "")
    write_file(tmp_path, "a/node_modules/two.ts", "")
    write_file(tmp_path, "a/three.js", "")
    assert walk_dir(tmp_path, ".ts") == [keep]


def test_walk_dir_missing_directory(tmp_path):
    assert walk_dir(tmp_path / "nope", ".ts") == []


# ProjectScanner


def test_scanner_caches_until_invalidated(tmp_path):
    write_file(tmp_path, "tests/tier1/a/a.spec.ts", "test('one', async () => {});")
    scanner = ProjectScanner(tmp_path)
    assert len(scanner.scan_test_files()) == 1
    write_file(tmp_path, "tests/tier1/b/b.spec.ts", "test('two', async () => {});")
    assert len(scanner.scan_test_files()) == 1
    scanner.invalidate_cache()
    assert len(scanner.scan_test_files()) == 2


def test_scanner_scans_page_objects_and_step_drivers(tmp_path):
    write_file(tmp_path, "src/page-objects/p.ts", "class P {\n  open() {}\n}")
    write_file(tmp_path, "src/step-drivers/s.ts", "class SStepDriver {\n  run() {}\n}")
    scanner = ProjectScanner(tmp_path)
    assert [m.name for m in scanner.scan_page_object_methods()] == ["open"]
    assert [m.name for m in scanner.scan_step_driver_methods()] == ["run"]


def test_find_method_references(tmp_path):
    write_file(tmp_path, "tests/tier1/a/a.spec.ts", "await page.openThing ();")
    write_file(tmp_path, "tests/tier1/b/b.spec.ts", "await page.openThingElse();")
    scanner = ProjectScanner(tmp_path)
    refs = scanner.find_method_references("openThing", [scanner.tests_dir])
    assert refs == ["tests/tier1/a/a.spec.ts"]


def test_scan_docs_for_feature(tmp_path):
    write_file(tmp_path, "docs/tier1/checkups.md", "nothing relevant")
    write_file(tmp_path, "docs/tier1/overview.md", "checkups mentioned")
    scanner = ProjectScanner(tmp_path)
    assert scanner.scan_docs_for_feature("Checkups") == ["docs/tier1/checkups.md"]


def test_scan_docs_without_docs_dir(tmp_path):
    assert ProjectScanner(tmp_path).scan_docs_for_feature("anything") == []