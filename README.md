# kubevirt-ui-tools

Helpers for working on a Playwright test suite for a virtualization web UI.
The package is a library with two sub-packages:

- **`kubevirt_ui_tools.coverage`**
  - `scanner`: `ProjectScanner` walks a Playwright root (`tests/`,
    `src/page-objects/`, `src/step-drivers/`, `docs/`) and parses spec files
    (tier, feature, Jira ids, test names, describe titles, tags, step drivers
    used) and class methods (name, line, async, visibility).
  - `oracle`: coverage per feature, per tier and per Jira ticket; untested
    step-driver methods; orphan page-object methods.
  - `scaffolder`: skeletons for specs, page objects, step drivers and
    Software Test Description documents.
  - `runner`: builds and runs `yarn test-playwright`, and summarises JUnit
    XML or Allure result files.
  - `github`: pull-request queries through the `gh` CLI.
  - `cluster`: node, VM, test-namespace and health queries against a
    Kubernetes client you supply, plus stale-namespace cleanup with `oc`.
- **`kubevirt_ui_tools.docs`**
  - `index`: a curated list of product documentation sections
    (`SECTIONS`, `find_section`, `search_sections`).
  - `asciidoc`: AsciiDoc-to-Markdown conversion with attribute substitution.
  - `fetcher`: `DocsFetcher` downloads sources over HTTP, resolves
    `include::modules/...` and `include::snippets/...` lines, and stores the
    rendered pages in the cache; failures raise `FetchError`.
  - `cache`: `DocsCache`, a JSON file of pages and attributes with
    full-text search.
  - `tools`: tool descriptions (`all_tools`) and `dispatch`, which runs
    `list_product_doc_sections`, `fetch_product_doc` or
    `search_product_docs` and returns text, raising `DocsToolError` on bad input.

## Coverage

```python
from kubevirt_ui_tools.coverage.scanner import ProjectScanner
from kubevirt_ui_tools.coverage.oracle import (
    find_tests_by_jira,
    get_coverage_for_feature,
    get_tier_distribution,
)

scanner = ProjectScanner("path/to/playwright")

print(get_tier_distribution(scanner)["totalTests"])
print(get_coverage_for_feature(scanner, "checkups")["specFiles"])
print(find_tests_by_jira(scanner, "CNV-12345")["found"])

# After editing the test tree, drop cached scan results:
scanner.invalidate_cache()
```

Scan results are cached on the scanner. Tiers are recognised from paths
under `tests/gating`, `tests/tier1`, `tests/tier2` and
`tests/fleet-virtualization-acm`; anything else is `"unknown"`.

## Scaffolding

The scaffolders return a file path and its content; nothing is written to disk.

```python
from kubevirt_ui_tools.coverage.scaffolder import scaffold_test, scaffold_page_object

result = scaffold_test({"feature": "vm-snapshots", "tier": "tier1", "jira_ids": ["CNV-11111"]})
print(result["filePath"])   # playwright/tests/tier1/vm-snapshots/vm-snapshots.spec.ts
print(result["content"])

page = scaffold_page_object({"name": "checkups", "url_pattern": "/k8s/ns/{namespace}/checkups"})
```

## Test runs

```python
from kubevirt_ui_tools.coverage.runner import run_tests, get_test_results

preview = run_tests({"grep": "@tier1", "workers": 2, "dry_run": True}, "path/to/project")
print(preview["command"])

results = get_test_results({}, "path/to/junit.xml", "path/to/allure-results")
```

Without `dry_run` the command is run and its exit code, stdout (first 10000
characters) and stderr (first 5000) are returned.

## Cluster

The functions in `kubevirt_ui_tools.coverage.cluster` take a client object
that provides `list(group, version, resource, namespace, label_selector)`,
`get_namespaced(group, version, resource, namespace, name)` and
`get_events(namespace, name, kind)`, each returning decoded JSON and raising
on failure.

```python
from kubevirt_ui_tools.coverage.cluster import check_cluster_health, list_test_namespaces

print(check_cluster_health(client)["healthy"])
print(list_test_namespaces(client)["namespaces"])
```

## Documentation

```python
from kubevirt_ui_tools.docs.cache import DocsCache
from kubevirt_ui_tools.docs.fetcher import DocsFetcher
from kubevirt_ui_tools.docs.index import search_sections

cache = DocsCache.load("docs-cache.json")
fetcher = DocsFetcher(cache, "docs-cache.json", None)

for section in search_sections("networking udn"):
    page = fetcher.fetch_and_process(section.dir, section.file, section.id, False)
    print(page.title)

for hit in cache.search("live migration"):
    print(hit.section_id, hit.snippets[:1])
```

Fetched pages and attributes are treated as stale seven days after they
were fetched.

## What this package does not do

- It has no command-line entry point and no server; the tools are called
  from Python.
- It has no Kubernetes client of its own: the cluster functions need one
  passed in.
- The coverage functions have no tool-dispatch layer; only the docs tools do.

## Requirements

Python 3.10 or later and `requests`. The pull-request helpers need the `gh`
CLI on the path, test runs need `yarn`, and stale-namespace cleanup needs `oc`.