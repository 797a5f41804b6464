"""Generate skeleton specs, page objects, step drivers and STD documents."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Mapping

_WORD_SPLIT_RE = re.compile(r"[-_ ]")
_CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")
_JIRA_BROWSE_BASE = "https://issues.redhat.com/browse/"


def _str_param(params: Mapping[str, Any], key: str) -> str | None:
    value = params.get(key)
    return value if isinstance(value, str) else None


def _str_list_param(params: Mapping[str, Any], key: str) -> list[str]:
    value = params.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _bool_param(params: Mapping[str, Any], key: str) -> bool:
    value = params.get(key)
    return value if isinstance(value, bool) else False


def to_pascal_case(text: str) -> str:
    """Join words split on '-', '_' or ' ' with each first letter upper-cased."""
    return "".join(word[:1].upper() + word[1:] for word in _WORD_SPLIT_RE.split(text))


def to_kebab_case(text: str) -> str:
    """Lower-case the text and turn '_' and ' ' into '-'."""
    return text.lower().replace("_", "-").replace(" ", "-")


def pascal_to_words(text: str) -> str:
    """Insert a space at every lower-to-upper case boundary."""
    return _CAMEL_BOUNDARY_RE.sub(r"\1 \2", text)


def scaffold_test(params: Mapping[str, Any]) -> dict:
    """Return the path and content of a new ``.spec.ts`` file."""
    feature = _str_param(params, "feature") or "my-feature"
    tier = _str_param(params, "tier") or "tier1"
    describe_name = _str_param(params, "describe_name")
    if describe_name is None:
        describe_name = to_pascal_case(feature)
    jira_ids = _str_list_param(params, "jira_ids")
    tags = _str_list_param(params, "tags")
    use_shared = _bool_param(params, "use_shared_resources")

    kebab = to_kebab_case(feature)
    file_path = f"playwright/tests/{tier}/{kebab}/{kebab}.spec.ts"

    allure_ids = "".join(f"  await allure.id('{jira}');\n" for jira in jira_ids)
    tag_list = ", ".join(f"'{tag}'" for tag in [f"@{tier}", *tags])
    fixture_params = "{ sharedResources, page }" if use_shared else "{ steps, page }"
    test_name = "".join(f"ID({jira}) " for jira in jira_ids) + "should perform expected behavior"

    content = (
        "import { allure } from 'allure-playwright';\n"
        "import { scenarioTest as test } from '@/fixtures/scenario-test-fixture';\n"
        "\n"
        f"test.describe('{describe_name}', () => {{\n"
        "  test(\n"
        f"    '{test_name}',\n"
        f"    {{ tag: [{tag_list}] }},\n"
        f"    async ({fixture_params}) => {{\n"
        f"{allure_ids}      await allure.feature('{describe_name}');\n"
        "\n"
        "      // TODO: implement test\n"
        "    },\n"
        "  );\n"
        "});\n"
    )
    return {"filePath": file_path, "content": content}


def scaffold_page_object(params: Mapping[str, Any]) -> dict:
    """Return the path and content of a new page object class."""
    name = _str_param(params, "name") or "my-feature"
    base_class = _str_param(params, "base_class") or "PageCommons"
    url_pattern = _str_param(params, "url_pattern") or ""

    pascal = to_pascal_case(name)
    kebab = to_kebab_case(name)
    class_name = pascal if pascal.endswith("Page") else f"{pascal}Page"
    file_path = f"playwright/src/page-objects/{kebab}-page.ts"

    if url_pattern:
        url = url_pattern.replace("{namespace}", "${projectName}")
        nav_method = (
            "\n  async navigateTo(projectName: string): Promise<void> {\n"
            f"    await this.goTo(`{url}`);\n"
            "  }\n"
        )
    else:
        nav_method = "\n  // TODO: Add navigation methods\n"

    if base_class == "BasePage":
        base_import = "import BasePage from './base-page';"
    else:
        base_import = "import PageCommons from './page-commons';"

    content = (
        "import { Page } from '@playwright/test';\n"
        f"{base_import}\n"
        "\n"
        f"export default class {class_name} extends {base_class} {{\n"
        "  constructor(page: Page) {\n"
        "    super(page);\n"
        "  }\n"
        f"{nav_method}\n"
        "  // TODO: Add locators and action methods\n"
        "}\n"
    )
    return {"filePath": file_path, "content": content}


def scaffold_step_driver(params: Mapping[str, Any]) -> dict:
    """Return the path and content of a new step driver bound to a page object."""
    feature = _str_param(params, "feature") or "my-feature"
    page_object_name = _str_param(params, "page_object_name")
    if page_object_name is None:
        page_object_name = f"{to_pascal_case(feature)}Page"

    pascal = to_pascal_case(feature)
    kebab = to_kebab_case(feature)
    class_name = f"{pascal}StepDriver"
    po_kebab = to_kebab_case(page_object_name.replace("Page", ""))
    file_path = f"playwright/src/step-drivers/{kebab}-step-driver.ts"

    content = (
        "import { Page } from '@playwright/test';\n"
        f"import {page_object_name} from '@/page-objects/{po_kebab}-page';\n"
        "import BasePageStepDriver from './base-page-step-driver';\n"
        "\n"
        f"export default class {class_name} extends BasePageStepDriver<{page_object_name}> {{\n"
        "  constructor(page: Page) {\n"
        f"    super(page, {page_object_name});\n"
        "  }\n"
        "\n"
        "  // TODO: Add step methods\n"
        "}\n"
    )
    return {"filePath": file_path, "content": content}


def scaffold_std(params: Mapping[str, Any]) -> dict:
    """Return the path and content of a new Software Test Description document."""
    feature = _str_param(params, "feature") or "my-feature"
    tier = _str_param(params, "tier") or "tier1"
    jira_ids = _str_list_param(params, "jira_ids")

    pascal = to_pascal_case(feature)
    kebab = to_kebab_case(feature)
    human_name = pascal_to_words(pascal)
    tier_pascal = to_pascal_case(tier)
    file_path = f"playwright/docs/{tier}/{kebab}.md"
    spec_path = f"tests/{tier}/{kebab}/{kebab}.spec.ts"

    if jira_ids:
        related_ids = ", ".join(f"[{jira}]({_JIRA_BROWSE_BASE}{jira})" for jira in jira_ids)
        traceability_rows = "\n".join(
            f"| {jira} | `{index:03d}` | `{spec_path}` |"
            for index, jira in enumerate(jira_ids, start=1)
        )
    else:
        related_ids = "N/A"
        traceability_rows = f"| N/A | `001` | `{spec_path}` |"

    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")

    content = f"""# Software Test Description (STD): {human_name} ({tier_pascal})

## 1. Project Overview
*   **Project Name:** OpenShift Virtualization (CNV)
*   **Feature Area:** {tier_pascal} -- {human_name}
*   **Related IDs:** {related_ids}
*   **Date:** {today}
*   **Document Status:** Draft

## 2. Introduction
### 2.1 Purpose
Documents `playwright/{spec_path}`: {human_name} test scenarios.

### 2.2 Scope
*   **In-Scope:** {human_name} page functionality, CRUD operations, navigation.
*   **Out-of-Scope:** Other feature areas not covered by this spec file.

## 3. Test Environment & Prerequisites
*   **Environment:** OpenShift with OpenShift Virtualization.
*   **Configuration:** Standard test namespace with required permissions.

## 4. Test Case Definitions

*Automation:* `{spec_path}`

### `001`: [Test case title]
*   **Objective:** [Describe the specific goal.]
*   **Pre-conditions:** User is authenticated.

| Step | Action | Expected Result |
| :--- | :--- | :--- |
| 1 | [Action] | [Expected result] |

---

## 5. Requirements Traceability Matrix

| Requirement ID | Test Case ID | Automation (Spec) |
| :--- | :--- | :--- |
{traceability_rows}
"""
    return {"filePath": file_path, "content": content}