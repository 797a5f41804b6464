"""Pull request queries through the ``gh`` command-line client."""

from __future__ import annotations

import json
import subprocess
from typing import Any

_PR_VIEW_FIELDS = (
    "number,title,body,state,url,baseRefName,headRefName,author,additions,deletions,"
    "changedFiles,reviews,checksUrl,statusCheckRollup"
)
_PR_LIST_FIELDS = "number,title,headRefName,state,url,author,additions,deletions,reviewDecision"
_PR_SEARCH_FIELDS = "number,title,state,url,author,createdAt,closedAt"


class _GhError(Exception):
    pass


def _gh(args: list[str]) -> str:
    try:
        completed = subprocess.run(["gh", *args], capture_output=True, check=False)
    except OSError as exc:
        raise _GhError(f"gh CLI not found: {exc}") from exc
    if completed.returncode == 0:
        return completed.stdout.decode("utf-8", errors="replace").strip()
    raise _GhError(completed.stderr.decode("utf-8", errors="replace").strip())


def _resolve_repo(repo: str | None, default_repo: str) -> str:
    return repo if repo is not None else default_repo


def _lines(text: str) -> list[str]:
    if not text:
        return []
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def get_pr_details(repo: str | None, pr_number: int, default_repo: str) -> Any:
    """Fetch metadata and check status for one pull request."""
    r = _resolve_repo(repo, default_repo)
    try:
        output = _gh(["pr", "view", str(pr_number), "--repo", r, "--json", _PR_VIEW_FIELDS])
    except _GhError as exc:
        return {"error": f"gh pr view failed: {exc}"}
    try:
        return json.loads(output)
    except json.JSONDecodeError:
        return {"error": "Failed to parse PR details"}


def _fetch_comments(endpoint: str, label: str) -> Any:
    try:
        output = _gh(["api", endpoint])
    except _GhError as exc:
        return {"error": f"Failed to get {label} comments: {exc}"}
    try:
        return json.loads(output)
    except json.JSONDecodeError:
        return []


def get_pr_comments(repo: str | None, pr_number: int, default_repo: str) -> dict:
    """Fetch inline review comments and general issue comments for a pull request."""
    r = _resolve_repo(repo, default_repo)
    return {
        "reviewComments": _fetch_comments(f"repos/{r}/pulls/{pr_number}/comments", "review"),
        "issueComments": _fetch_comments(f"repos/{r}/issues/{pr_number}/comments", "issue"),
    }


def list_open_prs(
    repo: str | None,
    author: str | None,
    label: str | None,
    limit: int,
    default_repo: str,
) -> Any:
    """List open pull requests, optionally filtered by author and label."""
    r = _resolve_repo(repo, default_repo)
    args = ["pr", "list", "--repo", r, "--limit", str(limit), "--json", _PR_LIST_FIELDS]
    if author is not None:
        args += ["--author", author]
    if label is not None:
        args += ["--label", label]
    try:
        output = _gh(args)
    except _GhError as exc:
        return {"error": f"gh pr list failed: {exc}"}
    try:
        return json.loads(output)
    except json.JSONDecodeError:
        return {"error": "parse error"}


def search_prs(repo: str | None, query: str, limit: int, default_repo: str) -> Any:
    """Search pull requests of the repository with GitHub search syntax."""
    r = _resolve_repo(repo, default_repo)
    args = ["search", "prs", f"repo:{r} {query}", "--limit", str(limit), "--json", _PR_SEARCH_FIELDS]
    try:
        output = _gh(args)
    except _GhError as exc:
        return {"error": f"gh search prs failed: {exc}"}
    try:
        return json.loads(output)
    except json.JSONDecodeError:
        return {"error": "parse error"}


def get_pr_files_coverage(repo: str | None, pr_number: int, default_repo: str) -> dict:
    """Sort a pull request's changed files into Playwright specs, page objects and step drivers."""
    r = _resolve_repo(repo, default_repo)
    try:
        output = _gh(
            ["pr", "view", str(pr_number), "--repo", r, "--json", "files", "--jq", ".files[].path"]
        )
    except _GhError as exc:
        return {"error": f"Could not fetch PR files: {exc}"}

    changed_files = _lines(output)
    playwright_files = [f for f in changed_files if "playwright/" in f]
    other_files = [f for f in changed_files if "playwright/" not in f]

    return {
        "prNumber": pr_number,
        "summary": {
            "totalFiles": len(changed_files),
            "playwrightFiles": len(playwright_files),
            "otherFiles": len(other_files),
        },
        "playwrightChanges": {
            "specs": [f for f in playwright_files if f.endswith(".spec.ts")],
            "pageObjects": [f for f in playwright_files if "page-objects" in f],
            "stepDrivers": [f for f in playwright_files if "step-drivers" in f],
        },
        "nonPlaywrightFiles": other_files,
    }