"""Run Playwright tests through yarn and read back their results."""

from __future__ import annotations

import json
import os
import re
import subprocess
from pathlib import Path
from typing import Any, Mapping

_STDOUT_LIMIT = 10000
_STDERR_LIMIT = 5000
_MESSAGE_LIMIT = 200
_MAX_FAILURES = 20
_U64_MAX = 2**64 - 1

_TESTS_RE = re.compile(r'tests="(\d+)"')
_FAILURES_RE = re.compile(r'failures="(\d+)"')
_ERRORS_RE = re.compile(r'errors="(\d+)"')
_SKIPPED_RE = re.compile(r'skipped="(\d+)"')
_TIME_RE = re.compile(r'time="([\d.]+)"')


def _str_param(params: Mapping[str, Any], key: str) -> str:
    value = params.get(key)
    return value if isinstance(value, str) else ""


def _uint_param(params: Mapping[str, Any], key: str) -> int | None:
    value = params.get(key)
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _U64_MAX:
        return value
    return None


def _bool_param(params: Mapping[str, Any], key: str) -> bool:
    value = params.get(key)
    return value if isinstance(value, bool) else False


def run_tests(params: Mapping[str, Any], project_root) -> dict:
    """Build a ``yarn test-playwright`` command from ``params`` and run it, or just show it."""
    file = _str_param(params, "file")
    grep = _str_param(params, "grep")
    grep_invert = _str_param(params, "grep_invert")
    workers = _uint_param(params, "workers")
    retries = _uint_param(params, "retries")
    headed = _bool_param(params, "headed")
    debug = _bool_param(params, "debug")
    timeout_ms = _uint_param(params, "timeout")
    shard = _str_param(params, "shard")
    skip_cleanup = _bool_param(params, "skip_cleanup")
    dry_run = _bool_param(params, "dry_run")

    args = ["test-playwright"]
    if file:
        args.append(file)
    if grep:
        args += ["--grep", grep]
    if grep_invert:
        args += ["--grep-invert", grep_invert]
    if workers is not None:
        args += ["--workers", str(workers)]
    if retries is not None:
        args += ["--retries", str(retries)]
    if headed or debug:
        args.append("--headed")
    if timeout_ms is not None:
        args += ["--timeout", str(timeout_ms)]
    if shard:
        args += ["--shard", shard]

    extra_env: dict[str, str] = {}
    if skip_cleanup:
        extra_env["SKIP_TEST_CLEANUP"] = "true"
    if debug:
        extra_env["DEBUG"] = "1"

    command = f"cd {project_root} && yarn {' '.join(args)}"
    if dry_run:
        return {"command": command, "dryRun": True}

    try:
        completed = subprocess.run(
            ["yarn", *args],
            cwd=str(project_root),
            env={**os.environ, **extra_env},
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        return {"error": f"Failed to run tests: {exc}", "command": command}

    stdout = completed.stdout.decode("utf-8", errors="replace")
    stderr = completed.stderr.decode("utf-8", errors="replace")
    exit_code = completed.returncode if completed.returncode >= 0 else -1
    return {
        "command": command,
        "exitCode": exit_code,
        "success": completed.returncode == 0,
        "stdout": stdout[:_STDOUT_LIMIT],
        "stderr": stderr[:_STDERR_LIMIT],
    }


def get_test_results(params: Mapping[str, Any], junit_path, allure_dir) -> dict:
    """Read results from JUnit XML or Allure files, chosen by ``source`` or by what exists."""
    source = params.get("source")
    if not isinstance(source, str):
        source = None
    junit_path = Path(junit_path)
    allure_dir = Path(allure_dir)

    if source == "junit" or (source is None and junit_path.exists()):
        return parse_junit_results(junit_path)
    if source == "allure" or (source is None and allure_dir.exists()):
        return parse_allure_results(allure_dir)

    return {
        "error": "No test results found.",
        "searched": [str(junit_path), str(allure_dir)],
        "hint": "Run tests first with run_tests, then call this tool.",
    }


def _capture_uint(pattern: re.Pattern, text: str) -> int:
    match = pattern.search(text)
    if match is None:
        return 0
    value = int(match.group(1))
    return value if value <= _U64_MAX else 0


def _capture_float(pattern: re.Pattern, text: str) -> float:
    match = pattern.search(text)
    if match is None:
        return 0.0
    try:
        return float(match.group(1))
    except ValueError:
        return 0.0


def parse_junit_results(path) -> dict:
    """Summarise the first suite totals found in a JUnit XML file."""
    path = Path(path)
    try:
        xml = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        return {"error": f"JUnit file not found: {exc}"}

    return {
        "source": "junit",
        "file": str(path),
        "totals": {
            "tests": _capture_uint(_TESTS_RE, xml),
            "failures": _capture_uint(_FAILURES_RE, xml),
            "errors": _capture_uint(_ERRORS_RE, xml),
            "skipped": _capture_uint(_SKIPPED_RE, xml),
            "time": _capture_float(_TIME_RE, xml),
        },
    }


def _failure_entry(data: dict, status: str) -> dict:
    details = data.get("statusDetails")
    message = details.get("message") if isinstance(details, dict) else None
    if not isinstance(message, str):
        message = ""
    return {"name": data.get("name"), "status": status, "message": message[:_MESSAGE_LIMIT]}


def parse_allure_results(directory) -> dict:
    """Count Allure ``*-result.json`` files by status and list the failures."""
    directory = Path(directory)
    counts = {"passed": 0, "failed": 0, "broken": 0, "skipped": 0}
    failures: list[dict] = []

    try:
        entries = sorted(directory.iterdir())
    except OSError:
        entries = []

    for path in entries:
        if not path.name.endswith("-result.json"):
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError):
            continue
        if not isinstance(data, dict):
            continue
        status = data.get("status")
        if status in counts:
            counts[status] += 1
            if status in ("failed", "broken"):
                failures.append(_failure_entry(data, status))

    return {
        "source": "allure",
        "directory": str(directory),
        "totals": counts,
        "failures": failures[:_MAX_FAILURES],
    }