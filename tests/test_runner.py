import json
import subprocess
from unittest import mock

from kubevirt_ui_tools.coverage.runner import (
    get_test_results,
    parse_allure_results,
    parse_junit_results,
    run_tests,
)


def _completed(returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(args=["yarn"], returncode=returncode, stdout=stdout, stderr=stderr)


def test_dry_run_returns_command_without_running(tmp_path):
    with mock.patch("kubevirt_ui_tools.coverage.runner.subprocess.run") as run:
        result = run_tests({"dry_run": True}, tmp_path)
    assert result["dryRun"] is True
    assert result["command"] == f"cd {tmp_path} && yarn test-playwright"
    run.assert_not_called()


def test_dry_run_includes_all_flags(tmp_path):
    params = {
        "dry_run": True,
        "file": "tests/a.spec.ts",
        "grep": "@tier1",
        "grep_invert": "@slow",
        "workers": 3,
        "retries": 1,
        "timeout": 60000,
        "shard": "1/4",
    }
    tokens = run_tests(params, tmp_path)["command"].split()
    assert tokens[tokens.index("yarn") + 1] == "test-playwright"
    assert tokens[tokens.index("test-playwright") + 1] == "tests/a.spec.ts"
    assert tokens[tokens.index("--grep") + 1] == "@tier1"
    assert tokens[tokens.index("--grep-invert") + 1] == "@slow"
    assert tokens[tokens.index("--workers") + 1] == str(params["workers"])
    assert tokens[tokens.index("--retries") + 1] == str(params["retries"])
    assert tokens[tokens.index("--timeout") + 1] == str(params["timeout"])
    assert tokens[tokens.index("--shard") + 1] == "1/4"
    assert "--headed" not in tokens


def test_debug_implies_headed(tmp_path):
    tokens = run_tests({"dry_run": True, "debug": True}, tmp_path)["command"].split()
    assert "--headed" in tokens


def test_non_integer_workers_ignored(tmp_path):
    tokens = run_tests({"dry_run": True, "workers": "4", "retries": True}, tmp_path)["command"].split()
    assert "--workers" not in tokens
    assert "--retries" not in tokens


def test_run_passes_env_and_truncates_output(tmp_path):
    completed = _completed(returncode=1, stdout=b"x" * 20000, stderr=b"y" * 9000)
    with mock.patch(
        "kubevirt_ui_tools.coverage.runner.subprocess.run", return_value=completed
    ) as run:
        result = run_tests({"skip_cleanup": True, "debug": True}, tmp_path)
    assert result["exitCode"] == 1
    assert result["success"] is False
    assert len(result["stdout"]) == 10000
    assert len(result["stderr"]) == 5000
    call_args, call_kwargs = run.call_args
    assert call_args[0][:2] == ["yarn", "test-playwright"]
    assert "--headed" in call_args[0]
    assert call_kwargs["env"]["SKIP_TEST_CLEANUP"] == "true"
    assert call_kwargs["env"]["DEBUG"] == "1"
    assert call_kwargs["cwd"] == str(tmp_path)


def test_run_success(tmp_path):
    with mock.patch(
        "kubevirt_ui_tools.coverage.runner.subprocess.run",
        return_value=_completed(stdout=b"all good"),
    ):
        result = run_tests({}, tmp_path)
    assert result["success"] is True
    assert result["exitCode"] == 0
    assert result["stdout"] == "all good"


def test_run_reports_launch_failure(tmp_path):
    with mock.patch(
        "kubevirt_ui_tools.coverage.runner.subprocess.run",
        side_effect=FileNotFoundError("yarn"),
    ):
        result = run_tests({}, tmp_path)
    assert result["error"].startswith("Failed to run tests:")
    assert result["command"].endswith("yarn test-playwright")


def test_parse_junit_results(tmp_path):
    path = tmp_path / "junit.xml"
    path.write_text(
        '<testsuites tests="12" failures="2" errors="1" skipped="3" time="45.5"></testsuites>'
    )
    result = parse_junit_results(path)
    assert result["source"] == "junit"
    assert result["file"] == str(path)
    assert result["totals"] == {
        "tests": 12,
        "failures": 2,
        "errors": 1,
        "skipped": 3,
        "time": 45.5,
    }


def test_parse_junit_missing_attributes_default_to_zero(tmp_path):
    path = tmp_path / "junit.xml"
    path.write_text("<testsuites></testsuites>")
    totals = parse_junit_results(path)["totals"]
    assert totals["tests"] == 0
    assert totals["time"] == 0.0


def test_parse_junit_missing_file(tmp_path):
    result = parse_junit_results(tmp_path / "absent.xml")
    assert result["error"].startswith("JUnit file not found:")


def _write_result(directory, name, data):
    (directory / f"{name}-result.json").write_text(json.dumps(data))


def test_parse_allure_results(tmp_path):
    _write_result(tmp_path, "a", {"name": "ok", "status": "passed"})
    _write_result(
        tmp_path, "b", {"name": "bad", "status": "failed", "statusDetails": {"message": "m" * 500}}
    )
    _write_result(tmp_path, "c", {"name": "err", "status": "broken"})
    _write_result(tmp_path, "d", {"name": "skip", "status": "skipped"})
    _write_result(tmp_path, "e", {"name": "odd", "status": "unknown"})
    (tmp_path / "container.json").write_text(json.dumps({"status": "passed"}))
    (tmp_path / "junk-result.json").write_text("not json")

    result = parse_allure_results(tmp_path)
    assert result["source"] == "allure"
    assert result["totals"] == {"passed": 1, "failed": 1, "broken": 1, "skipped": 1}
    by_name = {f["name"]: f for f in result["failures"]}
    assert set(by_name) == {"bad", "err"}
    assert len(by_name["bad"]["message"]) == 200
    assert by_name["err"]["message"] == ""
    assert by_name["err"]["status"] == "broken"


def test_parse_allure_failures_capped(tmp_path):
    for index in range(25):
        _write_result(tmp_path, f"f{index:02d}", {"name": f"t{index}", "status": "failed"})
    result = parse_allure_results(tmp_path)
    assert result["totals"]["failed"] == 25
    assert len(result["failures"]) == 20


def test_get_test_results_prefers_junit(tmp_path):
    junit = tmp_path / "junit.xml"
    junit.write_text('<testsuites tests="4"></testsuites>')
    allure = tmp_path / "allure-results"
    allure.mkdir()
    result = get_test_results({}, junit, allure)
    assert result["source"] == "junit"
    assert result["totals"]["tests"] == 4


def test_get_test_results_explicit_allure(tmp_path):
    junit = tmp_path / "junit.xml"
    junit.write_text('<testsuites tests="4"></testsuites>')
    allure = tmp_path / "allure-results"
    allure.mkdir()
    result = get_test_results({"source": "allure"}, junit, allure)
    assert result["source"] == "allure"


def test_get_test_results_nothing_found(tmp_path):
    junit = tmp_path / "junit.xml"
    allure = tmp_path / "allure-results"
    result = get_test_results({}, junit, allure)
    assert result["error"] == "No test results found."
    assert result["searched"] == [str(junit), str(allure)]