"""File-based and SCM-based report workflows."""

import asyncio

import pytest

from code_client.analysis import AnalysisOptions
from code_client.constants import MAX_RETRY_ATTEMPTS, ErrorCodes
from code_client.report import (
    ReportOptions,
    ScmReportOptions,
    get_report,
    get_scm_report,
    init_report,
    init_scm_report,
)
from conftest import BASE_URL, FakeExecutor, fail, ok

REPORT = ReportOptions(
    project_name="demo",
    target_name="main",
    target_ref="refs/heads/main",
    remote_repo_url="https://git.test/demo.git",
)
SCM = ScmReportOptions(project_id="proj-1", commit_id="c0ffee")


def test_init_report_returns_report_id_and_sends_workflow_data(options):
    executor = FakeExecutor(ok({"reportId": "rep-1"}))
    result = asyncio.run(
        init_report(
            options,
            "h1",
            REPORT,
            AnalysisOptions(severity=3, legacy=True, shard="s1"),
            executor=executor,
        )
    )

    assert result.is_success
    assert result.value == "rep-1"
    payload, attempts = executor.calls[0]
    assert payload.url == f"{BASE_URL}/report"
    assert payload.method == "post"
    assert attempts == MAX_RETRY_ATTEMPTS
    assert payload.body == {
        "workflowData": {
            "projectName": "demo",
            "targetName": "main",
            "targetRef": "refs/heads/main",
            "remoteRepoUrl": "https://git.test/demo.git",
        },
        "key": {"type": "file", "hash": "h1", "limitToFiles": [], "shard": "s1"},
        "severity": 3,
        "legacy": True,
    }


def test_get_report_returns_body_unmodified(options):
    body = {"status": "COMPLETE", "uploadResult": {"projectUrl": "https://app.test/p/1"}}
    executor = FakeExecutor(ok(body))
    result = asyncio.run(get_report(options, "rep-1", executor=executor))

    assert result.value is body
    payload = executor.payloads[0]
    assert payload.url == f"{BASE_URL}/report/rep-1"
    assert payload.method == "get"


def test_get_report_prefers_server_message(options):
    executor = FakeExecutor(fail(ErrorCodes.BAD_REQUEST, "Project limit reached"))
    result = asyncio.run(get_report(options, "rep-1", executor=executor))
    assert result.error.status_code == ErrorCodes.BAD_REQUEST
    assert result.error.status_text == "Project limit reached"


def test_get_report_falls_back_to_default_message(options):
    executor = FakeExecutor(fail(ErrorCodes.SERVER_ERROR))
    result = asyncio.run(get_report(options, "rep-1", executor=executor))
    assert result.error.status_text == "Getting report failed"
    assert result.error.api_name == "getReport"


def test_init_scm_report_returns_test_id(options):
    executor = FakeExecutor(ok({"testId": "test-9"}))
    result = asyncio.run(
        init_scm_report(
            options,
            SCM,
            AnalysisOptions(severity=1, prioritized=True, legacy=True),
            executor=executor,
        )
    )

    assert result.value == "test-9"
    payload = executor.payloads[0]
    assert payload.url == f"{BASE_URL}/test"
    assert payload.body == {
        "workflowData": {"projectId": "proj-1", "commitHash": "c0ffee"},
        "severity": 1,
        "prioritized": True,
    }


def test_get_scm_report_polls_test_endpoint(options):
    body = {"status": "ANALYZING", "progress": 0.5}
    executor = FakeExecutor(ok(body))
    result = asyncio.run(get_scm_report(options, "test-9", executor=executor))
    assert result.value is body
    assert executor.payloads[0].url == f"{BASE_URL}/test/test-9"


def test_scm_errors_carry_their_own_operation_name(options):
    executor = FakeExecutor(fail(ErrorCodes.NOT_FOUND))
    init = asyncio.run(init_scm_report(options, SCM, executor=executor))
    get = asyncio.run(get_scm_report(options, "test-9", executor=executor))
    assert init.error.api_name == "initScmReport"
    assert get.error.api_name == "getScmReport"
    assert get.error.status_text == "Not found"


@pytest.mark.parametrize(
    "call, api_name",
    [
        (lambda o, e: init_report(o, "h1", REPORT, executor=e), "initReport"),
        (lambda o, e: get_report(o, "rep-1", executor=e), "getReport"),
        (lambda o, e: init_scm_report(o, SCM, executor=e), "initScmReport"),
        (lambda o, e: get_scm_report(o, "test-9", executor=e), "getScmReport"),
    ],
)
def test_bad_base_url_fails_locally_without_network(bad_options, call, api_name):
    executor = FakeExecutor()
    result = asyncio.run(call(bad_options, executor))
    assert result.error.status_code == ErrorCodes.BAD_REQUEST
    assert result.error.api_name == api_name
    assert executor.calls == []


@pytest.mark.parametrize("body", [None, {}, {"status": "QUEUED"}, ["rep-1"]])
def test_init_report_without_report_id_is_server_error(options, body):
    executor = FakeExecutor(ok(body))
    result = asyncio.run(init_report(options, "h1", ReportOptions(), executor=executor))
    assert result.error.status_code == ErrorCodes.SERVER_ERROR
    assert result.error.status_text == "Response did not contain reportId"
    assert result.error.api_name == "initReport"


def test_init_scm_report_without_test_id_is_server_error(options):
    executor = FakeExecutor(ok(None))
    result = asyncio.run(init_scm_report(options, SCM, executor=executor))
    assert result.error.status_code == ErrorCodes.SERVER_ERROR
    assert result.error.status_text == "Response did not contain testId"
    assert result.error.api_name == "initScmReport"
