"""Analysis requests and poll-status interpretation."""

import asyncio

import pytest

from code_client.analysis import (
    AnalysisContext,
    AnalysisOptions,
    AnalysisStatus,
    build_analysis_body,
    get_analysis,
    is_terminal,
    poll_status,
)
from code_client.constants import ErrorCodes
from conftest import BASE_URL, SESSION_TOKEN, FakeExecutor, fail, ok


def test_default_body_has_only_the_key():
    assert build_analysis_body("h1", AnalysisOptions()) == {
        "key": {"type": "file", "hash": "h1", "limitToFiles": []},
    }


def test_body_carries_shard_and_pass_through_fields():
    options = AnalysisOptions(
        severity=2,
        prioritized=True,
        legacy=False,
        limit_to_files=["src/app.py"],
        shard="shard-7",
        analysis_context=AnalysisContext(
            flow="ide-test",
            initiator="IDE",
            org_public_id="org-1",
            project_name="demo",
        ),
    )
    assert build_analysis_body("h1", options) == {
        "key": {
            "type": "file",
            "hash": "h1",
            "limitToFiles": ["src/app.py"],
            "shard": "shard-7",
        },
        "severity": 2,
        "prioritized": True,
        "legacy": False,
        "analysisContext": {
            "flow": "ide-test",
            "initiator": "IDE",
            "orgPublicId": "org-1",
            "projectName": "demo",
        },
    }


def test_options_accept_wire_names():
    options = AnalysisOptions.model_validate({"limitToFiles": ["a.py"], "shard": "s"})
    assert options.limit_to_files == ["a.py"]


def test_get_analysis_returns_progress_body_unmodified(options):
    progress = {"status": "ANALYZING", "progress": 0.42}
    executor = FakeExecutor(ok(progress))
    result = asyncio.run(
        get_analysis(options, "h1", AnalysisOptions(severity=1), executor=executor)
    )

    assert result.is_success
    assert result.value is progress
    payload = executor.payloads[0]
    assert payload.url == f"{BASE_URL}/analysis"
    assert payload.method == "post"
    assert payload.is_json is True
    assert payload.headers["Authorization"] == SESSION_TOKEN
    assert payload.body["key"]["hash"] == "h1"
    assert payload.body["severity"] == 1


def test_get_analysis_is_a_single_request(options):
    executor = FakeExecutor(ok({"status": "WAITING", "progress": 0}))
    asyncio.run(get_analysis(options, "h1", executor=executor))
    assert len(executor.calls) == 1


def test_get_analysis_server_error_wording(options):
    executor = FakeExecutor(fail(ErrorCodes.SERVER_ERROR))
    result = asyncio.run(get_analysis(options, "h1", executor=executor))
    assert result.error.status_text == "Getting analysis failed"
    assert result.error.api_name == "getAnalysis"


def test_get_analysis_bad_url_never_reaches_network(bad_options):
    executor = FakeExecutor()
    result = asyncio.run(get_analysis(bad_options, "h1", executor=executor))
    assert result.error.status_code == ErrorCodes.BAD_REQUEST
    assert executor.calls == []


@pytest.mark.parametrize(
    "body, expected",
    [
        ({"status": "WAITING", "progress": 0}, AnalysisStatus.WAITING),
        ({"status": "DONE", "progress": 1}, AnalysisStatus.DONE),
        ({"status": "FAILED"}, AnalysisStatus.FAILED),
        ({"status": "COMPLETE", "suggestions": {}}, AnalysisStatus.COMPLETE),
        ({"status": "EXPLODED"}, None),
        ({}, None),
        (None, None),
    ],
)
def test_poll_status(body, expected):
    assert poll_status(body) is expected


def test_only_complete_and_failed_are_terminal():
    assert is_terminal(AnalysisStatus.COMPLETE)
    assert is_terminal(AnalysisStatus.FAILED)
    assert not is_terminal(AnalysisStatus.DONE)
    assert not is_terminal(AnalysisStatus.ANALYZING)
    assert not is_terminal(None)
