"""Report workflows: file-based (``/report``) and SCM-based (``/test``).

Both workflows start with an ``init`` call that returns a poll id and are
then polled with the matching ``get`` call.  Poll bodies share the shape
of analysis polls (progress, ``FAILED``, or the final report), so the same
:func:`~code_client.analysis.poll_status` applies.
"""

from __future__ import annotations

import logging
from typing import Any

from code_client.analysis import (
    AnalysisOptions,
    WireModel,
    build_analysis_key,
    build_pass_through_fields,
)
from code_client.connection import ConnectionOptions, common_http_headers
from code_client.constants import MAX_RETRY_ATTEMPTS, ErrorCodes
from code_client.http_utils import UrlConstructionError, get_url
from code_client.result import Result, build_error, build_preflight_error, success
from code_client.taxonomy import taxonomy_for
from code_client.transport import Payload, RequestExecutor, get_default_executor

logger = logging.getLogger(__name__)


class ReportOptions(WireModel):
    """Project identity attached to a file-based report."""

    project_name: str | None = None
    target_name: str | None = None
    target_ref: str | None = None
    remote_repo_url: str | None = None


class ScmReportOptions(WireModel):
    """Project and commit identifying an SCM-based test."""

    project_id: str
    commit_id: str


def build_report_body(
    bundle_hash: str,
    report: ReportOptions,
    options: AnalysisOptions,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "workflowData": {
            "projectName": report.project_name,
            "targetName": report.target_name,
            "targetRef": report.target_ref,
            "remoteRepoUrl": report.remote_repo_url,
        },
        "key": build_analysis_key(bundle_hash, options),
    }
    body.update(build_pass_through_fields(options))
    return body


def build_scm_report_body(scm: ScmReportOptions, options: AnalysisOptions) -> dict[str, Any]:
    body: dict[str, Any] = {
        "workflowData": {
            "projectId": scm.project_id,
            "commitHash": scm.commit_id,
        },
    }
    # SCM tests have no legacy result format.
    body.update(build_pass_through_fields(options, include_legacy=False))
    return body


async def _init(
    api_name: str,
    options: ConnectionOptions,
    path: str,
    body: dict[str, Any],
    id_field: str,
    attempts: int,
    executor: RequestExecutor | None,
) -> Result[str]:
    try:
        url = get_url(options.base_url, path, options.org)
    except UrlConstructionError as exc:
        return build_preflight_error(api_name, str(exc))

    executor = executor or get_default_executor()
    res = await executor.execute(
        Payload(url=url, method="post", headers=common_http_headers(options), body=body),
        attempts,
    )
    if res.success:
        poll_id = res.body.get(id_field) if isinstance(res.body, dict) else None
        if not poll_id:
            logger.error("%s response did not contain %s", api_name, id_field)
            return build_error(
                ErrorCodes.SERVER_ERROR,
                taxonomy_for(api_name),
                api_name,
                f"Response did not contain {id_field}",
            )
        logger.info("%s started: %s=%s", api_name, id_field, poll_id)
        return success(poll_id)
    return build_error(res.error_code, taxonomy_for(api_name), api_name)


async def _get(
    api_name: str,
    options: ConnectionOptions,
    path: str,
    attempts: int,
    executor: RequestExecutor | None,
) -> Result[dict]:
    try:
        url = get_url(options.base_url, path, options.org)
    except UrlConstructionError as exc:
        return build_preflight_error(api_name, str(exc))

    executor = executor or get_default_executor()
    res = await executor.execute(
        Payload(url=url, method="get", headers=common_http_headers(options)),
        attempts,
    )
    if res.success:
        return success(res.body)
    # The service explains report failures; prefer its text over the default.
    return build_error(res.error_code, taxonomy_for(api_name), api_name, res.error)


async def init_report(
    options: ConnectionOptions,
    bundle_hash: str,
    report: ReportOptions,
    analysis_options: AnalysisOptions | None = None,
    attempts: int = MAX_RETRY_ATTEMPTS,
    executor: RequestExecutor | None = None,
) -> Result[str]:
    """Trigger a file-based test with reporting; returns the report id."""
    body = build_report_body(bundle_hash, report, analysis_options or AnalysisOptions())
    return await _init("initReport", options, "/report", body, "reportId", attempts, executor)


async def get_report(
    options: ConnectionOptions,
    poll_id: str,
    attempts: int = MAX_RETRY_ATTEMPTS,
    executor: RequestExecutor | None = None,
) -> Result[dict]:
    """Retrieve a file-based test with reporting."""
    return await _get("getReport", options, f"/report/{poll_id}", attempts, executor)


async def init_scm_report(
    options: ConnectionOptions,
    scm: ScmReportOptions,
    analysis_options: AnalysisOptions | None = None,
    attempts: int = MAX_RETRY_ATTEMPTS,
    executor: RequestExecutor | None = None,
) -> Result[str]:
    """Trigger an SCM-based test with reporting; returns the test id."""
    body = build_scm_report_body(scm, analysis_options or AnalysisOptions())
    return await _init("initScmReport", options, "/test", body, "testId", attempts, executor)


async def get_scm_report(
    options: ConnectionOptions,
    poll_id: str,
    attempts: int = MAX_RETRY_ATTEMPTS,
    executor: RequestExecutor | None = None,
) -> Result[dict]:
    """Fetch an SCM-based test with reporting."""
    return await _get("getScmReport", options, f"/test/{poll_id}", attempts, executor)
