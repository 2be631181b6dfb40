"""Analysis retrieval for an uploaded bundle.

:func:`get_analysis` is a single request.  The service answers with a
progress body (``{"status": "ANALYZING", "progress": 0.4}``), a failure
body (``{"status": "FAILED"}``) or the final result; the caller invokes it
repeatedly until :func:`is_terminal` holds for :func:`poll_status`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from code_client.connection import ConnectionOptions, common_http_headers
from code_client.constants import MAX_RETRY_ATTEMPTS
from code_client.http_utils import UrlConstructionError, get_url
from code_client.result import Result, build_error, build_preflight_error, success
from code_client.taxonomy import taxonomy_for
from code_client.transport import Payload, RequestExecutor, get_default_executor

logger = logging.getLogger(__name__)


class AnalysisStatus(Enum):
    """Job status reported by analysis and report polls."""

    WAITING = "WAITING"
    FETCHING = "FETCHING"
    ANALYZING = "ANALYZING"
    DONE = "DONE"
    FAILED = "FAILED"
    COMPLETE = "COMPLETE"


TERMINAL_STATUSES = frozenset({AnalysisStatus.COMPLETE, AnalysisStatus.FAILED})


class WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AnalysisContext(WireModel):
    """Who triggered the analysis; forwarded to the service for attribution."""

    flow: str
    initiator: Literal["IDE", "CLI"]
    org_display_name: str | None = None
    org_public_id: str | None = None
    project_name: str | None = None
    project_public_id: str | None = None


class AnalysisOptions(WireModel):
    severity: int | None = None
    prioritized: bool | None = None
    legacy: bool | None = None
    limit_to_files: list[str] | None = None
    shard: str | None = None
    analysis_context: AnalysisContext | None = None


def build_analysis_key(bundle_hash: str, options: AnalysisOptions) -> dict[str, Any]:
    """Build the ``key`` object identifying what to analyse."""
    key: dict[str, Any] = {
        "type": "file",
        "hash": bundle_hash,
        "limitToFiles": list(options.limit_to_files or []),
    }
    if options.shard:
        key["shard"] = options.shard
    return key


def build_pass_through_fields(
    options: AnalysisOptions,
    include_legacy: bool = True,
) -> dict[str, Any]:
    """Copy the optional analysis flags that are set onto a request body."""
    fields: dict[str, Any] = {}
    if options.severity is not None:
        fields["severity"] = options.severity
    if options.prioritized is not None:
        fields["prioritized"] = options.prioritized
    if include_legacy and options.legacy is not None:
        fields["legacy"] = options.legacy
    if options.analysis_context is not None:
        fields["analysisContext"] = options.analysis_context.model_dump(
            by_alias=True, exclude_none=True
        )
    return fields


def build_analysis_body(bundle_hash: str, options: AnalysisOptions) -> dict[str, Any]:
    body: dict[str, Any] = {"key": build_analysis_key(bundle_hash, options)}
    body.update(build_pass_through_fields(options))
    return body


def poll_status(body: Any) -> AnalysisStatus | None:
    """Return the status of a poll response body, or None if unrecognised."""
    if not isinstance(body, dict):
        return None
    try:
        return AnalysisStatus(body.get("status"))
    except ValueError:
        return None


def is_terminal(status: AnalysisStatus | None) -> bool:
    return status in TERMINAL_STATUSES


async def get_analysis(
    options: ConnectionOptions,
    bundle_hash: str,
    analysis_options: AnalysisOptions | None = None,
    attempts: int = MAX_RETRY_ATTEMPTS,
    executor: RequestExecutor | None = None,
) -> Result[dict]:
    """Request analysis results for *bundle_hash* (one request, no polling)."""
    api_name = "getAnalysis"
    try:
        url = get_url(options.base_url, "/analysis", options.org)
    except UrlConstructionError as exc:
        return build_preflight_error(api_name, str(exc))

    payload = Payload(
        url=url,
        method="post",
        headers=common_http_headers(options),
        body=build_analysis_body(bundle_hash, analysis_options or AnalysisOptions()),
    )

    executor = executor or get_default_executor()
    res = await executor.execute(payload, attempts)
    if res.success:
        logger.debug("Analysis of %s: status=%s", bundle_hash, poll_status(res.body))
        return success(res.body)
    return build_error(res.error_code, taxonomy_for(api_name), api_name)
