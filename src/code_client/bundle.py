"""Remote bundle lifecycle: create, check, extend.

A bundle is a server-side, content-addressed snapshot of files.  Creating
one returns its hash plus the paths whose content the server still lacks
(``missingFiles``); extending uploads a delta against an existing hash and
returns a new bundle.  The parent hash is never modified.

``files`` maps a relative path to the descriptor the caller's file-policy
layer produced (a content hash, or ``{"hash": ..., "content": ...}``).  It
is passed through opaque.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from code_client.connection import ConnectionOptions, common_http_headers
from code_client.constants import (
    FILTERS_PLACEHOLDER_ORG,
    MAX_RETRY_ATTEMPTS,
    MUTATION_RETRY_ATTEMPTS,
)
from code_client.encoding import compress_and_encode
from code_client.http_utils import UrlConstructionError, get_url
from code_client.result import Result, build_error, build_preflight_error, success
from code_client.taxonomy import taxonomy_for
from code_client.transport import Payload, RequestExecutor, get_default_executor

logger = logging.getLogger(__name__)

BundleFiles = dict[str, Any]

_OCTET_STREAM_HEADERS = {
    "content-type": "application/octet-stream",
    "content-encoding": "gzip",
}


class RemoteBundle(BaseModel):
    """Typed view of a bundle response body."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bundle_hash: str = Field(alias="bundleHash")
    missing_files: list[str] = Field(default_factory=list, alias="missingFiles")


def _upload_headers(options: ConnectionOptions) -> dict[str, str]:
    headers = dict(_OCTET_STREAM_HEADERS)
    headers.update(common_http_headers(options))
    return headers


async def get_filters(
    base_url: str,
    source: str,
    attempts: int = MAX_RETRY_ATTEMPTS,
    request_id: str | None = None,
    executor: RequestExecutor | None = None,
) -> Result[dict]:
    """Fetch the supported-files descriptor (``configFiles``, ``extensions``)."""
    api_name = "filters"
    try:
        url = get_url(base_url, "/filters", FILTERS_PLACEHOLDER_ORG)
    except UrlConstructionError as exc:
        return build_preflight_error(api_name, str(exc))

    headers = {"source": source}
    if request_id:
        headers["khulnasoft-request-id"] = request_id

    executor = executor or get_default_executor()
    res = await executor.execute(Payload(url=url, method="get", headers=headers), attempts)
    if res.success:
        return success(res.body)
    return build_error(res.error_code, taxonomy_for(api_name), api_name)


async def create_bundle(
    options: ConnectionOptions,
    files: BundleFiles,
    attempts: int = MUTATION_RETRY_ATTEMPTS,
    executor: RequestExecutor | None = None,
) -> Result[dict]:
    """Upload a new bundle describing *files*."""
    api_name = "createBundle"
    try:
        url = get_url(options.base_url, "/bundle", options.org)
    except UrlConstructionError as exc:
        return build_preflight_error(api_name, str(exc))

    payload = Payload(
        url=url,
        method="post",
        headers=_upload_headers(options),
        body=compress_and_encode(files),
        is_json=False,
    )
    logger.info("Creating bundle with %d file(s)", len(files))

    executor = executor or get_default_executor()
    res = await executor.execute(payload, attempts)
    if res.success:
        return success(res.body)
    return build_error(res.error_code, taxonomy_for(api_name), api_name)


async def check_bundle(
    options: ConnectionOptions,
    bundle_hash: str,
    attempts: int = MAX_RETRY_ATTEMPTS,
    executor: RequestExecutor | None = None,
) -> Result[dict]:
    """Fetch the current state of bundle *bundle_hash*.

    A ``NOT_FOUND`` error means the bundle expired on the server.
    """
    api_name = "checkBundle"
    try:
        url = get_url(options.base_url, f"/bundle/{bundle_hash}", options.org)
    except UrlConstructionError as exc:
        return build_preflight_error(api_name, str(exc))

    executor = executor or get_default_executor()
    res = await executor.execute(
        Payload(url=url, method="get", headers=common_http_headers(options)),
        attempts,
    )
    if res.success:
        return success(res.body)
    return build_error(res.error_code, taxonomy_for(api_name), api_name)


async def extend_bundle(
    options: ConnectionOptions,
    bundle_hash: str,
    files: BundleFiles,
    removed_files: list[str] | None = None,
    attempts: int = MUTATION_RETRY_ATTEMPTS,
    executor: RequestExecutor | None = None,
) -> Result[dict]:
    """Upload a delta against *bundle_hash* and return the extended bundle.

    *removed_files* must not overlap the keys of *files*; this is not
    checked here.
    """
    api_name = "extendBundle"
    try:
        url = get_url(options.base_url, f"/bundle/{bundle_hash}", options.org)
    except UrlConstructionError as exc:
        return build_preflight_error(api_name, str(exc))

    delta: dict[str, Any] = {"files": files}
    if removed_files is not None:
        delta["removedFiles"] = removed_files

    payload = Payload(
        url=url,
        method="put",
        headers=_upload_headers(options),
        body=compress_and_encode(delta),
        is_json=False,
    )
    logger.info(
        "Extending bundle %s: %d file(s) added, %d removed",
        bundle_hash,
        len(files),
        len(removed_files or []),
    )

    executor = executor or get_default_executor()
    res = await executor.execute(payload, attempts)
    if res.success:
        return success(res.body)
    return build_error(res.error_code, taxonomy_for(api_name), api_name)
