"""Async client for a remote code-analysis service.

Public API
----------
Sessions:  start_session, get_ip_family, check_session
Bundles:   get_filters, create_bundle, check_bundle, extend_bundle
Analysis:  get_analysis
Reports:   init_report, get_report, init_scm_report, get_scm_report
Polling:   poll_until_terminal

Every network operation returns a :class:`ResultSuccess` or
:class:`ResultError`; expected failures are never raised.
"""

from code_client.analysis import (
    AnalysisContext,
    AnalysisOptions,
    AnalysisStatus,
    get_analysis,
    is_terminal,
    poll_status,
)
from code_client.bundle import (
    BundleFiles,
    RemoteBundle,
    check_bundle,
    create_bundle,
    extend_bundle,
    get_filters,
)
from code_client.connection import ConnectionOptions, common_http_headers
from code_client.constants import ErrorCodes
from code_client.encoding import compress_and_encode
from code_client.poller import poll_until_terminal
from code_client.report import (
    ReportOptions,
    ScmReportOptions,
    get_report,
    get_scm_report,
    init_report,
    init_scm_report,
)
from code_client.result import (
    ApiError,
    ErrorTaxonomyViolation,
    Result,
    ResultError,
    ResultSuccess,
    build_error,
)
from code_client.session import (
    SessionRecord,
    check_session,
    get_ip_family,
    get_verify_callback_url,
    start_session,
)
from code_client.transport import RequestExecutor, get_default_executor, set_default_executor

__all__ = [
    "AnalysisContext",
    "AnalysisOptions",
    "AnalysisStatus",
    "ApiError",
    "BundleFiles",
    "ConnectionOptions",
    "ErrorCodes",
    "ErrorTaxonomyViolation",
    "RemoteBundle",
    "ReportOptions",
    "RequestExecutor",
    "Result",
    "ResultError",
    "ResultSuccess",
    "ScmReportOptions",
    "SessionRecord",
    "build_error",
    "check_bundle",
    "check_session",
    "common_http_headers",
    "compress_and_encode",
    "create_bundle",
    "extend_bundle",
    "get_analysis",
    "get_default_executor",
    "get_filters",
    "get_ip_family",
    "get_report",
    "get_scm_report",
    "get_verify_callback_url",
    "init_report",
    "init_scm_report",
    "is_terminal",
    "poll_status",
    "poll_until_terminal",
    "set_default_executor",
    "start_session",
]
