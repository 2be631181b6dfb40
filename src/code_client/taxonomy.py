"""Per-operation error taxonomies.

Each operation declares the closed set of status codes it may report,
each mapped to a default message.  Taxonomies are read-only mappings
assembled field-by-field from the generic transport layer plus the
operation's own domain codes.  ``ERROR_TAXONOMIES`` is the single table
of every taxonomy, keyed by operation name.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from code_client.constants import DEFAULT_ERROR_MESSAGES, GENERIC_ERROR_CODES, ErrorCodes

ErrorTaxonomy = Mapping[ErrorCodes, str]


def _taxonomy(
    generic: ErrorTaxonomy,
    domain: dict[ErrorCodes, str],
) -> ErrorTaxonomy:
    """Union the generic layer with *domain*; domain messages win."""
    merged: dict[ErrorCodes, str] = {}
    for code, message in generic.items():
        merged[code] = message
    for code, message in domain.items():
        merged[code] = message
    return MappingProxyType(merged)


def _default(code: ErrorCodes) -> str:
    return DEFAULT_ERROR_MESSAGES[code]


GENERIC_ERROR_MESSAGES: ErrorTaxonomy = MappingProxyType(
    {code: _default(code) for code in GENERIC_ERROR_CODES}
)

# Local pre-flight failures (URL construction) never reach the network.
PREFLIGHT_ERROR_MESSAGES: ErrorTaxonomy = MappingProxyType(
    {ErrorCodes.BAD_REQUEST: _default(ErrorCodes.BAD_REQUEST)}
)

CHECK_SESSION_ERROR_MESSAGES = _taxonomy(
    GENERIC_ERROR_MESSAGES,
    {
        ErrorCodes.UNAUTHORIZED_USER: _default(ErrorCodes.UNAUTHORIZED_USER),
        ErrorCodes.LOGIN_IN_PROGRESS: _default(ErrorCodes.LOGIN_IN_PROGRESS),
    },
)

CREATE_BUNDLE_ERROR_MESSAGES = _taxonomy(
    GENERIC_ERROR_MESSAGES,
    {
        ErrorCodes.UNAUTHORIZED_USER: _default(ErrorCodes.UNAUTHORIZED_USER),
        ErrorCodes.UNAUTHORIZED_BUNDLE_ACCESS: _default(ErrorCodes.UNAUTHORIZED_BUNDLE_ACCESS),
        ErrorCodes.BIG_PAYLOAD: _default(ErrorCodes.BIG_PAYLOAD),
        ErrorCodes.BAD_REQUEST: "Request payload doesn't match the specifications",
        ErrorCodes.NOT_FOUND: "Unable to resolve requested oid",
    },
)

CHECK_BUNDLE_ERROR_MESSAGES = _taxonomy(
    GENERIC_ERROR_MESSAGES,
    {
        ErrorCodes.UNAUTHORIZED_USER: _default(ErrorCodes.UNAUTHORIZED_USER),
        ErrorCodes.UNAUTHORIZED_BUNDLE_ACCESS: _default(ErrorCodes.UNAUTHORIZED_BUNDLE_ACCESS),
        ErrorCodes.NOT_FOUND: "Uploaded bundle has expired",
    },
)

EXTEND_BUNDLE_ERROR_MESSAGES = _taxonomy(
    GENERIC_ERROR_MESSAGES,
    {
        ErrorCodes.UNAUTHORIZED_USER: _default(ErrorCodes.UNAUTHORIZED_USER),
        ErrorCodes.BIG_PAYLOAD: _default(ErrorCodes.BIG_PAYLOAD),
        ErrorCodes.BAD_REQUEST: "Bad request",
        ErrorCodes.UNAUTHORIZED_BUNDLE_ACCESS: "Unauthorized access to parent bundle",
        ErrorCodes.NOT_FOUND: "Parent bundle has expired",
    },
)

GET_ANALYSIS_ERROR_MESSAGES = _taxonomy(
    GENERIC_ERROR_MESSAGES,
    {
        ErrorCodes.UNAUTHORIZED_USER: _default(ErrorCodes.UNAUTHORIZED_USER),
        ErrorCodes.UNAUTHORIZED_BUNDLE_ACCESS: _default(ErrorCodes.UNAUTHORIZED_BUNDLE_ACCESS),
        ErrorCodes.NOT_FOUND: _default(ErrorCodes.NOT_FOUND),
        ErrorCodes.BAD_REQUEST: _default(ErrorCodes.BAD_REQUEST),
        ErrorCodes.SERVER_ERROR: "Getting analysis failed",
    },
)

REPORT_ERROR_MESSAGES = _taxonomy(
    GENERIC_ERROR_MESSAGES,
    {
        ErrorCodes.UNAUTHORIZED_USER: _default(ErrorCodes.UNAUTHORIZED_USER),
        ErrorCodes.UNAUTHORIZED_BUNDLE_ACCESS: _default(ErrorCodes.UNAUTHORIZED_BUNDLE_ACCESS),
        ErrorCodes.NOT_FOUND: _default(ErrorCodes.NOT_FOUND),
        ErrorCodes.BAD_REQUEST: _default(ErrorCodes.BAD_REQUEST),
        ErrorCodes.SERVER_ERROR: "Getting report failed",
    },
)

ERROR_TAXONOMIES: Mapping[str, ErrorTaxonomy] = MappingProxyType(
    {
        "filters": GENERIC_ERROR_MESSAGES,
        "checkSession": CHECK_SESSION_ERROR_MESSAGES,
        "createBundle": CREATE_BUNDLE_ERROR_MESSAGES,
        "checkBundle": CHECK_BUNDLE_ERROR_MESSAGES,
        "extendBundle": EXTEND_BUNDLE_ERROR_MESSAGES,
        "getAnalysis": GET_ANALYSIS_ERROR_MESSAGES,
        "initReport": REPORT_ERROR_MESSAGES,
        "getReport": REPORT_ERROR_MESSAGES,
        "initScmReport": REPORT_ERROR_MESSAGES,
        "getScmReport": REPORT_ERROR_MESSAGES,
    }
)


def taxonomy_for(api_name: str) -> ErrorTaxonomy:
    """Return the declared taxonomy for *api_name*.

    Raises:
        KeyError: If no operation of that name is registered.
    """
    return ERROR_TAXONOMIES[api_name]
