"""Error codes, default error messages, and request limits.

Status codes mirror the HTTP statuses the analysis service returns, plus
two synthetic codes (452, 453) the request executor assigns to transport
failures that never produced an HTTP response.
"""

from enum import IntEnum

# Maximum bundle payload accepted by the service (4MB).
MAX_PAYLOAD = 4 * 1024 * 1024

# Default attempt budget for idempotent reads (filters, bundle checks, polls).
MAX_RETRY_ATTEMPTS = 10

# Bundle create/extend are not idempotent: a single try by default.
MUTATION_RETRY_ATTEMPTS = 1

# Seconds between executor retries.
REQUEST_RETRY_DELAY = 5.0

# Gateway hosts require an org segment; /filters is org-independent.
FILTERS_PLACEHOLDER_ORG = "00000000-0000-0000-0000-000000000000"


class ErrorCodes(IntEnum):
    """Status codes an operation may surface in a ResultError."""

    LOGIN_IN_PROGRESS = 304
    BAD_REQUEST = 400
    UNAUTHORIZED_USER = 401
    UNAUTHORIZED_BUNDLE_ACCESS = 403
    NOT_FOUND = 404
    BIG_PAYLOAD = 413
    DNS_NOT_FOUND = 452
    CONNECTION_REFUSED = 453
    SERVER_ERROR = 500
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    TIMEOUT = 504


DEFAULT_ERROR_MESSAGES: dict[ErrorCodes, str] = {
    ErrorCodes.SERVER_ERROR: "Unexpected server error",
    ErrorCodes.BAD_GATEWAY: "Bad gateway",
    ErrorCodes.SERVICE_UNAVAILABLE: "Service unavailable",
    ErrorCodes.TIMEOUT: "Timeout occurred. Try again later.",
    ErrorCodes.DNS_NOT_FOUND: "[Connection issue] Could not resolve domain",
    ErrorCodes.CONNECTION_REFUSED: "[Connection issue] Connection refused",
    ErrorCodes.LOGIN_IN_PROGRESS: "Login has not been confirmed yet",
    ErrorCodes.BAD_REQUEST: "Bad request",
    ErrorCodes.UNAUTHORIZED_USER: "Missing, revoked or inactive token",
    ErrorCodes.UNAUTHORIZED_BUNDLE_ACCESS: "Unauthorized access to requested bundle analysis",
    ErrorCodes.NOT_FOUND: "Not found",
    ErrorCodes.BIG_PAYLOAD: f"Payload too large (max is {MAX_PAYLOAD}b)",
}

# Transport-level codes common to nearly every operation.
GENERIC_ERROR_CODES: tuple[ErrorCodes, ...] = (
    ErrorCodes.SERVER_ERROR,
    ErrorCodes.BAD_GATEWAY,
    ErrorCodes.SERVICE_UNAVAILABLE,
    ErrorCodes.TIMEOUT,
    ErrorCodes.DNS_NOT_FOUND,
    ErrorCodes.CONNECTION_REFUSED,
)

# Executor retries these; anything else is returned on the first failure.
RETRYABLE_ERROR_CODES: frozenset[int] = frozenset(
    {
        ErrorCodes.SERVER_ERROR,
        ErrorCodes.BAD_GATEWAY,
        ErrorCodes.SERVICE_UNAVAILABLE,
        ErrorCodes.TIMEOUT,
        ErrorCodes.DNS_NOT_FOUND,
        ErrorCodes.CONNECTION_REFUSED,
    }
)
