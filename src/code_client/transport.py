"""httpx-based request executor with a bounded retry budget.

:class:`RequestExecutor` performs one logical request and reduces every
outcome to a :class:`SuccessResponse` or :class:`FailedResponse`; it never
raises for HTTP or transport failures.  Retries on transient failures are
handled by tenacity, bounded by the ``max_attempts`` each caller passes.

Requests with ``family=6`` are routed through a transport bound to the IPv6
wildcard address, which forces the connection onto IPv6.
"""

from __future__ import annotations

import json
import logging
import socket
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from code_client.constants import (
    MAX_RETRY_ATTEMPTS,
    REQUEST_RETRY_DELAY,
    RETRYABLE_ERROR_CODES,
    ErrorCodes,
)

if TYPE_CHECKING:
    from code_client.config.settings import ClientSettings

logger = logging.getLogger(__name__)

IPV6_FAMILY = 6

_TOO_MANY_REQUESTS = 429

_KNOWN_STATUSES = frozenset(int(code) for code in ErrorCodes)

# Fragments of resolver errors across platforms (glibc, macOS, Windows).
_DNS_ERROR_HINTS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "no address associated",
)


@dataclass(frozen=True)
class Payload:
    """A single request description handed to the executor."""

    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    is_json: bool = True
    family: int | None = None


@dataclass(frozen=True)
class SuccessResponse:
    body: Any
    success: bool = True


@dataclass(frozen=True)
class FailedResponse:
    error_code: int
    error: str | None = None
    success: bool = False
    # Raw HTTP status when it differs from error_code.
    http_status: int | None = None


Response = SuccessResponse | FailedResponse


def _is_retryable(response: Response) -> bool:
    if response.success or response.error_code not in RETRYABLE_ERROR_CODES:
        return False
    status = response.http_status
    return status is None or status >= 500 or status == _TOO_MANY_REQUESTS


def _return_last_response(retry_state) -> Response:
    """Hand back the final failed response once attempts are exhausted."""
    return retry_state.outcome.result()


def _error_message(response: httpx.Response) -> str | None:
    """Extract the server's ``message`` field from an error body, if any."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return None


def _normalise_status(status: int) -> ErrorCodes:
    """Map an HTTP status onto the declared error codes.

    Statuses outside :class:`ErrorCodes` (429, 409, 422, unfollowed 3xx,
    507 and so on) are reported as a generic code that every operation
    declares.
    """
    if status in _KNOWN_STATUSES:
        return ErrorCodes(status)
    if status == _TOO_MANY_REQUESTS:
        return ErrorCodes.SERVICE_UNAVAILABLE
    return ErrorCodes.SERVER_ERROR


def _classify_transport_error(exc: httpx.TransportError) -> ErrorCodes:
    """Map an httpx transport exception to a synthetic status code."""
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCodes.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        cause = exc.__cause__ or exc.__context__
        text = f"{exc} {cause or ''}".lower()
        if isinstance(cause, socket.gaierror) or any(hint in text for hint in _DNS_ERROR_HINTS):
            return ErrorCodes.DNS_NOT_FOUND
        return ErrorCodes.CONNECTION_REFUSED
    return ErrorCodes.SERVICE_UNAVAILABLE


class RequestExecutor:
    """Executes requests against the analysis service.

    One ``httpx.AsyncClient`` is kept per address family and reused across
    calls; call :meth:`aclose` when done.  Pass *transport* to substitute
    the network (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        timeout: float = 60.0,
        retry_delay: float = REQUEST_RETRY_DELAY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._timeout = timeout
        self._retry_delay = retry_delay
        self._transport = transport
        self._clients: dict[int | None, httpx.AsyncClient] = {}

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> RequestExecutor:
        return cls(
            timeout=settings.request_timeout_seconds,
            retry_delay=settings.retry_delay_seconds,
        )

    def _client_for(self, family: int | None) -> httpx.AsyncClient:
        client = self._clients.get(family)
        if client is None:
            transport = self._transport
            if transport is None and family == IPV6_FAMILY:
                transport = httpx.AsyncHTTPTransport(local_address="::")
            client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=transport,
                follow_redirects=True,
            )
            self._clients[family] = client
        return client

    async def _send(self, payload: Payload) -> Response:
        client = self._client_for(payload.family)
        kwargs: dict[str, Any] = {"headers": payload.headers}
        if payload.body is not None:
            if payload.is_json:
                kwargs["json"] = payload.body
            else:
                kwargs["content"] = payload.body

        try:
            response = await client.request(payload.method.upper(), payload.url, **kwargs)
        except httpx.TransportError as exc:
            code = _classify_transport_error(exc)
            logger.warning(
                "%s %s failed before a response (%s): %s",
                payload.method.upper(),
                payload.url,
                code.name,
                exc,
            )
            return FailedResponse(error_code=code, error=str(exc))

        if not 200 <= response.status_code < 300:
            logger.debug(
                "%s %s -> %d",
                payload.method.upper(),
                payload.url,
                response.status_code,
            )
            code = _normalise_status(response.status_code)
            return FailedResponse(
                error_code=code,
                error=_error_message(response),
                http_status=None if code == response.status_code else response.status_code,
            )

        if not response.content:
            return SuccessResponse(body=None)
        try:
            body = response.json()
        except json.JSONDecodeError as exc:
            logger.error("Undecodable JSON body from %s: %s", payload.url, exc)
            return FailedResponse(error_code=ErrorCodes.SERVER_ERROR, error=str(exc))
        return SuccessResponse(body=body)

    async def execute(
        self,
        payload: Payload,
        max_attempts: int = MAX_RETRY_ATTEMPTS,
    ) -> Response:
        """Perform *payload*, retrying transient failures.

        Args:
            payload: The request to perform.
            max_attempts: Total number of tries; values below 1 mean a
                single try with no retry.

        Returns:
            The first success, the first non-retryable failure, or the last
            failure once the budget is spent.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, max_attempts)),
            wait=wait_fixed(self._retry_delay),
            retry=retry_if_result(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            retry_error_callback=_return_last_response,
        )
        return await retrying(self._send, payload)

    async def aclose(self) -> None:
        for client in self._clients.values():
            await client.aclose()
        self._clients.clear()


_default_executor: RequestExecutor | None = None


def get_default_executor() -> RequestExecutor:
    """Return the module-level executor, creating it on first use."""
    global _default_executor
    if _default_executor is None:
        _default_executor = RequestExecutor()
    return _default_executor


def set_default_executor(executor: RequestExecutor | None) -> None:
    """Replace the module-level executor (``None`` resets to lazy default)."""
    global _default_executor
    _default_executor = executor
