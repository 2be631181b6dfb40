"""Login session establishment.

A login starts locally: :func:`start_session` mints a draft token and the
browser URL the user opens.  The caller then polls :func:`check_session`
with the same token until the service exchanges it for an API token.
"""

from __future__ import annotations

import logging
import uuid

from pydantic import BaseModel, ConfigDict

from code_client.constants import ErrorCodes
from code_client.result import Result, build_error, success
from code_client.taxonomy import taxonomy_for
from code_client.transport import IPV6_FAMILY, Payload, RequestExecutor, get_default_executor

logger = logging.getLogger(__name__)

# Statuses that mean "not confirmed yet" rather than failure.
_PENDING_CODES = frozenset(
    {
        ErrorCodes.LOGIN_IN_PROGRESS,
        ErrorCodes.BAD_REQUEST,
        ErrorCodes.UNAUTHORIZED_USER,
    }
)


class SessionRecord(BaseModel):
    """Draft token and the login URL that embeds it."""

    model_config = ConfigDict(frozen=True)

    draft_token: str
    login_url: str


def start_session(auth_host: str, source: str) -> SessionRecord:
    draft_token = str(uuid.uuid4())
    login_url = (
        f"{auth_host}/login?token={draft_token}"
        f"&utm_medium={source}&utm_source={source}&utm_campaign={source}"
        "&docker=false"
    )
    logger.info("Login session started (source=%s)", source)
    return SessionRecord(draft_token=draft_token, login_url=login_url)


def get_verify_callback_url(auth_host: str) -> str:
    return f"{auth_host}/api/verify/callback"


async def get_ip_family(
    auth_host: str,
    executor: RequestExecutor | None = None,
) -> int | None:
    """Probe whether the client can reach *auth_host* over IPv6.

    Sends one forced-IPv6 request with no retries.

    Returns:
        ``6`` if the probe succeeded, ``None`` otherwise.
    """
    executor = executor or get_default_executor()
    res = await executor.execute(
        Payload(
            url=get_verify_callback_url(auth_host),
            method="post",
            family=IPV6_FAMILY,
        ),
        0,
    )
    if not res.success:
        logger.debug("IPv6 probe failed (%s); using default address family", res.error_code)
        return None
    return IPV6_FAMILY


async def check_session(
    auth_host: str,
    draft_token: str,
    ip_family: int | None = None,
    executor: RequestExecutor | None = None,
) -> Result[str]:
    """Ask whether the login for *draft_token* has been confirmed.

    Returns:
        Success with the API token once confirmed, success with ``""``
        while the login is still pending, or an error for transport
        failures and unexpected statuses.
    """
    api_name = "checkSession"
    executor = executor or get_default_executor()
    res = await executor.execute(
        Payload(
            url=get_verify_callback_url(auth_host),
            method="post",
            body={"token": draft_token},
            family=ip_family,
        )
    )

    if res.success:
        body = res.body if isinstance(res.body, dict) else {}
        token = (body.get("ok") and body.get("api")) or ""
        return success(token)
    if res.error_code in _PENDING_CODES:
        logger.debug("Login not confirmed yet (status %s)", res.error_code)
        return success("")

    logger.warning("Session check failed with status %s", res.error_code)
    return build_error(res.error_code, taxonomy_for(api_name), api_name)
