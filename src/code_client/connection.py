"""Connection context shared by every authenticated client call."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ConnectionOptions(BaseModel):
    """Endpoint, credentials and client identity for one session.

    Frozen: a single instance is shared read-only across concurrent calls.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    session_token: str
    source: str
    request_id: str | None = None
    org: str | None = None
    extra_headers: dict[str, str] | None = None


def common_http_headers(options: ConnectionOptions) -> dict[str, str]:
    """Headers sent on every authenticated request.

    ``extra_headers`` are applied last and may override any earlier key.
    """
    headers: dict[str, str] = {
        "Authorization": options.session_token,
        "source": options.source,
    }
    if options.request_id:
        headers["khulnasoft-request-id"] = options.request_id
    if options.org:
        headers["khulnasoft-org-name"] = options.org
    if options.extra_headers:
        headers.update(options.extra_headers)
    return headers
