"""URL construction for the analysis service.

Direct hosts serve endpoints at ``{base_url}{path}``.  Gateway hosts
(``api.*``) proxy the service under ``/hidden/orgs/{org}/code`` and
therefore need a UUID-shaped org id.
"""

from __future__ import annotations

import re

import httpx

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


class UrlConstructionError(ValueError):
    """The base URL or org segment cannot form a request URL."""


def is_valid_org(org: str | None) -> bool:
    return org is not None and bool(_UUID_RE.match(org))


def route_to_gateway(base_url: str) -> bool:
    """Return True if *base_url* points at an API gateway host."""
    host = httpx.URL(base_url).host
    return host.startswith("api.")


def get_url(base_url: str, path: str = "/", org: str | None = None) -> str:
    """Build the absolute endpoint URL for *path*.

    Raises:
        UrlConstructionError: If *base_url* is not an absolute http(s) URL,
            or a gateway host is used without a valid org id.
    """
    try:
        parsed = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise UrlConstructionError(f"Invalid base URL {base_url!r}: {exc}") from exc

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise UrlConstructionError(f"Invalid base URL {base_url!r}: expected http(s)://host")

    base = base_url.rstrip("/")
    if route_to_gateway(base):
        if not is_valid_org(org):
            raise UrlConstructionError("A valid Org id is required for this operation")
        return f"{base}/hidden/orgs/{org}/code{path}"
    return f"{base}{path}"
