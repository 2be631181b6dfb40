"""Connection context and common headers."""

import pytest
from pydantic import ValidationError

from code_client.connection import ConnectionOptions, common_http_headers


def test_minimal_headers():
    options = ConnectionOptions(base_url="https://deeproxy.test", session_token="tok", source="cli")
    assert common_http_headers(options) == {"Authorization": "tok", "source": "cli"}


def test_optional_request_id_and_org_headers():
    options = ConnectionOptions(
        base_url="https://deeproxy.test",
        session_token="tok",
        source="cli",
        request_id="req-1",
        org="acme",
    )
    headers = common_http_headers(options)
    assert headers["khulnasoft-request-id"] == "req-1"
    assert headers["khulnasoft-org-name"] == "acme"


def test_empty_optional_values_are_omitted():
    options = ConnectionOptions(
        base_url="https://deeproxy.test", session_token="tok", source="cli", request_id="", org=""
    )
    headers = common_http_headers(options)
    assert "khulnasoft-request-id" not in headers
    assert "khulnasoft-org-name" not in headers


def test_extra_headers_are_applied_last_and_may_override():
    options = ConnectionOptions(
        base_url="https://deeproxy.test",
        session_token="tok",
        source="cli",
        extra_headers={"source": "ide", "x-trace": "1"},
    )
    headers = common_http_headers(options)
    assert headers["source"] == "ide"
    assert headers["x-trace"] == "1"
    assert headers["Authorization"] == "tok"


def test_connection_options_are_frozen():
    options = ConnectionOptions(base_url="https://deeproxy.test", session_token="tok", source="cli")
    with pytest.raises(ValidationError):
        options.session_token = "other"
