"""Shared fixtures: a scripted executor and a default connection context."""

from __future__ import annotations

import pytest

from code_client.connection import ConnectionOptions
from code_client.constants import MAX_RETRY_ATTEMPTS
from code_client.transport import FailedResponse, Payload, SuccessResponse

BASE_URL = "https://deeproxy.test"
AUTH_HOST = "https://auth.test"
SESSION_TOKEN = "token-123"
SOURCE = "test-source"


class FakeExecutor:
    """Replays scripted responses and records every request it receives.

    The last scripted response is repeated once the script runs out.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[Payload, int]] = []

    async def execute(self, payload: Payload, max_attempts: int = MAX_RETRY_ATTEMPTS):
        self.calls.append((payload, max_attempts))
        if not self.responses:
            raise AssertionError(f"unexpected request: {payload.method} {payload.url}")
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    @property
    def payloads(self) -> list[Payload]:
        return [payload for payload, _ in self.calls]


def ok(body) -> SuccessResponse:
    return SuccessResponse(body=body)


def fail(code: int, message: str | None = None) -> FailedResponse:
    return FailedResponse(error_code=code, error=message)


@pytest.fixture
def options() -> ConnectionOptions:
    return ConnectionOptions(
        base_url=BASE_URL,
        session_token=SESSION_TOKEN,
        source=SOURCE,
    )


@pytest.fixture
def bad_options() -> ConnectionOptions:
    """A context whose base URL cannot form a request URL."""
    return ConnectionOptions(
        base_url="not a url",
        session_token=SESSION_TOKEN,
        source=SOURCE,
    )
