"""
Shared fixtures for the apicall test suite.

Provides fake httpx clients backed by httpx.MockTransport and
environment variable management.
"""

import os
import sys
from pathlib import Path

import httpx
import pytest

# Ensure the project root is on sys.path so tests can import project modules
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


BASE_URL = "https://api.test"


@pytest.fixture
def make_client():
    """Build an AsyncClient whose requests are answered by handler(request)."""

    def factory(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def recorder():
    """A transport handler that records requests and replies with a fixed response.

    Call recorder.respond(...) before executing; inspect recorder.requests after.
    """

    class Recorder:
        def __init__(self):
            self.requests: list[httpx.Request] = []
            self.respond(200, json={"ok": True})

        def respond(self, status_code: int, **kwargs) -> None:
            self._reply = (status_code, kwargs)

        def __call__(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            status_code, kwargs = self._reply
            return httpx.Response(status_code, **kwargs)

        @property
        def last(self) -> httpx.Request:
            return self.requests[-1]

    return Recorder()


@pytest.fixture
def clean_env():
    """Temporarily clear apicall env vars to avoid side effects."""
    keys = ["APICALL_CONFIG", "APICALL_BASE_URL", "APICALL_LOG_LEVEL"]
    saved = {}
    for key in keys:
        if key in os.environ:
            saved[key] = os.environ.pop(key)
    yield
    # Restore
    for key, val in saved.items():
        os.environ[key] = val
    for key in keys:
        if key not in saved and key in os.environ:
            del os.environ[key]
