"""Shared test fixtures for enode_client.

Provides a fake timer for driving the background refresh by hand, helpers
for building :class:`httpx.MockTransport` backends that answer both the
token endpoint and the API, and output-state management. These fixtures
are discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from enode_client.environments import CustomEnvironment
from enode_client.models import Token
from enode_client.output import reset_output
from enode_client.session import Session


API_URL = "https://api.test.enode.io"
TOKEN_URL = f"{API_URL}/oauth2/token"

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. CliRunner swaps those streams per invocation, so a
    manager surviving into the next test would write to a closed file.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fake timer
# ---------------------------------------------------------------------------


class FakeTimer:
    """Records its delay and fires only when the test says so."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.callback()


class FakeTimerFactory:
    """Timer factory that keeps every timer it builds."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]

    @property
    def delays(self) -> list[float]:
        return [timer.delay for timer in self.timers]


@pytest.fixture
def timers() -> FakeTimerFactory:
    return FakeTimerFactory()


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


def token_body(
    access_token: str = "access-1",
    expires_in: Any = 3600,
    token_type: str = "bearer",
    scope: str = "",
) -> dict[str, Any]:
    """Build a token endpoint JSON response."""
    return {
        "access_token": access_token,
        "expires_in": expires_in,
        "token_type": token_type,
        "scope": scope,
    }


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=data)


class Router:
    """Minimal request router for MockTransport backends.

    Routes are keyed by ``(method, path)``. Every request is recorded in
    :attr:`requests`. Unrouted requests get a 599 so a test notices them.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, response: Any) -> None:
        if callable(response) and not isinstance(response, httpx.Response):
            self.routes[(method, path)] = response
        else:
            self.routes[(method, path)] = lambda request: response

    def token(self, *responses: httpx.Response) -> None:
        """Answer the token endpoint with *responses* in turn (the last one repeats)."""
        queue = list(responses)

        def handler(request: httpx.Request) -> httpx.Response:
            return queue.pop(0) if len(queue) > 1 else queue[0]

        self.routes[("POST", "/oauth2/token")] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(599, text="no route")
        response = handler(request)
        # Canned responses are shared between calls; hand out a copy each time.
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            content=response.content,
        )

    def bodies(self, method: str, path: str) -> list[Optional[Any]]:
        """JSON bodies of the recorded requests to *method* *path*."""
        return [
            json.loads(request.content) if request.content else None
            for request in self.requests
            if request.method == method and request.url.path == path
        ]


@pytest.fixture
def router() -> Router:
    return Router()


@pytest.fixture
def http_client(router: Router) -> httpx.Client:
    client = httpx.Client(transport=httpx.MockTransport(router))
    yield client
    client.close()


@pytest.fixture
def environment() -> CustomEnvironment:
    return CustomEnvironment(API_URL)


@pytest.fixture
def session(http_client: httpx.Client, environment: CustomEnvironment) -> Session:
    """A session with a fixed token, talking to the router."""
    sess = Session(
        Token(access_token="test-token", token_type="bearer"),
        environment,
        http_client=http_client,
    )
    yield sess
    sess.close()
