"""
Pytest configuration and shared fixtures for the runner's unit tests.

Provides:
- FakeItemsApi: in-memory HTTP API served through httpx.MockTransport
- Shared state, executor and case-building fixtures
- write_spec: writes a specification module to a temp directory
"""

from __future__ import annotations

import json
import re
import textwrap
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest

from contract_runner.core.config import Settings
from contract_runner.engine.case import TestCase, case_from_row
from contract_runner.engine.executor import CaseExecutor
from contract_runner.engine.state import SharedState

BASE_URL = "http://api.test"

_ITEM_RE = re.compile(r"^/items/(?P<id>[^/]+)$")


class FakeItemsApi:
    """Tiny REST API used as the system under test.

    Routes:
        POST   /items       201 {"id": n, ...body}; 400 without a body
        GET    /items/<id>  200 item | 404
        DELETE /items/<id>  204 | 404
        GET    /whoami      200 with "Authorization: Bearer secret", else 401
        ANY    /echo        200 {"method", "path", "headers", "body"}
        ANY    /down        connection error
        ANY    /slow        read timeout
    """

    def __init__(self) -> None:
        self.items: dict[str, dict[str, Any]] = {}
        self.next_id = 7
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def paths(self) -> list[str]:
        return [f"{r.method} {r.url.path}" for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/down":
            raise httpx.ConnectError("connection refused", request=request)
        if path == "/slow":
            raise httpx.ReadTimeout("timed out", request=request)

        if path == "/echo":
            return httpx.Response(
                200,
                json={
                    "method": request.method,
                    "path": path,
                    "headers": dict(request.headers),
                    "body": request.content.decode() or None,
                },
            )

        if path == "/whoami":
            if request.headers.get("authorization") == "Bearer secret":
                return httpx.Response(200, json={"user": "alice"})
            return httpx.Response(401, json={"error": "unauthorized"})

        if path == "/items" and request.method == "POST":
            if not request.content:
                return httpx.Response(400, json={"error": "body required"})
            item = {"id": self.next_id, **json.loads(request.content)}
            self.items[str(self.next_id)] = item
            self.next_id += 1
            return httpx.Response(201, json=item)

        match = _ITEM_RE.match(path)
        if match:
            item = self.items.get(match.group("id"))
            if item is None:
                return httpx.Response(404, json={"error": "not found"})
            if request.method == "DELETE":
                del self.items[match.group("id")]
                return httpx.Response(204)
            return httpx.Response(200, json=item)

        return httpx.Response(404, text="no route")


@pytest.fixture
def api() -> FakeItemsApi:
    return FakeItemsApi()


@pytest.fixture
def state() -> SharedState:
    return SharedState()


@pytest.fixture
def config() -> Settings:
    return Settings(log_level="DEBUG", request_timeout=1.0, case_timeout=5.0)


@pytest.fixture
def executor(
    api: FakeItemsApi, state: SharedState, config: Settings
) -> Generator[CaseExecutor, None, None]:
    with CaseExecutor(BASE_URL, state, transport=api.transport, config=config) as ex:
        yield ex


@pytest.fixture
def make_case() -> Callable[..., TestCase]:
    """Build a TestCase from row fields: make_case("t", "GET /x", None, None, 200)."""

    def _make(*row: Any) -> TestCase:
        return case_from_row(row)

    return _make


@pytest.fixture
def write_spec(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a specification module and return its path."""

    def _write(source: str, name: str = "api_spec.py") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write
