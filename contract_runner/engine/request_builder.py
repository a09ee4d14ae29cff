"""
Request building for one test case.

Turns a parsed TestCase plus its resolved path into a RequestSpec that the
executor sends with httpx, and that diagnostics render as a curl command.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from contract_runner.engine.case import TestCase
from contract_runner.engine.state import StateSnapshot


def _shell_double_quote(value: str) -> str:
    for char in ("\\", '"', "$", "`"):
        value = value.replace(char, "\\" + char)
    return f'"{value}"'


@dataclass
class RequestSpec:
    """A concrete request, ready for transport."""

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def has_body(self) -> bool:
        return self.body is not None

    def url(self, base_url: str) -> str:
        return f"{base_url}{self.path}"

    def httpx_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for `httpx.Client.request`."""
        kwargs: dict[str, Any] = {
            "method": self.method,
            "url": self.path,
            "headers": self.headers,
        }
        if self.has_body:
            if isinstance(self.body, (str, bytes)):
                kwargs["content"] = self.body
            else:
                kwargs["json"] = self.body
        return kwargs

    def body_text(self) -> str:
        if not self.has_body:
            return ""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        if isinstance(self.body, str):
            return self.body
        return json.dumps(self.body, default=str)

    def to_curl(self, base_url: str) -> str:
        """Render an equivalent curl command line."""
        parts = [f"curl -X {self.method} {self.url(base_url)}"]
        for k, v in self.headers.items():
            parts.append(f"-H {_shell_double_quote(f'{k}: {v}')}")
        if self.has_body:
            data = self.body_text().replace("'", "'\\''")
            parts.append(f"-d '{data}'")
        return " ".join(parts).strip()


def build_request(case: TestCase, resolved_path: str, state: StateSnapshot) -> RequestSpec:
    """Build the request for a case.

    Derived headers/body are evaluated against state. The body is attached
    only when truthy, so `0`, `""`, `False`, `{}` and `[]` are never sent.
    """
    raw_headers = case.headers.evaluate(state) or {}
    headers = {str(k): str(v) for k, v in dict(raw_headers).items()}

    body = case.body.evaluate(state)

    return RequestSpec(
        method=case.method,
        path=resolved_path,
        headers=headers,
        body=body if body else None,
    )
