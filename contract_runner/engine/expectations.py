"""
Response wrapper and expectation evaluation.

Expectations are either a fixed status code or a predicate that raises on
mismatch. Predicates and hooks receive a CaseResponse rather than the raw
httpx response so specs can read `res.status` and `res.body` directly.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from contract_runner.core.errors import ContractError, ExpectationMismatchError
from contract_runner.engine.case import Expectation, PredicateExpectation, StatusExpectation


@dataclass(frozen=True)
class CaseResponse:
    """Response as seen by expectations and hooks."""

    status: int
    headers: Mapping[str, str]
    body: Any
    text: str
    raw: httpx.Response | None = None

    @property
    def status_code(self) -> int:
        return self.status

    def json(self) -> Any:
        return self.body

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> CaseResponse:
        return cls(
            status=response.status_code,
            headers=response.headers,
            body=parse_body(response),
            text=response.text,
            raw=response,
        )


def parse_body(response: httpx.Response) -> Any:
    """Parse JSON when possible, fall back to text, None for empty bodies."""
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def evaluate(expectation: Expectation, response: CaseResponse) -> None:
    """Check a response against an expectation.

    Raises:
        ExpectationMismatchError: status differs, or the predicate raised
            an AssertionError (kept as __cause__)
    """
    if isinstance(expectation, StatusExpectation):
        if response.status != expectation.code:
            raise ExpectationMismatchError(
                f"Expected status {expectation.code}, got {response.status}",
                expected=expectation.code,
                actual=response.status,
            )
        return

    if isinstance(expectation, PredicateExpectation):
        try:
            expectation.fn(response)
        except ContractError:
            raise
        except AssertionError as e:
            raise ExpectationMismatchError(
                f"Response predicate failed: {e}",
                actual=response.status,
            ) from e
        return

    raise TypeError(f"Unknown expectation variant: {expectation!r}")
