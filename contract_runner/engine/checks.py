"""
Assertion helpers for specification authors.

Injected into every specification module as `check`:

    ("get form", "GET /forms/:formId", auth, None,
     lambda res: check.equal(res.status, 200),
     lambda res, S: check.has_keys(res.body, "id", "title"))

Every helper raises AssertionError on mismatch.
"""

from __future__ import annotations

import re
from collections.abc import Container, Mapping
from typing import Any


def fail(message: str = "Failed") -> None:
    raise AssertionError(message)


def ok(value: Any, message: str | None = None) -> None:
    if not value:
        fail(message or f"Expected a truthy value, got {value!r}")


def equal(actual: Any, expected: Any, message: str | None = None) -> None:
    if actual != expected:
        fail(message or f"{actual!r} != {expected!r}")


def not_equal(actual: Any, expected: Any, message: str | None = None) -> None:
    if actual == expected:
        fail(message or f"{actual!r} == {expected!r}")


def strict_equal(actual: Any, expected: Any, message: str | None = None) -> None:
    """Like equal, but `1 == 1.0` and `1 == True` do not pass."""
    if type(actual) is not type(expected) or actual != expected:
        fail(
            message
            or f"{actual!r} ({type(actual).__name__}) !== {expected!r} ({type(expected).__name__})"
        )


# Python equality is already structural for dicts/lists
deep_equal = equal


def match(value: Any, pattern: str, message: str | None = None) -> None:
    if not isinstance(value, str) or not re.search(pattern, value):
        fail(message or f"{value!r} does not match /{pattern}/")


def includes(container: Container[Any], item: Any, message: str | None = None) -> None:
    if item not in container:
        fail(message or f"{item!r} not found in {container!r}")


def has_keys(value: Any, *keys: str, message: str | None = None) -> None:
    if not isinstance(value, Mapping):
        fail(message or f"Expected an object, got {type(value).__name__}")
    missing = [k for k in keys if k not in value]
    if missing:
        fail(message or f"Missing keys {missing} in {sorted(value)}")
