"""
Test case model.

A specification row is a plain tuple:

    (title, "METHOD /path/:param", headers, body, expect, on_response)
    (title, "METHOD /path/:param", headers, body, expect, assertion, state_update)
    (title, "METHOD /path/:param", headers, body, expect)

`case_from_row` turns a row into a TestCase once, at load time. From then on
every slot is an explicit variant: headers and body are Literal or Derived,
the expectation is a StatusExpectation or PredicateExpectation, and hooks are
CombinedHook, SplitHooks or NoHooks.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from contract_runner.core.errors import ConfigurationError

if TYPE_CHECKING:
    from contract_runner.engine.expectations import CaseResponse
    from contract_runner.engine.state import SharedState, StateSnapshot

Hook = Callable[["CaseResponse", "SharedState"], Any]


# ============================================================================
# Value sources (headers / body)
# ============================================================================


@dataclass(frozen=True)
class Literal:
    """A value used as written in the row."""

    value: Any = None

    def evaluate(self, state: StateSnapshot) -> Any:
        return self.value


@dataclass(frozen=True)
class Derived:
    """A value computed from shared state when the case runs."""

    fn: Callable[[StateSnapshot], Any]

    def evaluate(self, state: StateSnapshot) -> Any:
        return self.fn(state)


Source = Union[Literal, Derived]


def as_source(value: Any) -> Source:
    return Derived(value) if callable(value) else Literal(value)


# ============================================================================
# Expectations
# ============================================================================


@dataclass(frozen=True)
class StatusExpectation:
    """Response status must equal code."""

    code: int


@dataclass(frozen=True)
class PredicateExpectation:
    """Callable that raises when the response is wrong."""

    fn: Callable[[CaseResponse], Any]


Expectation = Union[StatusExpectation, PredicateExpectation]


# ============================================================================
# Post-response hooks
# ============================================================================


@dataclass(frozen=True)
class NoHooks:
    pass


@dataclass(frozen=True)
class CombinedHook:
    """Single hook doing both assertions and state updates (6-field row)."""

    on_response: Hook


@dataclass(frozen=True)
class SplitHooks:
    """Assertion followed by state update (7-field row)."""

    assertion: Hook | None = None
    state_update: Hook | None = None


Hooks = Union[NoHooks, CombinedHook, SplitHooks]


@dataclass(frozen=True)
class TestCase:
    """One parsed specification row."""

    __test__ = False  # not a pytest test class

    title: str
    method: str
    path_template: str
    headers: Source
    body: Source
    expectation: Expectation
    hooks: Hooks

    @property
    def method_and_path(self) -> str:
        return f"{self.method} {self.path_template}"


def _parse_method_path(value: Any, where: str) -> tuple[str, str]:
    if not isinstance(value, str):
        raise ConfigurationError(f"{where}: method and path must be a string, got {value!r}")
    method, _, path = value.strip().partition(" ")
    path = path.strip()
    if not method or not path:
        raise ConfigurationError(f"{where}: expected 'METHOD /path', got {value!r}")
    return method.upper(), path


def _parse_expectation(value: Any, where: str) -> Expectation:
    # bool is an int subclass; True/False are never status codes
    if isinstance(value, int) and not isinstance(value, bool):
        return StatusExpectation(value)
    if callable(value):
        return PredicateExpectation(value)
    raise ConfigurationError(
        f"{where}: expectation must be a status code or a callable, got {value!r}"
    )


def _parse_headers(value: Any, where: str) -> Source:
    if value is None or callable(value) or isinstance(value, Mapping):
        return as_source(value)
    raise ConfigurationError(
        f"{where}: headers must be a mapping, a callable or None, got {value!r}"
    )


def _check_hook(value: Any, where: str, name: str) -> Hook | None:
    if value is not None and not callable(value):
        raise ConfigurationError(f"{where}: {name} must be callable or None, got {value!r}")
    return value


def case_from_row(row: Sequence[Any], where: str = "row") -> TestCase:
    """Parse a specification row into a TestCase.

    Args:
        row: 5, 6 or 7 element tuple/list
        where: Location used in error messages (e.g. "forms[2]")

    Raises:
        ConfigurationError: malformed row
    """
    if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
        raise ConfigurationError(f"{where}: test case must be a tuple, got {type(row).__name__}")

    if len(row) not in (5, 6, 7):
        raise ConfigurationError(f"{where}: test case must have 5, 6 or 7 fields, got {len(row)}")

    title = row[0]
    if not isinstance(title, str) or not title:
        raise ConfigurationError(f"{where}: title must be a non-empty string, got {title!r}")

    method, path = _parse_method_path(row[1], where)
    headers = _parse_headers(row[2], where)
    expectation = _parse_expectation(row[4], where)

    hooks: Hooks
    if len(row) == 6:
        on_response = _check_hook(row[5], where, "on_response")
        hooks = CombinedHook(on_response) if on_response else NoHooks()
    elif len(row) == 7:
        hooks = SplitHooks(
            assertion=_check_hook(row[5], where, "assertion"),
            state_update=_check_hook(row[6], where, "state_update"),
        )
    else:
        hooks = NoHooks()

    return TestCase(
        title=title,
        method=method,
        path_template=path,
        headers=headers,
        body=as_source(row[3]),
        expectation=expectation,
        hooks=hooks,
    )
