"""
Specification interpretation engine.

This package provides:
- Test case model and row parsing
- Shared state store
- Path parameter resolution and request building
- Expectation evaluation
- Case executor with failure diagnostics
- Suite driver
"""

from .case import (
    CombinedHook,
    Derived,
    Literal,
    NoHooks,
    PredicateExpectation,
    SplitHooks,
    StatusExpectation,
    TestCase,
    case_from_row,
)
from .executor import (
    CaseDiagnostic,
    CaseExecutor,
    CasePhase,
    CaseResult,
)
from .expectations import CaseResponse, evaluate
from .request_builder import RequestSpec, build_request
from .resolver import placeholders, resolve_path
from .spec_loader import Specification, load_specification, specification_from_fields
from .state import DEFAULT_STATE_KEYS, SharedState, StateSnapshot
from .suite import CaseFailure, Suite, SuiteReport

__all__ = [
    "DEFAULT_STATE_KEYS",
    "CaseDiagnostic",
    "CaseExecutor",
    "CaseFailure",
    "CasePhase",
    "CaseResponse",
    "CaseResult",
    "CombinedHook",
    "Derived",
    "Literal",
    "NoHooks",
    "PredicateExpectation",
    "RequestSpec",
    "SharedState",
    "Specification",
    "SplitHooks",
    "StateSnapshot",
    "StatusExpectation",
    "Suite",
    "SuiteReport",
    "TestCase",
    "build_request",
    "case_from_row",
    "evaluate",
    "load_specification",
    "placeholders",
    "resolve_path",
    "specification_from_fields",
]
