"""
Suite driver.

Walks groups and cases in declared order and hands each case to one
CaseExecutor sharing one SharedState. Cases never run concurrently: later
cases read state written by earlier ones, across group boundaries.

`Suite.run()` executes everything without a test framework and records
failures instead of stopping. The pytest plugin (`contract_runner.plugin`)
uses `iter_cases()` to register the same cases as pytest items.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import httpx

from contract_runner.core.config import Settings
from contract_runner.core.errors import get_error_kind
from contract_runner.engine.case import TestCase
from contract_runner.engine.executor import CaseDiagnostic, CaseExecutor, CaseResult
from contract_runner.engine.spec_loader import Specification
from contract_runner.engine.state import SharedState

logger = logging.getLogger(__name__)


@dataclass
class CaseFailure:
    """A case that raised, with the diagnostic logged for it."""

    title: str
    group: str
    error: Exception
    diagnostic: CaseDiagnostic | None = None

    @property
    def kind(self) -> str:
        return get_error_kind(self.error)


@dataclass
class SuiteReport:
    """Results of a framework-free suite run, in execution order."""

    passed: list[CaseResult] = field(default_factory=list)
    failed: list[CaseFailure] = field(default_factory=list)
    order: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.order)


class Suite:
    """One run of a specification: one shared state, one executor."""

    def __init__(
        self,
        specification: Specification,
        *,
        state: SharedState | None = None,
        executor: CaseExecutor | None = None,
        transport: httpx.BaseTransport | None = None,
        config: Settings | None = None,
    ):
        self.specification = specification
        if state is None:
            state = executor.state if executor is not None else SharedState()
        self.state = state
        self._owns_executor = executor is None
        self.executor = executor or CaseExecutor(
            specification.base_url,
            self.state,
            transport=transport,
            config=config,
        )

    def close(self) -> None:
        if self._owns_executor:
            self.executor.close()

    def __enter__(self) -> Suite:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def iter_cases(self) -> Iterator[tuple[str, TestCase]]:
        """Yield (group, case) in declared group order, then row order."""
        for group, cases in self.specification.groups.items():
            for case in cases:
                yield group, case

    def run_case(self, group: str, case: TestCase) -> CaseResult:
        return self.executor.run(case, group=group)

    def run(self) -> SuiteReport:
        """Run every case sequentially; one failure does not stop the rest."""
        report = SuiteReport()
        for group, case in self.iter_cases():
            report.order.append((group, case.title))
            try:
                report.passed.append(self.run_case(group, case))
            except Exception as e:
                report.failed.append(
                    CaseFailure(
                        title=case.title,
                        group=group,
                        error=e,
                        diagnostic=self.executor.last_diagnostic,
                    )
                )

        logger.info(
            "Suite finished",
            extra={
                "total": report.total,
                "passed": len(report.passed),
                "failed": len(report.failed),
            },
        )
        return report
