"""
pytest plugin registering a specification as pytest nodes.

    <spec file>            SpecFile   owns the Suite (one shared state, one client)
      <group>              GroupNode  one per key of `spec`, in declared order
        <case title>       CaseItem   one per row, in declared order

The plugin is an object rather than an entry point because it is bound to a
single specification file:

    pytest.main([spec_path], plugins=[ContractPlugin(spec_path)])

Each CaseItem carries a `timeout` marker (pytest-timeout). A timed out case
fails on its own; the run continues with the next case.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from contract_runner.core.config import Settings, settings as default_settings
from contract_runner.core.errors import ConfigurationError, ContractError
from contract_runner.engine.case import TestCase
from contract_runner.engine.spec_loader import Specification, load_specification
from contract_runner.engine.suite import Suite


class ContractPlugin:
    """Collects one specification file as a suite of pytest items."""

    def __init__(
        self,
        spec_path: str | Path,
        *,
        config: Settings | None = None,
        specification: Specification | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.spec_path = Path(spec_path).expanduser().resolve()
        self.config = config or default_settings
        self.specification = specification
        self.transport = transport

    def load(self) -> Specification:
        if self.specification is None:
            self.specification = load_specification(self.spec_path)
        return self.specification

    @pytest.hookimpl(tryfirst=True)
    def pytest_pycollect_makemodule(self, module_path: Path, parent: pytest.Collector):
        # The spec file is passed as an initial path, so pytest's python plugin
        # would otherwise import it as a test module.
        if module_path.resolve() == self.spec_path:
            return SpecFile.from_parent(parent, path=module_path, plugin=self)
        return None

    def pytest_report_header(self, config: pytest.Config) -> list[str]:
        lines = [f"contract spec: {self.spec_path}"]
        if self.specification is not None:
            lines.append(f"base url: {self.specification.base_url}")
        return lines


class SpecFile(pytest.File):
    """The specification module; parent of all groups."""

    def __init__(self, *, plugin: ContractPlugin, **kwargs: Any):
        super().__init__(**kwargs)
        self.plugin = plugin
        self.suite: Suite | None = None

    def collect(self) -> Iterable[GroupNode]:
        specification = self.plugin.load()
        for group, cases in specification.groups.items():
            yield GroupNode.from_parent(self, name=group, cases=cases)

    def repr_failure(self, excinfo: pytest.ExceptionInfo[BaseException]):
        if isinstance(excinfo.value, ConfigurationError):
            return f"ConfigurationError: {excinfo.value.message}"
        return super().repr_failure(excinfo)

    def setup(self) -> None:
        self.suite = Suite(
            self.plugin.load(),
            transport=self.plugin.transport,
            config=self.plugin.config,
        )

    def teardown(self) -> None:
        if self.suite is not None:
            self.suite.close()
            self.suite = None


class GroupNode(pytest.Collector):
    """One resource group of the specification."""

    def __init__(self, *, cases: tuple[TestCase, ...], **kwargs: Any):
        super().__init__(**kwargs)
        self.cases = cases

    def collect(self) -> Iterator[CaseItem]:
        seen: dict[str, int] = {}
        for case in self.cases:
            seen[case.title] = seen.get(case.title, 0) + 1
            # Repeated titles get a suffix so node ids stay unique
            name = case.title if seen[case.title] == 1 else f"{case.title} [{seen[case.title]}]"
            yield CaseItem.from_parent(self, name=name, case=case)


class CaseItem(pytest.Item):
    """A single specification row."""

    def __init__(self, *, case: TestCase, **kwargs: Any):
        super().__init__(**kwargs)
        self.case = case
        spec_file = self.getparent(SpecFile)
        self.add_marker(pytest.mark.timeout(spec_file.plugin.config.case_timeout))

    def runtest(self) -> None:
        spec_file = self.getparent(SpecFile)
        if spec_file.suite is None:
            raise RuntimeError("specification suite was not set up")
        spec_file.suite.run_case(self.parent.name, self.case)

    def repr_failure(self, excinfo: pytest.ExceptionInfo[BaseException], style=None) -> str:
        error = excinfo.value
        if isinstance(error, ContractError) and error.diagnostic is not None:
            return f"{type(error).__name__}: {error.message}\n{error.diagnostic.render()}"
        return super().repr_failure(excinfo, style=style)

    def reportinfo(self) -> tuple[Path, int | None, str]:
        return self.path, None, f"{self.parent.name}: {self.case.method_and_path}"
