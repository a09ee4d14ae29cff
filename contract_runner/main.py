"""
contract-test: run an HTTP API contract specification under pytest.

Usage:
    contract-test ./specs/forms_spec.py
    contract-test --data ./specs/forms_spec.py
    contract-test --data=./specs/forms_spec.py --timeout 30
    contract-test ./specs/forms_spec.py -- -x -v     # extra args go to pytest

Exit codes:
    0: All cases passed
    1: One or more cases failed
    2: Specification could not be loaded
    3: Usage error (no specification, bad option values)
"""

from __future__ import annotations

import argparse
import logging
import sys
from enum import IntEnum

import pytest
from pydantic import ValidationError

from contract_runner.core.config import Settings
from contract_runner.core.errors import ConfigurationError
from contract_runner.core.observability import configure_structured_logging
from contract_runner.engine.spec_loader import load_specification
from contract_runner.plugin import ContractPlugin

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Exit codes for the runner."""

    SUCCESS = 0
    TESTS_FAILED = 1
    CONFIGURATION_ERROR = 2
    USAGE_ERROR = 3


class UsageError(Exception):
    """Bad command line arguments."""


class ContractArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message: str):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    p = ContractArgumentParser(
        prog="contract-test",
        description="Run an HTTP API contract specification.",
    )
    p.add_argument("spec", nargs="?", help="Path to the specification module")
    p.add_argument(
        "--data",
        type=str,
        default=None,
        help="Path to the specification module (alternative to the positional argument)",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-case timeout in seconds (default: CONTRACT_CASE_TIMEOUT or 10)",
    )
    p.add_argument(
        "--request-timeout",
        type=float,
        default=None,
        help="HTTP request timeout in seconds (default: CONTRACT_REQUEST_TIMEOUT or 10)",
    )
    p.add_argument("--log-level", type=str, default=None, help="Log level (default: INFO)")
    p.add_argument(
        "--plain-logs",
        action="store_true",
        help="Plain text logs instead of JSON",
    )
    return p


def _split_pytest_args(argv: list[str]) -> tuple[list[str], list[str]]:
    if "--" in argv:
        idx = argv.index("--")
        return argv[:idx], argv[idx + 1 :]
    return argv, []


def main(argv: list[str] | None = None) -> int:
    own_args, pytest_args = _split_pytest_args(list(sys.argv[1:] if argv is None else argv))
    parser = build_parser()
    try:
        args = parser.parse_args(own_args)
        spec_path = args.data or args.spec
        if not spec_path:
            parser.error("no specification file supplied")
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"contract-test: error: {e}", file=sys.stderr)
        return ExitCode.USAGE_ERROR

    overrides: dict[str, object] = {}
    if args.timeout is not None:
        overrides["case_timeout"] = args.timeout
    if args.request_timeout is not None:
        overrides["request_timeout"] = args.request_timeout
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.plain_logs:
        overrides["structured_logs"] = False

    try:
        config = Settings(**overrides)
    except ValidationError as e:
        print(f"contract-test: error: {e}", file=sys.stderr)
        return ExitCode.USAGE_ERROR

    configure_structured_logging(config.log_level, structured=config.structured_logs)

    try:
        specification = load_specification(spec_path)
    except ConfigurationError as e:
        logger.error("Invalid specification", extra={"error": e.message, **e.details})
        print(f"contract-test: error: {e.message}", file=sys.stderr)
        return ExitCode.CONFIGURATION_ERROR

    plugin = ContractPlugin(spec_path, config=config, specification=specification)
    result = pytest.main(
        [
            str(plugin.spec_path),
            "-p",
            "no:cacheprovider",
            # Cases depend on each other's state; never reorder
            "-p",
            "no:randomly",
            *pytest_args,
        ],
        plugins=[plugin],
    )

    if result in (pytest.ExitCode.OK, pytest.ExitCode.NO_TESTS_COLLECTED):
        return ExitCode.SUCCESS
    return ExitCode.TESTS_FAILED


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
