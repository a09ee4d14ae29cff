"""
Error types raised by the contract runner.

Every case-scoped error fails only the case that raised it. ConfigurationError
is the exception: it surfaces before any case runs and aborts the run.
"""

from typing import Any


class ContractError(Exception):
    """Base exception for all contract runner errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        # Filled in by the case executor once a request could be reconstructed
        self.diagnostic: Any = None
        super().__init__(self.message)


class ConfigurationError(ContractError):
    """
    Raised when the specification cannot be used.

    Examples:
    - Specification file not found or fails to import
    - `base_url` or `spec` missing from the module
    - Malformed test case row
    """

    pass


class MissingStateError(ContractError):
    """
    Raised when a path placeholder has no value in shared state.

    Downstream cases that depend on the same key will usually fail the
    same way.
    """

    def __init__(self, key: str, template: str):
        super().__init__(
            f"Missing state.{key} for path param :{key} in '{template}'",
            {"key": key, "template": template},
        )
        self.key = key
        self.template = template


class ExpectationMismatchError(ContractError, AssertionError):
    """Raised when a response does not satisfy the declared expectation."""

    def __init__(
        self,
        message: str,
        expected: Any = None,
        actual: Any = None,
    ):
        super().__init__(message, {"expected": expected, "actual": actual})
        self.expected = expected
        self.actual = actual


class PostProcessingError(ContractError):
    """
    Raised when an on_response, assertion or state_update hook fails.

    The HTTP call itself succeeded. Whatever state write the hook was
    supposed to perform has not happened.
    """

    def __init__(self, hook: str, cause: BaseException):
        super().__init__(f"{hook} hook failed: {cause}", {"hook": hook})
        self.hook = hook


class TransportError(ContractError):
    """Raised when the HTTP call could not complete (network, timeout)."""

    pass


ERROR_KIND_MAP = {
    ConfigurationError: "configuration",
    MissingStateError: "missing_state",
    ExpectationMismatchError: "expectation_mismatch",
    PostProcessingError: "post_processing",
    TransportError: "transport",
}


def get_error_kind(error: BaseException) -> str:
    """
    Get a stable label for an exception, used in log records.

    Args:
        error: The exception instance

    Returns:
        Error kind label (defaults to "error" for foreign exceptions)
    """
    return ERROR_KIND_MAP.get(type(error), "error")
