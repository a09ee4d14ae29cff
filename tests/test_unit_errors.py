"""
Tests for the error hierarchy.
"""

from contract_runner.core.errors import (
    ConfigurationError,
    ContractError,
    ExpectationMismatchError,
    MissingStateError,
    PostProcessingError,
    TransportError,
    get_error_kind,
)


class TestErrors:
    """ContractError subclasses and their kinds."""

    def test_message_and_details(self):
        """Base error keeps message, details and an empty diagnostic."""
        e = ContractError("boom", {"a": 1})
        assert e.message == "boom"
        assert e.details == {"a": 1}
        assert e.diagnostic is None
        assert str(e) == "boom"

    def test_missing_state_error(self):
        """Details carry the key and template."""
        e = MissingStateError("formId", "/forms/:formId")
        assert e.details == {"key": "formId", "template": "/forms/:formId"}
        assert ":formId" in str(e)

    def test_expectation_mismatch_is_assertion_error(self):
        """Mismatches are also AssertionErrors for pytest."""
        e = ExpectationMismatchError("status", expected=201, actual=200)
        assert isinstance(e, AssertionError)
        assert isinstance(e, ContractError)
        assert e.details == {"expected": 201, "actual": 200}

    def test_post_processing_error_names_hook(self):
        """The failing hook is named."""
        e = PostProcessingError("state_update", KeyError("id"))
        assert e.hook == "state_update"
        assert str(e).startswith("state_update hook failed")

    def test_error_kinds(self):
        """Each error class maps to a kind; others are "error"."""
        assert get_error_kind(ConfigurationError("x")) == "configuration"
        assert get_error_kind(MissingStateError("a", "/:a")) == "missing_state"
        assert get_error_kind(ExpectationMismatchError("x")) == "expectation_mismatch"
        assert get_error_kind(PostProcessingError("assertion", ValueError())) == "post_processing"
        assert get_error_kind(TransportError("x")) == "transport"
        assert get_error_kind(KeyError("x")) == "error"
