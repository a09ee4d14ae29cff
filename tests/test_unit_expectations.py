"""
Tests for response wrapping and expectation evaluation.
"""

import httpx
import pytest

from contract_runner.core.errors import ExpectationMismatchError, MissingStateError
from contract_runner.engine import checks
from contract_runner.engine.case import PredicateExpectation, StatusExpectation
from contract_runner.engine.expectations import CaseResponse, evaluate, parse_body


def _response(status: int, **kwargs) -> CaseResponse:
    request = httpx.Request("GET", "http://api.test/x")
    return CaseResponse.from_httpx(httpx.Response(status, request=request, **kwargs))


class TestCaseResponse:
    """Wrapping httpx responses."""

    def test_json_body_is_parsed(self):
        """JSON bodies are decoded into Python values."""
        res = _response(200, json={"id": 7})
        assert res.status == 200
        assert res.status_code == 200
        assert res.body == {"id": 7}
        assert res.json() == {"id": 7}

    def test_text_body_is_kept_as_text(self):
        """Non-JSON bodies stay as text."""
        res = _response(200, text="hello")
        assert res.body == "hello"
        assert res.text == "hello"

    def test_empty_body_is_none(self):
        """An empty response has body None."""
        assert _response(204).body is None

    def test_invalid_json_falls_back_to_text(self):
        """A broken JSON body is returned as text."""
        response = httpx.Response(
            200,
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert parse_body(response) == "{not json"


class TestStatusExpectation:
    """Integer expectations compare the status code."""

    def test_matching_status_passes(self):
        evaluate(StatusExpectation(201), _response(201))

    def test_mismatch_carries_both_values(self):
        """The error records expected and actual status."""
        with pytest.raises(ExpectationMismatchError) as exc_info:
            evaluate(StatusExpectation(201), _response(200))

        assert exc_info.value.expected == 201
        assert exc_info.value.actual == 200
        assert "201" in str(exc_info.value)
        assert "200" in str(exc_info.value)

    def test_mismatch_is_an_assertion_error(self):
        """pytest sees mismatches as assertion failures."""
        with pytest.raises(AssertionError):
            evaluate(StatusExpectation(200), _response(500))


class TestPredicateExpectation:
    """Callable expectations."""

    def test_predicate_passes_when_it_returns(self):
        """Returning without raising is a pass."""
        expectation = PredicateExpectation(lambda res: checks.ok(res.status < 300))
        evaluate(expectation, _response(204))

    def test_predicate_failure_is_wrapped(self):
        """AssertionError becomes ExpectationMismatchError."""
        expectation = PredicateExpectation(lambda res: checks.ok(res.status < 300))
        with pytest.raises(ExpectationMismatchError) as exc_info:
            evaluate(expectation, _response(404))

        assert isinstance(exc_info.value.__cause__, AssertionError)
        assert exc_info.value.actual == 404

    def test_return_value_is_ignored(self):
        """A falsy return value is not a failure."""
        evaluate(PredicateExpectation(lambda res: False), _response(200))

    def test_plain_assert_statement_is_supported(self):
        """Bare assert statements work in predicates."""
        def predicate(res):
            assert res.body["id"] == 1

        with pytest.raises(ExpectationMismatchError):
            evaluate(PredicateExpectation(predicate), _response(200, json={"id": 2}))

    def test_contract_errors_propagate_unchanged(self):
        def predicate(res):
            raise MissingStateError("id", "/x/:id")

        with pytest.raises(MissingStateError):
            evaluate(PredicateExpectation(predicate), _response(200))

    def test_other_errors_propagate_unchanged(self):
        """Non-assertion errors keep their type."""
        def predicate(res):
            return res.body["missing"]

        with pytest.raises(KeyError):
            evaluate(PredicateExpectation(predicate), _response(200, json={}))
