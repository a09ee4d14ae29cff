"""
Case executor.

Runs one test case through its phases:

    PENDING -> RESOLVING -> SENDING -> EVALUATING -> POST_PROCESSING -> PASSED

Any error moves the case to FAILED. Before the error propagates, a
diagnostic is logged with an equivalent curl command and the response body
or error message, so the failing request can be replayed by hand.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from contract_runner.core.config import Settings, settings as default_settings
from contract_runner.core.errors import ContractError, PostProcessingError, TransportError
from contract_runner.core.observability import case_context, redact_headers
from contract_runner.engine.case import CombinedHook, Hook, Hooks, SplitHooks, TestCase
from contract_runner.engine.expectations import CaseResponse, evaluate
from contract_runner.engine.request_builder import RequestSpec, build_request
from contract_runner.engine.resolver import resolve_path
from contract_runner.engine.state import SharedState

logger = logging.getLogger(__name__)


class CasePhase(str, Enum):
    """Lifecycle of a single case."""

    PENDING = "pending"
    RESOLVING = "resolving"
    SENDING = "sending"
    EVALUATING = "evaluating"
    POST_PROCESSING = "post_processing"
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class CaseDiagnostic:
    """Everything needed to reproduce a failed case outside the runner."""

    title: str
    group: str | None
    phase: CasePhase
    method: str
    url: str
    curl: str
    error: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    status: int | None = None
    response_body: str | None = None

    def render(self) -> str:
        lines = [f"# FAIL in: {self.title}", self.curl]
        if self.status is not None:
            lines.append(f"# status: {self.status}")
        lines.append(f"# failed while {self.phase.value}: {self.error}")
        if self.response_body:
            lines.append(self.response_body)
        return "\n".join(lines)


@dataclass
class CaseResult:
    """Outcome of a case that passed."""

    title: str
    group: str | None
    phase: CasePhase
    request: RequestSpec
    response: CaseResponse
    duration_ms: float = 0.0

    @property
    def passed(self) -> bool:
        return self.phase == CasePhase.PASSED


class CaseExecutor:
    """Executes test cases against one base URL with one shared state."""

    def __init__(
        self,
        base_url: str,
        state: SharedState,
        *,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
        config: Settings | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.state = state
        self.config = config or default_settings
        self._owns_client = client is None
        self.client = client or httpx.Client(
            base_url=self.base_url,
            timeout=self.config.request_timeout,
            transport=transport,
        )
        self.last_diagnostic: CaseDiagnostic | None = None

    def close(self) -> None:
        """Close the HTTP client if this executor created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> CaseExecutor:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def run(self, case: TestCase, group: str | None = None) -> CaseResult:
        """Run one case.

        Raises:
            MissingStateError: a path placeholder has no value
            TransportError: the request could not complete
            ExpectationMismatchError: the response failed the expectation
            PostProcessingError: a hook failed
            Exception: errors raised by header/body functions, unchanged
        """
        phase = CasePhase.PENDING
        path: str | None = None
        request: RequestSpec | None = None
        response: CaseResponse | None = None
        start = time.perf_counter()

        with case_context(case.title, group):
            try:
                phase = CasePhase.RESOLVING
                path = resolve_path(case.path_template, self.state.snapshot())

                phase = CasePhase.SENDING
                request = build_request(case, path, self.state.snapshot())
                logger.debug(
                    "Sending request",
                    extra={
                        "method": request.method,
                        "url": request.url(self.base_url),
                        "headers": redact_headers(request.headers),
                    },
                )
                response = self._send(request)

                phase = CasePhase.EVALUATING
                evaluate(case.expectation, response)

                phase = CasePhase.POST_PROCESSING
                self._run_hooks(case.hooks, response)
            except BaseException as e:
                # Includes pytest-timeout failures, which are not Exceptions
                diagnostic = self._diagnose(case, group, phase, path, request, response, e)
                self.last_diagnostic = diagnostic
                if isinstance(e, ContractError):
                    e.diagnostic = diagnostic
                e.add_note(diagnostic.render())
                logger.error(
                    diagnostic.render(),
                    extra={"phase": phase.value, "status": diagnostic.status},
                )
                raise

            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "Case passed",
                extra={"status": response.status, "duration_ms": round(duration_ms, 1)},
            )
            return CaseResult(
                title=case.title,
                group=group,
                phase=CasePhase.PASSED,
                request=request,
                response=response,
                duration_ms=duration_ms,
            )

    def _send(self, request: RequestSpec) -> CaseResponse:
        try:
            raw = self.client.request(**request.httpx_kwargs())
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request timed out after {self.config.request_timeout}s: {e}",
                {"url": request.url(self.base_url)},
            ) from e
        except httpx.TransportError as e:
            raise TransportError(
                f"{type(e).__name__}: {e}",
                {"url": request.url(self.base_url)},
            ) from e
        return CaseResponse.from_httpx(raw)

    def _run_hooks(self, hooks: Hooks, response: CaseResponse) -> None:
        # Hook writes are all-or-nothing: a failing hook leaves state as it was
        saved = self.state.to_dict()
        try:
            if isinstance(hooks, CombinedHook):
                self._call_hook("on_response", hooks.on_response, response)
            elif isinstance(hooks, SplitHooks):
                if hooks.assertion is not None:
                    self._call_hook("assertion", hooks.assertion, response)
                if hooks.state_update is not None:
                    self._call_hook("state_update", hooks.state_update, response)
        except BaseException:
            self.state.clear()
            self.state.update(saved)
            raise

    def _call_hook(self, name: str, hook: Hook, response: CaseResponse) -> None:
        try:
            hook(response, self.state)
        except ContractError:
            raise
        except Exception as e:
            raise PostProcessingError(name, e) from e

    def _diagnose(
        self,
        case: TestCase,
        group: str | None,
        phase: CasePhase,
        path: str | None,
        request: RequestSpec | None,
        response: CaseResponse | None,
        error: BaseException,
    ) -> CaseDiagnostic:
        if request is None:
            request = RequestSpec(method=case.method, path=path or case.path_template)

        return CaseDiagnostic(
            title=case.title,
            group=group,
            phase=phase,
            method=request.method,
            url=request.url(self.base_url),
            curl=request.to_curl(self.base_url),
            error=str(error) or type(error).__name__,
            headers=dict(request.headers),
            body=request.body,
            status=response.status if response is not None else None,
            response_body=self._format_response_body(response),
        )

    def _format_response_body(self, response: CaseResponse | None) -> str | None:
        if response is None or response.body is None:
            return None
        body = response.body
        if isinstance(body, str):
            text = body
        else:
            indent = 2 if self.config.pretty_diagnostics else None
            text = json.dumps(body, indent=indent, default=str)
        limit = self.config.diagnostic_body_limit
        if limit and len(text) > limit:
            text = text[:limit] + "... (truncated)"
        return text
