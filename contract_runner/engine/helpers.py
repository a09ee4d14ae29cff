"""Names injected into every specification module before it executes."""

from __future__ import annotations

import random
from collections.abc import Mapping
from typing import Any

from contract_runner.engine import checks


def rnd() -> int:
    """Random integer in [0, 10000), for unique test data."""
    return random.randrange(10_000)


def auth(state: Mapping[str, Any]) -> dict[str, str]:
    """Bearer auth header built from `state.token` at call time."""
    return {"Authorization": f"Bearer {state.get('token')}"}


def spec_helpers() -> dict[str, Any]:
    return {
        "check": checks,
        "rnd": rnd,
        "auth": auth,
    }
