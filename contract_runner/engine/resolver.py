"""Path parameter substitution: `/forms/:formId` -> `/forms/12`."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from contract_runner.core.errors import MissingStateError

# `:` followed by ASCII letters or underscores. There is no escape syntax.
PLACEHOLDER_RE = re.compile(r":([A-Za-z_]+)")


def placeholders(template: str) -> list[str]:
    """List placeholder names in the order they appear."""
    return PLACEHOLDER_RE.findall(template)


def resolve_path(template: str, state: Mapping[str, Any]) -> str:
    """Replace every `:name` in template with `str(state[name])`.

    Raises:
        MissingStateError: a placeholder has no value (absent key or None)
    """

    def replacer(match: re.Match) -> str:
        key = match.group(1)
        value = state.get(key)
        if value is None:
            raise MissingStateError(key, template)
        return str(value)

    return PLACEHOLDER_RE.sub(replacer, template)
