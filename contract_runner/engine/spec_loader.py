"""
Specification loading and validation.

A specification is a Python module exposing:

    base_url = "http://localhost:3000"
    spec = {
        "forms": [
            ("create form", "POST /forms", auth, {"title": "t"}, 201,
             lambda res, S: setattr(S, "formId", res.body["id"])),
            ("get form", "GET /forms/:formId", auth, None, 200),
        ],
    }

Helper names (`check`, `rnd`, `auth`) are injected into the module namespace
before it executes, so specs do not need to import them.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType, ModuleType
from typing import Any

from contract_runner.core.errors import ConfigurationError
from contract_runner.engine.case import TestCase, case_from_row
from contract_runner.engine.helpers import spec_helpers

logger = logging.getLogger(__name__)

# `baseUrl` is accepted for specs ported from the JavaScript runner
BASE_URL_FIELDS = ("base_url", "baseUrl")


@dataclass(frozen=True)
class Specification:
    """Loaded specification: base URL plus ordered groups of cases."""

    base_url: str
    groups: Mapping[str, tuple[TestCase, ...]]
    source: Path | None = None

    @property
    def case_count(self) -> int:
        return sum(len(cases) for cases in self.groups.values())


def specification_from_fields(
    base_url: Any,
    spec: Any,
    source: Path | None = None,
) -> Specification:
    """Validate raw `base_url` / `spec` values and parse every row.

    Raises:
        ConfigurationError: a field is missing/empty or a row is malformed
    """
    missing = []
    if not base_url:
        missing.append("base_url")
    if not spec:
        missing.append("spec")
    if missing:
        raise ConfigurationError(
            f"Specification must define {' and '.join(missing)}",
            {"missing": missing, "source": str(source) if source else None},
        )

    if not isinstance(base_url, str):
        raise ConfigurationError(f"base_url must be a string, got {type(base_url).__name__}")
    if not isinstance(spec, Mapping):
        raise ConfigurationError(
            f"spec must map group names to lists of cases, got {type(spec).__name__}"
        )

    groups: dict[str, tuple[TestCase, ...]] = {}
    for group, rows in spec.items():
        if isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
            raise ConfigurationError(f"spec[{group!r}] must be a list of cases")
        groups[str(group)] = tuple(
            case_from_row(row, where=f"{group}[{index}]") for index, row in enumerate(rows)
        )

    return Specification(
        base_url=base_url.rstrip("/"),
        groups=MappingProxyType(groups),
        source=source,
    )


def _exec_module(path: Path) -> ModuleType:
    module_name = f"contract_spec_{path.stem}"
    module_spec = importlib.util.spec_from_file_location(module_name, path)
    if module_spec is None or module_spec.loader is None:
        raise ConfigurationError(f"Cannot load specification module from {path}")

    module = importlib.util.module_from_spec(module_spec)
    module.__dict__.update(spec_helpers())

    # Lets specs import siblings (shared fixtures, payload builders)
    spec_dir = str(path.parent)
    added = spec_dir not in sys.path
    if added:
        sys.path.insert(0, spec_dir)
    sys.modules[module_name] = module
    try:
        module_spec.loader.exec_module(module)
    except ConfigurationError:
        sys.modules.pop(module_name, None)
        raise
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ConfigurationError(
            f"Specification module {path} failed to import: {e}",
            {"source": str(path)},
        ) from e
    finally:
        if added:
            sys.path.remove(spec_dir)
    return module


def load_specification(path: str | Path) -> Specification:
    """Load a specification module from a file path.

    Relative paths resolve against the current working directory.

    Raises:
        ConfigurationError: file missing, import failure, or invalid content
    """
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_file():
        raise ConfigurationError(f"Specification file not found: {path}", {"source": str(path)})

    module = _exec_module(resolved)

    base_url = None
    for name in BASE_URL_FIELDS:
        base_url = getattr(module, name, None)
        if base_url:
            break

    specification = specification_from_fields(
        base_url, getattr(module, "spec", None), source=resolved
    )
    logger.info(
        "Loaded specification",
        extra={
            "source": str(resolved),
            "base_url": specification.base_url,
            "groups": len(specification.groups),
            "cases": specification.case_count,
        },
    )
    return specification
