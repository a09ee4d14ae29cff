"""
Shared state carried across every case of a suite run.

One SharedState instance lives for the whole run. Cases see each other's
writes in declared order, across group boundaries. Only post-response hooks
receive the mutable store; path resolution and header/body functions get a
read-only StateSnapshot.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

# Keys every run starts with, all unset
DEFAULT_STATE_KEYS = (
    "token",
    "email",
    "password",
    "userId",
    "formId",
    "questionId",
    "responseId",
)


class StateSnapshot(Mapping[str, Any]):
    """Read-only view of shared state with attribute access (`state.token`)."""

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any]):
        object.__setattr__(self, "_data", data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> Any:
        # Unknown keys read as None, matching the pre-seeded keys
        if name.startswith("__") or name == "_data":
            raise AttributeError(name)
        return self._data.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise TypeError("state is read-only outside post-response hooks")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._data)!r})"


class SharedState(StateSnapshot, MutableMapping[str, Any]):
    """
    Mutable shared state store.

    Supports both `state["formId"] = 3` and `state.formId = 3`. Hooks may
    introduce new keys at any time. Keys named like a mapping method
    (`items`, `keys`, `get`, ...) need item access.
    """

    __slots__ = ()

    def __init__(
        self,
        initial: Mapping[str, Any] | None = None,
        keys: tuple[str, ...] = DEFAULT_STATE_KEYS,
    ):
        data: dict[str, Any] = dict.fromkeys(keys)
        if initial:
            data.update(initial)
        super().__init__(data)

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __setattr__(self, name: str, value: Any) -> None:
        # Attribute reads would return the method, not the stored value
        if hasattr(type(self), name):
            raise AttributeError(
                f"{name!r} is a state method name; use item access: state[{name!r}] = ..."
            )
        self._data[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self._data[name]
        except KeyError:
            raise AttributeError(name) from None

    def snapshot(self) -> StateSnapshot:
        """Return a read-only view over the live data."""
        return StateSnapshot(self._data)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)
