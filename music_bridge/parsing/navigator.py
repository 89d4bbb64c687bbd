"""Total traversal of untyped JSON values.

Catalog responses are deeply nested and change shape without notice. All
access to raw JSON goes through ``navigate``, which never raises: a missing
key, an out-of-range index or a step into the wrong kind of value all yield
``MISSING``. ``MISSING`` is distinct from ``None``, which is JSON null.
"""

from collections.abc import Sequence
from typing import Any, Final, TypeAlias, Union

JSONValue: TypeAlias = Union[dict[str, Any], list[Any], str, int, float, bool, None]
PathStep: TypeAlias = str | int
Path: TypeAlias = Sequence[PathStep]


class _Missing:
    """Sentinel for an absent value."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def navigate(value: Any, path: Path) -> Any:
    """Follow ``path`` through ``value``.

    String steps index objects, integer steps index arrays. Any step that does
    not apply to the current value ends the walk with ``MISSING``.
    """
    current = value
    for step in path:
        if isinstance(step, str):
            if not isinstance(current, dict) or step not in current:
                return MISSING
            current = current[step]
        elif isinstance(step, int) and not isinstance(step, bool):
            if not isinstance(current, list) or not 0 <= step < len(current):
                return MISSING
            current = current[step]
        else:
            return MISSING
    return current


def is_missing(value: Any) -> bool:
    return value is MISSING


def navigate_dict(value: Any, path: Path = ()) -> dict[str, Any] | None:
    found = navigate(value, path)
    return found if isinstance(found, dict) else None


def navigate_list(value: Any, path: Path = ()) -> list[Any] | None:
    found = navigate(value, path)
    return found if isinstance(found, list) else None


def navigate_dicts(value: Any, path: Path = ()) -> list[dict[str, Any]]:
    """Objects found in the array at ``path``; non-object entries are skipped."""
    found = navigate_list(value, path) or []
    return [entry for entry in found if isinstance(entry, dict)]


def navigate_str(value: Any, path: Path = ()) -> str | None:
    found = navigate(value, path)
    return found if isinstance(found, str) else None


def navigate_int(value: Any, path: Path = ()) -> int | None:
    found = navigate(value, path)
    if isinstance(found, bool) or not isinstance(found, int):
        return None
    return found


def first_present(value: Any, *paths: Path) -> Any:
    """Result of the first path that is not ``MISSING``."""
    for path in paths:
        found = navigate(value, path)
        if found is not MISSING:
            return found
    return MISSING
