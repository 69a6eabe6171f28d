"""
Record predicates for reference fields.

``matchAll`` requires every listed attribute to equal its expected value;
``matchAny`` requires at least one listed attribute to equal its expected
value, or to be one of the expected values when a list is given. Attribute
names are dotted paths into nested objects.
"""

from typing import Any, Dict, List, Mapping, Optional, cast

from ..content.models import Collection, Entity

_MISSING = object()


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    """Return the value at a dotted path, or ``default`` if any step is missing."""
    current = obj
    for part in path.split("."):
        if not isinstance(current, dict):
            return default
        current = cast(Dict[str, Any], current).get(part, _MISSING)
        if current is _MISSING:
            return default
    return current


def _values_equal(actual: Any, expected: Any) -> bool:
    # True == 1 in Python; keep booleans distinct from numbers
    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    return actual == expected


def matches_all(record: Entity, conditions: Mapping[str, Any]) -> bool:
    """Return True if every dotted path equals its expected value."""
    return all(
        _values_equal(get_path(record, path, _MISSING), expected)
        for path, expected in conditions.items()
    )


def matches_any(record: Entity, conditions: Mapping[str, Any]) -> bool:
    """Return True if at least one dotted path matches its expectation."""
    for path, expected in conditions.items():
        actual = get_path(record, path, _MISSING)
        if actual is _MISSING:
            continue
        if isinstance(expected, list):
            if any(_values_equal(actual, e) for e in cast(List[Any], expected)):
                return True
        elif _values_equal(actual, expected):
            return True
    return False


def filter_records(
    records: Collection,
    match_all: Optional[Mapping[str, Any]] = None,
    match_any: Optional[Mapping[str, Any]] = None,
) -> Collection:
    """Keep records passing both predicates (an absent predicate passes)."""
    if not match_all and not match_any:
        return records
    return [
        r
        for r in records
        if isinstance(r, dict)
        and (not match_all or matches_all(r, match_all))
        and (not match_any or matches_any(r, match_any))
    ]
