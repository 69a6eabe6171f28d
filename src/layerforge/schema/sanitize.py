"""
Cleanup of records before they are written.
"""

from typing import Any, Dict, List, cast

# Placeholder produced by rich-text editors for an empty document
EMPTY_HTML = "<p></p>"


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == "" or value == EMPTY_HTML
    if isinstance(value, dict):
        return not value
    return False


def clear_empty_values(node: Any) -> Any:
    """Remove empty values from a record tree in place.

    Drops None, empty strings, empty rich-text documents and empty objects,
    deepest first, so an object emptied by the cleanup is removed too.
    Empty lists are kept: they are meaningful (e.g. "no slots").

    Args:
        node: Record, list of records or any nested value

    Returns:
        The same node, for chaining
    """
    if isinstance(node, dict):
        obj = cast(Dict[str, Any], node)
        for key in list(obj.keys()):
            clear_empty_values(obj[key])
            if _is_empty(obj[key]):
                del obj[key]
    elif isinstance(node, list):
        items = cast(List[Any], node)
        for item in items:
            clear_empty_values(item)
        items[:] = [item for item in items if not _is_empty(item)]
    return node
