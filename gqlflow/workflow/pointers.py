"""
Dotted-path extraction from response bodies.
Reads values like "data.createUser.id" out of a decoded JSON tree.
"""

from typing import Any


class _Undefined:
    """Marker for a path that did not resolve to a value.

    Distinct from None, which is a legitimate JSON null.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNDEFINED = _Undefined()


def is_undefined(value: Any) -> bool:
    """Return True if value is the absent-value marker."""
    return value is UNDEFINED


def extract_path(value: Any, path: str) -> Any:
    """
    Walk value by successive object keys.

    Only nested object keys are supported; there is no array-index or
    wildcard syntax.

    Args:
        value: Decoded JSON tree
        path: Dot-separated key path, e.g. "data.create.id"

    Returns:
        The value found, or UNDEFINED if any segment is missing or the
        current value is not an object
    """
    current = value
    for key in path.split('.'):
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return UNDEFINED
    return current
