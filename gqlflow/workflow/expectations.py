"""
Expected-value validation for step responses.

An expectation is a partial pattern: every field it names must match the
response, fields it does not name are ignored.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from .pointers import UNDEFINED, is_undefined


@dataclass
class ValidationResult:
    """Outcome of an expectation check."""
    valid: bool
    error: Optional[str] = None


def _render(value: Any) -> str:
    if is_undefined(value):
        return "undefined"
    return json.dumps(value)


def _is_object(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _scalar_equal(expected: Any, actual: Any) -> bool:
    """Strict equality: no bool/number coercion, but 1 == 1.0."""
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool) and expected is actual
    if isinstance(expected, (int, float)) and isinstance(actual, (int, float)):
        return expected == actual
    if _is_object(actual) or is_undefined(actual):
        return False
    return type(expected) is type(actual) and expected == actual


def _child(actual: Any, key: Any) -> Any:
    if isinstance(actual, dict):
        return actual.get(str(key), UNDEFINED)
    if isinstance(key, int) and 0 <= key < len(actual):
        return actual[key]
    if isinstance(key, str) and key.isdecimal() and int(key) < len(actual):
        return actual[int(key)]
    return UNDEFINED


def validate_expected(expected: Any, actual: Any, path: str = "") -> ValidationResult:
    """
    Recursively check that actual matches the expected pattern.

    Args:
        expected: Pattern; scalars compare strictly, objects (and arrays,
            which are matched index by index) compare key by key
        actual: Decoded response value
        path: Dotted path of the current position ("" at the root)

    Returns:
        ValidationResult; on failure error names the first mismatching path
    """
    where = path or "value"

    if not _is_object(expected):
        if not _scalar_equal(expected, actual):
            return ValidationResult(
                valid=False,
                error=f"Expected {where} to be {_render(expected)}, got {_render(actual)}",
            )
        return ValidationResult(valid=True)

    if not _is_object(actual):
        return ValidationResult(
            valid=False,
            error=f"Expected {where} to be an object, got {_render(actual)}",
        )

    keys = expected.keys() if isinstance(expected, dict) else range(len(expected))
    for key in keys:
        new_path = f"{path}.{key}" if path else str(key)
        result = validate_expected(expected[key], _child(actual, key), new_path)
        if not result.valid:
            return result

    return ValidationResult(valid=True)
