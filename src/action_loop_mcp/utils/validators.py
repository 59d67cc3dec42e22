"""Validation utilities for rule checks and boundary parsing."""

import math
import operator
from collections.abc import Callable
from typing import Any


class FactsValidationError(ValueError):
    """Raised when caller-supplied input is structurally invalid."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


def check_rule(
    value: float | None,
    threshold: float,
    comparator: Callable[[float, float], bool] = operator.ge,
) -> bool | None:
    """
    Check a rule with nullable boolean semantics.

    If value is None, returns None (not False). Callers treat anything
    other than True as "do not fire".

    Args:
        value: The value to check (may be None)
        threshold: The threshold to compare against
        comparator: Comparison function (default: operator.ge, inclusive)

    Returns:
        True/False if value is not None, None otherwise
    """
    if value is None:
        return None
    return comparator(value, threshold)


def check_rule_expr(
    value1: float | None,
    value2: float | None,
    comparator: Callable[[float, float], bool] = operator.le,
) -> bool | None:
    """
    Check a rule comparing two values with nullable boolean semantics.

    If either value is None, returns None (not False).
    """
    if value1 is None or value2 is None:
        return None
    return comparator(value1, value2)


def known_days(value: int | None) -> int | None:
    """Treat negative ages as unknown."""
    if value is None or value < 0:
        return None
    return value


# ---------------------------------------------------------------------------
# Value checks (fail fast on wrong types)
# ---------------------------------------------------------------------------


def ensure_int(value: Any, field: str, *, min_value: int | None = None) -> int | None:
    """Integer or None. Booleans and floats with a fraction are rejected."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise FactsValidationError(field, f"expected integer, got bool ({value!r})")
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise FactsValidationError(field, f"expected integer, got {value!r}")
        value = int(value)
    if not isinstance(value, int):
        raise FactsValidationError(field, f"expected integer, got {type(value).__name__}")
    if min_value is not None and value < min_value:
        raise FactsValidationError(field, f"must be >= {min_value}, got {value}")
    return value


def ensure_float(value: Any, field: str) -> float | None:
    """Finite number or None. NaN and inf are treated as unknown."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FactsValidationError(field, f"expected number, got {type(value).__name__}")
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return float(value)


def ensure_bool(value: Any, field: str) -> bool | None:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise FactsValidationError(field, f"expected bool, got {type(value).__name__}")
    return value


def ensure_str(value: Any, field: str, *, choices: tuple[str, ...] | None = None) -> str | None:
    """String or None, optionally restricted to an allowlist."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise FactsValidationError(field, f"expected string, got {type(value).__name__}")
    if choices is not None and value not in choices:
        raise FactsValidationError(field, f"invalid value '{value}'. Must be one of: {choices}")
    return value


def ensure_records(values: Any, record_type: type, field: str) -> tuple[Any, ...]:
    """Sequence whose every element is a record_type instance."""
    if not isinstance(values, (list, tuple)):
        raise FactsValidationError(field, f"expected list, got {type(values).__name__}")
    for i, value in enumerate(values):
        if not isinstance(value, record_type):
            raise FactsValidationError(
                f"{field}[{i}]", f"expected {record_type.__name__}, got {type(value).__name__}"
            )
    return tuple(values)


# ---------------------------------------------------------------------------
# Field readers
# ---------------------------------------------------------------------------

_MISSING = object()


def _get(data: dict[str, Any], key: str, field: str, required: bool) -> Any:
    value = data.get(key, _MISSING)
    if value is _MISSING:
        if required:
            raise FactsValidationError(field, "is required")
        return None
    return value


def read_int(
    data: dict[str, Any],
    key: str,
    *,
    field: str | None = None,
    required: bool = False,
    default: int | None = None,
) -> int | None:
    """Read an integer field. Booleans and floats with a fraction are rejected."""
    field = field or key
    value = ensure_int(_get(data, key, field, required), field)
    return default if value is None else value


def read_float(
    data: dict[str, Any],
    key: str,
    *,
    field: str | None = None,
    required: bool = False,
) -> float | None:
    """Read a finite numeric field. NaN and inf are treated as unknown."""
    field = field or key
    return ensure_float(_get(data, key, field, required), field)


def read_bool(
    data: dict[str, Any],
    key: str,
    *,
    field: str | None = None,
    default: bool = False,
) -> bool:
    """Read a boolean field."""
    field = field or key
    value = ensure_bool(_get(data, key, field, False), field)
    return default if value is None else value


def read_str(
    data: dict[str, Any],
    key: str,
    *,
    field: str | None = None,
    required: bool = False,
    choices: tuple[str, ...] | None = None,
) -> str | None:
    """Read a string field, optionally restricted to an allowlist."""
    field = field or key
    value = _get(data, key, field, required)
    if value is None and required:
        raise FactsValidationError(field, "is required")
    return ensure_str(value, field, choices=choices)


def read_list(
    data: dict[str, Any],
    key: str,
    *,
    field: str | None = None,
) -> list[Any]:
    """Read a list field. Missing or null becomes an empty list."""
    field = field or key
    value = _get(data, key, field, False)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise FactsValidationError(field, f"expected list, got {type(value).__name__}")
    return list(value)


def require_mapping(value: Any, field: str) -> dict[str, Any]:
    """Ensure a record is a dict."""
    if not isinstance(value, dict):
        raise FactsValidationError(field, f"expected object, got {type(value).__name__}")
    return value
