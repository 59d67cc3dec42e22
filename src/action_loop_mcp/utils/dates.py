"""Timestamp parsing and day arithmetic against a caller-supplied "now"."""

from datetime import datetime
from typing import Any

import pytz

from action_loop_mcp.utils.validators import FactsValidationError

SECONDS_PER_DAY = 86400


def parse_timestamp(value: Any, field: str) -> datetime | None:
    """
    Parse a datetime or ISO-8601 string into an aware UTC datetime.

    Naive values are taken to be UTC. A trailing "Z" is accepted.

    Raises:
        FactsValidationError: If the value is not a datetime or parseable string
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise FactsValidationError(field, f"invalid timestamp '{value}'") from e
    else:
        raise FactsValidationError(field, f"expected timestamp, got {type(value).__name__}")

    if parsed.tzinfo is None:
        return pytz.utc.localize(parsed)
    return parsed.astimezone(pytz.utc)


def days_between(start: datetime | None, now: datetime | None) -> int | None:
    """
    Whole days elapsed from start to now, floored and clamped at zero.

    Returns None when either side is unknown.
    """
    if start is None or now is None:
        return None
    seconds = (now - start).total_seconds()
    return max(0, int(seconds // SECONDS_PER_DAY))
