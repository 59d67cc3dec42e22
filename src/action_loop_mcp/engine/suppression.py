"""Per-user dismissal filter.

Suppression records are persisted and queried outside the engine; this
module only decides, given those records and the caller's "now", which
items stay visible.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from action_loop_mcp.engine.models import ITEM_TYPES, ActionItem
from action_loop_mcp.utils.dates import parse_timestamp
from action_loop_mcp.utils.validators import read_str, require_mapping

DEFAULT_SUPPRESSION_HOURS = 24


@dataclass(frozen=True)
class Suppression:
    """A dismissed item type, hidden until suppressed_until passes."""

    item_type: str
    suppressed_until: datetime | None
    user_id: str | None = None
    asset_id: str | None = None

    @classmethod
    def from_dict(cls, data: Any, field: str = "suppression") -> "Suppression":
        data = require_mapping(data, field)
        return cls(
            item_type=read_str(
                data, "item_type", field=f"{field}.item_type", required=True, choices=ITEM_TYPES
            ),
            suppressed_until=parse_timestamp(
                data.get("suppressed_until"), f"{field}.suppressed_until"
            ),
            user_id=read_str(data, "user_id", field=f"{field}.user_id"),
            asset_id=read_str(data, "asset_id", field=f"{field}.asset_id"),
        )


def is_suppressed(
    item_type: str,
    suppressions: Iterable[Suppression],
    now: datetime,
    asset_id: str | None = None,
) -> bool:
    """
    True if a record for this type expires strictly after now.

    Records scoped to a different asset are ignored; unscoped records apply
    to every asset.
    """
    now = parse_timestamp(now, "now")
    for s in suppressions:
        if s.item_type != item_type or s.suppressed_until is None:
            continue
        if s.asset_id is not None and asset_id is not None and s.asset_id != asset_id:
            continue
        if s.suppressed_until > now:
            return True
    return False


def filter_suppressed(
    items: Sequence[ActionItem],
    suppressions: Iterable[Suppression],
    now: datetime,
) -> list[ActionItem]:
    """Drop dismissible items whose type is suppressed. Order is preserved."""
    suppressions = list(suppressions)
    now = parse_timestamp(now, "now")
    return [
        item
        for item in items
        if not item.dismissible
        or not is_suppressed(item.type, suppressions, now, item.context.asset_id)
    ]


def suppression_expiry(now: datetime, hours: int = DEFAULT_SUPPRESSION_HOURS) -> datetime:
    """When a dismissal made at now should lapse."""
    return now + timedelta(hours=hours)
