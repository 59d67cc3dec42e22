"""Action item model shared by the evaluator, classifier and stack aggregator."""

from dataclasses import dataclass, field
from typing import Any

from action_loop_mcp.utils.validators import (
    FactsValidationError,
    read_bool,
    read_int,
    read_list,
    read_str,
    require_mapping,
)

SEVERITIES = ("red", "orange", "gray", "blue")
CATEGORIES = ("process", "alpha", "risk")

# Types the evaluator emits
ENGINE_ITEM_TYPES = (
    "proposal_stalled",
    "idea_not_simulated",
    "execution_not_confirmed",
    "opportunity_no_idea",
    "thesis_stale",
    "rating_no_followup",
)

# Types that only arrive from the surrounding attention system (cockpit input)
EXTERNAL_ITEM_TYPES = (
    "deliverable_overdue",
    "project_needs_attention",
    "team_prompt",
    "system_flag",
    "intel_signal",
)

ITEM_TYPES = ENGINE_ITEM_TYPES + EXTERNAL_ITEM_TYPES

STACK_KINDS = (
    "proposal",
    "execution",
    "simulation",
    "thesis",
    "deliverable",
    "rating",
    "signal",
    "project",
    "prompt",
    "flag",
    "other",
)

CHIP_VARIANTS = ("default", "warning", "danger")

# Ordinal severity: higher is more urgent. gray and blue share the lowest tier.
SEVERITY_ORDINAL = {"red": 3, "orange": 2, "gray": 1, "blue": 1}
HIGH_SEVERITY = "red"
MEDIUM_SEVERITY = "orange"


@dataclass(frozen=True)
class MetaChip:
    """Structured display datum. Proper nouns live here, never in descriptions."""

    label: str
    value: str
    variant: str = "default"

    def __post_init__(self) -> None:
        if self.variant not in CHIP_VARIANTS:
            raise FactsValidationError(
                "meta.variant", f"invalid value '{self.variant}'. Must be one of: {CHIP_VARIANTS}"
            )

    @property
    def text(self) -> str:
        return f"{self.label}: {self.value}"

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "value": self.value, "variant": self.variant}

    @classmethod
    def from_dict(cls, data: Any, field: str = "meta") -> "MetaChip":
        data = require_mapping(data, field)
        return cls(
            label=read_str(data, "label", field=f"{field}.label", required=True),
            value=read_str(data, "value", field=f"{field}.value", required=True),
            variant=read_str(data, "variant", field=f"{field}.variant", choices=CHIP_VARIANTS)
            or "default",
        )


@dataclass(frozen=True)
class ItemAction:
    """A single actionable next step, dispatched by action_key in the caller."""

    label: str
    action_key: str
    payload: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"label": self.label, "action_key": self.action_key}
        if self.payload:
            out["payload"] = dict(self.payload)
        return out

    @classmethod
    def from_dict(cls, data: Any, field: str) -> "ItemAction":
        data = require_mapping(data, field)
        payload = data.get("payload") or {}
        payload = require_mapping(payload, f"{field}.payload")
        return cls(
            label=read_str(data, "label", field=f"{field}.label", required=True),
            action_key=read_str(data, "action_key", field=f"{field}.action_key", required=True),
            payload={str(k): str(v) for k, v in payload.items()},
        )


@dataclass(frozen=True)
class ItemContext:
    """What the item is about. Used for breakdowns, never rendered into text."""

    asset_id: str | None = None
    asset_ticker: str | None = None
    portfolio_id: str | None = None
    portfolio_name: str | None = None
    proposal_id: str | None = None
    trade_idea_id: str | None = None

    @property
    def portfolio_key(self) -> str | None:
        """Portfolio identity for distinct counting; name stands in when id is absent."""
        return self.portfolio_id or self.portfolio_name

    def to_dict(self) -> dict[str, str]:
        return {
            k: v
            for k, v in (
                ("asset_id", self.asset_id),
                ("asset_ticker", self.asset_ticker),
                ("portfolio_id", self.portfolio_id),
                ("portfolio_name", self.portfolio_name),
                ("proposal_id", self.proposal_id),
                ("trade_idea_id", self.trade_idea_id),
            )
            if v is not None
        }

    @classmethod
    def from_dict(cls, data: Any, field: str = "context") -> "ItemContext":
        if data is None:
            return cls()
        data = require_mapping(data, field)
        return cls(
            **{
                key: read_str(data, key, field=f"{field}.{key}")
                for key in (
                    "asset_id",
                    "asset_ticker",
                    "portfolio_id",
                    "portfolio_name",
                    "proposal_id",
                    "trade_idea_id",
                )
            }
        )


@dataclass(frozen=True)
class ActionItem:
    """
    The canonical unit of attention.

    Created fresh on every evaluation and never mutated. The id is
    deterministic from trigger + subject so the same facts always yield the
    same id (sort tie-break, dismissal matching).
    """

    id: str
    type: str
    severity: str
    category: str
    title: str
    description: str
    primary_action: ItemAction
    dismissible: bool
    meta: tuple[MetaChip, ...] = ()
    secondary_action: ItemAction | None = None
    age_days: int = 0
    kind: str | None = None
    context: ItemContext = field(default_factory=ItemContext)

    def __post_init__(self) -> None:
        if not self.id:
            raise FactsValidationError("id", "must be a non-empty string")
        if self.type not in ITEM_TYPES:
            raise FactsValidationError("type", f"invalid value '{self.type}'. Must be one of: {ITEM_TYPES}")
        if self.severity not in SEVERITIES:
            raise FactsValidationError(
                "severity", f"invalid value '{self.severity}'. Must be one of: {SEVERITIES}"
            )
        if self.category not in CATEGORIES:
            raise FactsValidationError(
                "category", f"invalid value '{self.category}'. Must be one of: {CATEGORIES}"
            )
        if self.kind is not None and self.kind not in STACK_KINDS:
            raise FactsValidationError("kind", f"invalid value '{self.kind}'. Must be one of: {STACK_KINDS}")
        if isinstance(self.age_days, bool) or not isinstance(self.age_days, int) or self.age_days < 0:
            raise FactsValidationError("age_days", f"expected non-negative integer, got {self.age_days!r}")
        object.__setattr__(self, "meta", tuple(self.meta))

    @property
    def group_key(self) -> str:
        return f"{self.severity}:{self.category}"

    @property
    def severity_ordinal(self) -> int:
        return SEVERITY_ORDINAL[self.severity]

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "kind": self.kind,
            "severity": self.severity,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "meta": [chip.to_dict() for chip in self.meta],
            "primary_action": self.primary_action.to_dict(),
            "dismissible": self.dismissible,
            "age_days": self.age_days,
            "context": self.context.to_dict(),
        }
        if self.secondary_action is not None:
            out["secondary_action"] = self.secondary_action.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Any, field: str = "item") -> "ActionItem":
        """Parse an item handed in by the caller (e.g. from the attention system)."""
        data = require_mapping(data, field)
        secondary = data.get("secondary_action")
        age_days = read_int(data, "age_days", field=f"{field}.age_days", default=0)
        if age_days < 0:
            # Unknown age: contributes nothing to ordering or score
            age_days = 0
        return cls(
            id=read_str(data, "id", field=f"{field}.id", required=True),
            type=read_str(data, "type", field=f"{field}.type", required=True, choices=ITEM_TYPES),
            severity=read_str(data, "severity", field=f"{field}.severity", required=True, choices=SEVERITIES),
            category=read_str(data, "category", field=f"{field}.category", required=True, choices=CATEGORIES),
            title=read_str(data, "title", field=f"{field}.title") or "",
            description=read_str(data, "description", field=f"{field}.description") or "",
            primary_action=ItemAction.from_dict(
                data.get("primary_action"), field=f"{field}.primary_action"
            ),
            secondary_action=(
                ItemAction.from_dict(secondary, field=f"{field}.secondary_action")
                if secondary is not None
                else None
            ),
            dismissible=read_bool(data, "dismissible", field=f"{field}.dismissible"),
            meta=tuple(
                MetaChip.from_dict(chip, field=f"{field}.meta[{i}]")
                for i, chip in enumerate(read_list(data, "meta", field=f"{field}.meta"))
            ),
            age_days=age_days,
            kind=read_str(data, "kind", field=f"{field}.kind", choices=STACK_KINDS),
            context=ItemContext.from_dict(data.get("context"), field=f"{field}.context"),
        )
