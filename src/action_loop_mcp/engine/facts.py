"""Workflow facts: the read-only snapshot the evaluator is handed.

Facts are built fresh per evaluation call by the caller. Structural problems
(wrong types, missing record ids) fail fast with FactsValidationError.
Unknown or negative ages are kept as None, which never fires a trigger.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from action_loop_mcp.utils.dates import days_between, parse_timestamp
from action_loop_mcp.utils.validators import (
    FactsValidationError,
    ensure_bool,
    ensure_float,
    ensure_int,
    ensure_records,
    ensure_str,
    known_days,
    read_bool,
    read_float,
    read_int,
    read_list,
    read_str,
    require_mapping,
)


def _age(
    data: dict[str, Any],
    days_key: str,
    timestamp_key: str,
    now: datetime | None,
    field: str,
) -> int | None:
    """Age in days, explicit value first, else derived from a timestamp and now."""
    days = read_int(data, days_key, field=f"{field}.{days_key}")
    if days is not None:
        return known_days(days)
    since = parse_timestamp(data.get(timestamp_key), f"{field}.{timestamp_key}")
    return days_between(since, now)


def _require_id(value: Any, field: str) -> None:
    if not ensure_str(value, field):
        raise FactsValidationError(field, "must be a non-empty string")


@dataclass(frozen=True)
class UnsimulatedIdea:
    id: str
    action: str = ""
    rationale: str = ""

    def __post_init__(self) -> None:
        _require_id(self.id, "id")
        ensure_str(self.action, "action")
        ensure_str(self.rationale, "rationale")

    @classmethod
    def from_dict(cls, data: Any, field: str) -> "UnsimulatedIdea":
        data = require_mapping(data, field)
        return cls(
            id=read_str(data, "id", field=f"{field}.id", required=True),
            action=read_str(data, "action", field=f"{field}.action") or "",
            rationale=read_str(data, "rationale", field=f"{field}.rationale") or "",
        )


@dataclass(frozen=True)
class StalledProposal:
    id: str
    action: str
    portfolio: str
    days_pending: int | None
    portfolio_id: str | None = None

    def __post_init__(self) -> None:
        _require_id(self.id, "id")
        ensure_str(self.action, "action")
        ensure_str(self.portfolio, "portfolio")
        object.__setattr__(self, "days_pending", ensure_int(self.days_pending, "days_pending"))
        ensure_str(self.portfolio_id, "portfolio_id")

    @classmethod
    def from_dict(cls, data: Any, field: str, now: datetime | None = None) -> "StalledProposal":
        data = require_mapping(data, field)
        return cls(
            id=read_str(data, "id", field=f"{field}.id", required=True),
            action=read_str(data, "action", field=f"{field}.action") or "",
            portfolio=read_str(data, "portfolio", field=f"{field}.portfolio") or "",
            days_pending=_age(data, "days_pending", "submitted_at", now, field),
            portfolio_id=read_str(data, "portfolio_id", field=f"{field}.portfolio_id"),
        )


@dataclass(frozen=True)
class UnexecutedApproval:
    id: str
    action: str
    portfolio: str
    portfolio_id: str | None = None

    def __post_init__(self) -> None:
        _require_id(self.id, "id")
        ensure_str(self.action, "action")
        ensure_str(self.portfolio, "portfolio")
        ensure_str(self.portfolio_id, "portfolio_id")

    @classmethod
    def from_dict(cls, data: Any, field: str) -> "UnexecutedApproval":
        data = require_mapping(data, field)
        return cls(
            id=read_str(data, "id", field=f"{field}.id", required=True),
            action=read_str(data, "action", field=f"{field}.action") or "",
            portfolio=read_str(data, "portfolio", field=f"{field}.portfolio") or "",
            portfolio_id=read_str(data, "portfolio_id", field=f"{field}.portfolio_id"),
        )


@dataclass(frozen=True)
class RatingChange:
    rating_id: str
    old_value: str
    new_value: str
    days_since: int | None
    changed_by: str | None = None

    def __post_init__(self) -> None:
        _require_id(self.rating_id, "rating_id")
        ensure_str(self.old_value, "old_value")
        ensure_str(self.new_value, "new_value")
        object.__setattr__(self, "days_since", ensure_int(self.days_since, "days_since"))
        ensure_str(self.changed_by, "changed_by")

    @classmethod
    def from_dict(cls, data: Any, field: str, now: datetime | None = None) -> "RatingChange":
        data = require_mapping(data, field)
        return cls(
            rating_id=read_str(data, "rating_id", field=f"{field}.rating_id", required=True),
            old_value=read_str(data, "old_value", field=f"{field}.old_value") or "",
            new_value=read_str(data, "new_value", field=f"{field}.new_value") or "",
            days_since=_age(data, "days_since", "changed_at", now, field),
            changed_by=read_str(data, "changed_by", field=f"{field}.changed_by"),
        )


@dataclass(frozen=True)
class WorkflowFacts:
    """Independent workflow signals for one asset, owned by the caller."""

    expected_return: float | None = None
    has_ev_data: bool = False
    active_idea_count: int = 0
    unsimulated_ideas: tuple[UnsimulatedIdea, ...] = ()
    stalled_proposals: tuple[StalledProposal, ...] = ()
    unexecuted_approvals: tuple[UnexecutedApproval, ...] = ()
    thesis_days_stale: int | None = None
    rating_changes: tuple[RatingChange, ...] = ()
    ev_threshold: float | None = None
    asset_id: str | None = None
    asset_ticker: str | None = None
    now: datetime | None = None

    def __post_init__(self) -> None:
        for name, record_type in (
            ("unsimulated_ideas", UnsimulatedIdea),
            ("stalled_proposals", StalledProposal),
            ("unexecuted_approvals", UnexecutedApproval),
            ("rating_changes", RatingChange),
        ):
            object.__setattr__(self, name, ensure_records(getattr(self, name), record_type, name))

        active_idea_count = ensure_int(self.active_idea_count, "active_idea_count", min_value=0)
        if active_idea_count is None:
            raise FactsValidationError("active_idea_count", "is required")
        object.__setattr__(self, "active_idea_count", active_idea_count)
        if ensure_bool(self.has_ev_data, "has_ev_data") is None:
            raise FactsValidationError("has_ev_data", "is required")
        object.__setattr__(
            self, "thesis_days_stale", ensure_int(self.thesis_days_stale, "thesis_days_stale")
        )

        # Non-finite numbers are unknown, as at the dict boundary
        object.__setattr__(self, "expected_return", ensure_float(self.expected_return, "expected_return"))
        ev_threshold = ensure_float(self.ev_threshold, "ev_threshold")
        if ev_threshold is not None and ev_threshold < 0:
            raise FactsValidationError("ev_threshold", f"must be >= 0, got {ev_threshold}")
        object.__setattr__(self, "ev_threshold", ev_threshold)

        ensure_str(self.asset_id, "asset_id")
        ensure_str(self.asset_ticker, "asset_ticker")
        object.__setattr__(self, "now", parse_timestamp(self.now, "now"))

    @classmethod
    def from_dict(cls, data: Any) -> "WorkflowFacts":
        """
        Parse facts from a JSON-style dict.

        Ages may be given in days (thesis_days_stale, days_pending, days_since)
        or derived from timestamps (thesis_updated_at, submitted_at, changed_at)
        against the caller-supplied "now".

        Raises:
            FactsValidationError: On structurally invalid input
        """
        data = require_mapping(data, "facts")
        now = parse_timestamp(data.get("now"), "now")

        thesis_days = read_int(data, "thesis_days_stale")
        if thesis_days is not None:
            thesis_days = known_days(thesis_days)
        else:
            thesis_days = days_between(
                parse_timestamp(data.get("thesis_updated_at"), "thesis_updated_at"), now
            )

        return cls(
            expected_return=read_float(data, "expected_return"),
            has_ev_data=read_bool(data, "has_ev_data"),
            active_idea_count=read_int(data, "active_idea_count", default=0),
            unsimulated_ideas=tuple(
                UnsimulatedIdea.from_dict(rec, f"unsimulated_ideas[{i}]")
                for i, rec in enumerate(read_list(data, "unsimulated_ideas"))
            ),
            stalled_proposals=tuple(
                StalledProposal.from_dict(rec, f"stalled_proposals[{i}]", now)
                for i, rec in enumerate(read_list(data, "stalled_proposals"))
            ),
            unexecuted_approvals=tuple(
                UnexecutedApproval.from_dict(rec, f"unexecuted_approvals[{i}]")
                for i, rec in enumerate(read_list(data, "unexecuted_approvals"))
            ),
            thesis_days_stale=thesis_days,
            rating_changes=tuple(
                RatingChange.from_dict(rec, f"rating_changes[{i}]", now)
                for i, rec in enumerate(read_list(data, "rating_changes"))
            ),
            ev_threshold=read_float(data, "ev_threshold"),
            asset_id=read_str(data, "asset_id"),
            asset_ticker=read_str(data, "asset_ticker"),
            now=now,
        )
