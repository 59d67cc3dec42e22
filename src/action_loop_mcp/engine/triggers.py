"""Trigger evaluators: one pure function per business condition.

Each evaluator reads a narrow slice of WorkflowFacts and returns at most one
ActionItem. Evaluators never look at each other's output. The one exception
to independence, the opportunity trigger, receives a FiredSummary of the
first stage instead of reading shared state.

    Process (workflow stuck)
        proposal_stalled         red, first qualifying proposal only
        execution_not_confirmed  red, first unexecuted approval only
        idea_not_simulated       orange, reports the count
    Risk (drift / staleness)
        thesis_stale             orange at 90d, red at 180d
        rating_no_followup       orange, first change, 14d window
    Alpha (ignored signals)
        opportunity_no_idea      orange, gated on no process item firing

Descriptions are fixed templates. Portfolio names, actions and ages go into
chips only.
"""

import operator
from collections.abc import Callable
from dataclasses import dataclass

from action_loop_mcp.engine.config import Thresholds
from action_loop_mcp.engine.facts import WorkflowFacts
from action_loop_mcp.engine.models import ActionItem, ItemAction, ItemContext, MetaChip
from action_loop_mcp.utils.sanitize import capitalize_first, clean_label
from action_loop_mcp.utils.validators import check_rule, known_days


@dataclass(frozen=True)
class FiredSummary:
    """What stage one produced, handed to gated triggers."""

    categories: frozenset[str]
    types: frozenset[str]

    @property
    def has_process_item(self) -> bool:
        return "process" in self.categories

    @classmethod
    def from_items(cls, items: list[ActionItem]) -> "FiredSummary":
        return cls(
            categories=frozenset(i.category for i in items),
            types=frozenset(i.type for i in items),
        )


# Fixed description text per item type; names and numbers belong in chips
DESCRIPTIONS = {
    "execution_not_confirmed": "Approved trade has not been logged as executed.",
    "proposal_stalled": "Proposal pending longer than expected.",
    "idea_not_simulated": "Trade idea created without portfolio impact test.",
    "thesis_stale": "Research thesis has not been updated recently.",
    "rating_no_followup": "Rating changed without a corresponding trade idea.",
    "opportunity_no_idea": "Model implies significant expected value with no trade idea.",
}


Trigger = Callable[[WorkflowFacts, Thresholds], ActionItem | None]
GatedTrigger = Callable[[WorkflowFacts, Thresholds, FiredSummary], ActionItem | None]


def _subject(base: str, facts: WorkflowFacts) -> str:
    """Deterministic id for asset-scoped triggers."""
    if facts.asset_id:
        return f"{base}-{facts.asset_id}"
    return base


def _asset_context(facts: WorkflowFacts, **kwargs: str | None) -> ItemContext:
    return ItemContext(asset_id=facts.asset_id, asset_ticker=facts.asset_ticker, **kwargs)


def _portfolio_chip(name: str) -> MetaChip:
    return MetaChip("Portfolio", clean_label(name) or "Unassigned")


def _action_chip(action: str) -> MetaChip:
    return MetaChip("Action", capitalize_first(clean_label(action)) or "Unknown", "danger")


# ---------------------------------------------------------------------------
# Process
# ---------------------------------------------------------------------------


def execution_not_confirmed(facts: WorkflowFacts, thresholds: Thresholds) -> ActionItem | None:
    """Approved trade not yet logged as executed."""
    if not facts.unexecuted_approvals:
        return None

    approval = facts.unexecuted_approvals[0]
    return ActionItem(
        id=f"p3-{approval.id}",
        type="execution_not_confirmed",
        kind="execution",
        severity="red",
        category="process",
        title="Execution Not Confirmed",
        description=DESCRIPTIONS["execution_not_confirmed"],
        meta=(_portfolio_chip(approval.portfolio), _action_chip(approval.action)),
        primary_action=ItemAction(
            "Confirm", "OPEN_CONFIRM_EXECUTION", {"approval_id": approval.id}
        ),
        dismissible=False,
        age_days=0,
        context=_asset_context(
            facts,
            portfolio_id=approval.portfolio_id,
            portfolio_name=approval.portfolio or None,
            trade_idea_id=approval.id,
        ),
    )


def proposal_stalled(facts: WorkflowFacts, thresholds: Thresholds) -> ActionItem | None:
    """Proposal pending a decision for at least stalled_days_threshold days."""
    stalled = [
        p
        for p in facts.stalled_proposals
        if check_rule(known_days(p.days_pending), thresholds.stalled_days_threshold, operator.ge)
    ]
    if not stalled:
        return None

    proposal = stalled[0]
    days = proposal.days_pending
    return ActionItem(
        id=f"p1-{proposal.id}",
        type="proposal_stalled",
        kind="proposal",
        severity="red",
        category="process",
        title="Proposal Awaiting Decision",
        description=DESCRIPTIONS["proposal_stalled"],
        meta=(_portfolio_chip(proposal.portfolio), MetaChip("Age", f"{days}d", "danger")),
        primary_action=ItemAction("Review", "OPEN_PROPOSAL_REVIEW", {"proposal_id": proposal.id}),
        secondary_action=ItemAction("Open Trade Queue", "OPEN_TRADE_QUEUE"),
        dismissible=False,
        age_days=days,
        context=_asset_context(
            facts,
            portfolio_id=proposal.portfolio_id,
            portfolio_name=proposal.portfolio or None,
            proposal_id=proposal.id,
        ),
    )


def idea_not_simulated(facts: WorkflowFacts, thresholds: Thresholds) -> ActionItem | None:
    """Ideas that were never run through a portfolio impact simulation."""
    count = len(facts.unsimulated_ideas)
    if count == 0:
        return None

    return ActionItem(
        id=_subject("p2-unsimulated", facts),
        type="idea_not_simulated",
        kind="simulation",
        severity="orange",
        category="process",
        title="Idea Not Simulated",
        description=DESCRIPTIONS["idea_not_simulated"],
        meta=(MetaChip("Count", f"{count} idea{'s' if count != 1 else ''}", "warning"),),
        primary_action=ItemAction("Simulate", "OPEN_TRADE_LAB_SIMULATION"),
        dismissible=True,
        age_days=0,
        context=_asset_context(facts, trade_idea_id=facts.unsimulated_ideas[0].id),
    )


# ---------------------------------------------------------------------------
# Risk
# ---------------------------------------------------------------------------


def thesis_stale(facts: WorkflowFacts, thresholds: Thresholds) -> ActionItem | None:
    """Research thesis not updated. No thesis (None) never fires."""
    age = known_days(facts.thesis_days_stale)
    if not check_rule(age, thresholds.thesis_orange_days, operator.ge):
        return None

    critical = bool(check_rule(age, thresholds.thesis_red_days, operator.ge))
    severity = "red" if critical else "orange"
    return ActionItem(
        id=_subject("r1-thesis-stale", facts),
        type="thesis_stale",
        kind="thesis",
        severity=severity,
        category="risk",
        title="Thesis May Be Stale",
        description=DESCRIPTIONS["thesis_stale"],
        meta=(MetaChip("Age", f"{age}d", "danger" if critical else "warning"),),
        primary_action=ItemAction("Update Thesis", "OPEN_UPDATE_THESIS"),
        # Once critically stale the item must stay visible
        dismissible=not critical,
        age_days=age,
        context=_asset_context(facts),
    )


def rating_no_followup(facts: WorkflowFacts, thresholds: Thresholds) -> ActionItem | None:
    """Rating changed recently with no trade idea created afterwards."""
    if not facts.rating_changes:
        return None

    change = facts.rating_changes[0]
    days = known_days(change.days_since)
    if not check_rule(days, thresholds.rating_followup_window_days, operator.le):
        return None

    return ActionItem(
        id=f"r2-{change.rating_id}",
        type="rating_no_followup",
        kind="rating",
        severity="orange",
        category="risk",
        title="Rating Changed, No Follow-up",
        description=DESCRIPTIONS["rating_no_followup"],
        meta=(
            MetaChip("From", clean_label(change.old_value) or "None"),
            MetaChip("To", clean_label(change.new_value) or "None", "warning"),
            MetaChip("Changed", f"{days}d ago"),
        ),
        primary_action=ItemAction("Create Idea", "OPEN_CREATE_IDEA"),
        dismissible=True,
        age_days=days,
        context=_asset_context(facts),
    )


# ---------------------------------------------------------------------------
# Alpha (gated)
# ---------------------------------------------------------------------------


def opportunity_no_idea(
    facts: WorkflowFacts,
    thresholds: Thresholds,
    fired: FiredSummary,
) -> ActionItem | None:
    """
    Significant model expected return with no trade idea.

    Suppressed whenever a process item fired in the same pass: the workflow
    is already in motion, so "create an idea" would contradict it.
    """
    if fired.has_process_item:
        return None
    if not facts.has_ev_data or facts.active_idea_count != 0:
        return None

    threshold = facts.ev_threshold if facts.ev_threshold is not None else thresholds.ev_threshold
    ev = facts.expected_return
    if not check_rule(abs(ev) if ev is not None else None, threshold, operator.ge):
        return None

    direction = "upside" if ev > 0 else "downside"
    return ActionItem(
        id=_subject("a1-opportunity", facts),
        type="opportunity_no_idea",
        kind="signal",
        severity="orange",
        category="alpha",
        title="Opportunity: No Active Idea",
        description=DESCRIPTIONS["opportunity_no_idea"],
        meta=(MetaChip("EV", f"{abs(ev) * 100:.0f}% {direction}", "warning"),),
        primary_action=ItemAction("Create Idea", "OPEN_CREATE_IDEA"),
        dismissible=True,
        age_days=0,
        context=_asset_context(facts),
    )


# Stage one: independent triggers. Stage two: triggers gated on stage one.
STAGE_ONE_TRIGGERS: tuple[Trigger, ...] = (
    execution_not_confirmed,
    proposal_stalled,
    idea_not_simulated,
    thesis_stale,
    rating_no_followup,
)

GATED_TRIGGERS: tuple[GatedTrigger, ...] = (opportunity_no_idea,)
