"""Evaluation orchestrator: the engine's single public entry point.

Two-stage pipeline over one facts snapshot:

1. Run every independent trigger, collect non-null items and summarise
   which categories fired.
2. Run gated triggers against that summary (conflict prevention).

The result is sorted into a total order: group rank (severity:category)
ascending, then age descending, then id ascending. No randomness and no
clock reads, so identical facts always produce an identical list.
"""

import logging
import re
from collections.abc import Sequence

from action_loop_mcp.engine.config import DEFAULT_THRESHOLDS, Thresholds
from action_loop_mcp.engine.facts import WorkflowFacts
from action_loop_mcp.engine.models import ActionItem
from action_loop_mcp.engine.triggers import (
    DESCRIPTIONS,
    GATED_TRIGGERS,
    STAGE_ONE_TRIGGERS,
    FiredSummary,
    GatedTrigger,
    Trigger,
)

logger = logging.getLogger(__name__)

GROUP_RANK = {
    "red:process": 0,
    "red:risk": 1,
    "red:alpha": 2,
    "orange:process": 3,
    "orange:risk": 4,
    "orange:alpha": 5,
    "gray:process": 6,
    "blue:process": 6,
    "gray:risk": 7,
    "gray:alpha": 8,
}
UNRANKED = 99

# Chips carrying proper nouns that must never leak into description text
PROPER_NOUN_CHIPS = frozenset({"Portfolio"})


def group_rank(item: ActionItem) -> int:
    """Rank of the item's severity:category pair. Unlisted pairs rank last."""
    return GROUP_RANK.get(item.group_key, UNRANKED)


def sort_key(item: ActionItem) -> tuple[int, int, str]:
    return (group_rank(item), -item.age_days, item.id)


def sort_items(items: Sequence[ActionItem]) -> list[ActionItem]:
    """Deterministic priority order: group rank ASC, age DESC, id ASC."""
    return sorted(items, key=sort_key)


class ActionLoopEngine:
    """Runs the trigger set against facts with injected thresholds."""

    def __init__(
        self,
        thresholds: Thresholds | None = None,
        triggers: Sequence[Trigger] = STAGE_ONE_TRIGGERS,
        gated_triggers: Sequence[GatedTrigger] = GATED_TRIGGERS,
    ):
        self.thresholds = thresholds or DEFAULT_THRESHOLDS
        self.triggers = tuple(triggers)
        self.gated_triggers = tuple(gated_triggers)

    def evaluate(self, facts: WorkflowFacts) -> list[ActionItem]:
        """
        Evaluate all triggers against one snapshot.

        Args:
            facts: Workflow facts for one asset

        Returns:
            Items in deterministic priority order (may be empty)
        """
        items: list[ActionItem] = []
        for trigger in self.triggers:
            item = trigger(facts, self.thresholds)
            if item is not None:
                items.append(item)

        fired = FiredSummary.from_items(items)
        logger.debug("Stage one fired: %s", sorted(fired.types))

        for gated in self.gated_triggers:
            item = gated(facts, self.thresholds, fired)
            if item is not None:
                items.append(item)
            elif fired.has_process_item:
                logger.debug("Gated trigger %s suppressed by process item", gated.__name__)

        ordered = sort_items(items)
        _validate_item_invariants(ordered, self.thresholds)
        return ordered


def evaluate(facts: WorkflowFacts, thresholds: Thresholds | None = None) -> list[ActionItem]:
    """Evaluate facts with the given (or default) thresholds."""
    return ActionLoopEngine(thresholds).evaluate(facts)


def _mentions(text: str, value: str) -> bool:
    """Whole-word occurrence of value in text."""
    if not value:
        return False
    return re.search(rf"(?<!\w){re.escape(value)}(?!\w)", text) is not None


def _validate_item_invariants(items: Sequence[ActionItem], thresholds: Thresholds) -> None:
    """
    Validate invariants over an ordered item list.

    Invariants enforced:
    1. Red items are never dismissible
    2. A thesis_stale item is non-dismissible iff age >= thesis_red_days
    3. Non-template descriptions never mention a portfolio named in a chip
    4. Ids are unique
    5. Adjacent items never compare equal under the sort key

    Logs warnings for violations rather than raising (production-safe).
    """
    violations: list[str] = []
    seen: set[str] = set()

    for item in items:
        if item.severity == "red" and item.dismissible:
            violations.append(f"{item.id}: severity=red but dismissible=True")
        if item.type == "thesis_stale":
            critical = item.age_days >= thresholds.thesis_red_days
            if item.dismissible == critical:
                violations.append(
                    f"{item.id}: thesis age_days={item.age_days} but dismissible={item.dismissible}"
                )
        template = DESCRIPTIONS.get(item.type) == item.description
        for chip in item.meta:
            if not template and chip.label in PROPER_NOUN_CHIPS and _mentions(item.description, chip.value):
                violations.append(f"{item.id}: description contains chip value '{chip.value}'")
        if item.id in seen:
            violations.append(f"duplicate id {item.id}")
        seen.add(item.id)

    for prev, curr in zip(items, items[1:]):
        if sort_key(prev) == sort_key(curr):
            violations.append(f"{prev.id} and {curr.id} compare equal")

    for v in violations:
        logger.warning(f"Action item invariant violation: {v}")
