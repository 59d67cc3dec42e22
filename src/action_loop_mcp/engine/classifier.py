"""Kind and band classification for cockpit stacks.

Kind resolution order:
1. The kind tag stamped on the item by the evaluator that built it
2. Structural id prefix (items from older producers carry no tag)
3. Item type
4. Item category
5. "other"

Band assignment is a fixed kind -> band table, except that deliverable and
project groups whose items are all high severity are promoted one band
toward DECIDE. Promotion is judged over the whole group.
"""

from collections.abc import Sequence

from action_loop_mcp.engine.models import HIGH_SEVERITY, STACK_KINDS, ActionItem

# Highest urgency first
BANDS = ("DECIDE", "ADVANCE", "AWARE", "INVESTIGATE")
TOP_BAND = BANDS[0]

# Longest prefixes first: "a1-proposal" must win over a bare "a1-"
ID_PREFIX_KINDS: tuple[tuple[str, str], ...] = (
    ("a1-proposal", "proposal"),
    ("a2-execution", "execution"),
    ("a3-unsimulated", "simulation"),
    ("a4-deliverable", "deliverable"),
    ("thesis-stale", "thesis"),
    ("i1-rating", "rating"),
    ("i3-ev", "signal"),
    ("a1-opportunity", "signal"),
    ("p1-", "proposal"),
    ("p2-", "simulation"),
    ("p3-", "execution"),
    ("r1-", "thesis"),
    ("r2-", "rating"),
)

TYPE_KINDS = {
    "proposal_stalled": "proposal",
    "execution_not_confirmed": "execution",
    "idea_not_simulated": "simulation",
    "thesis_stale": "thesis",
    "rating_no_followup": "rating",
    "opportunity_no_idea": "signal",
    "deliverable_overdue": "deliverable",
    "project_needs_attention": "project",
    "team_prompt": "prompt",
    "system_flag": "flag",
    "intel_signal": "signal",
}

CATEGORY_KINDS = {
    "alpha": "signal",
    "risk": "rating",
}

KIND_BANDS = {
    "proposal": "DECIDE",
    "execution": "DECIDE",
    "simulation": "ADVANCE",
    "thesis": "ADVANCE",
    "deliverable": "ADVANCE",
    "project": "ADVANCE",
    "rating": "AWARE",
    "signal": "AWARE",
    "other": "AWARE",
    "prompt": "INVESTIGATE",
    "flag": "INVESTIGATE",
}

PROMOTABLE_KINDS = frozenset({"deliverable", "project"})


def classify_kind(item: ActionItem) -> str:
    """Resolve the stack kind for one item."""
    if item.kind in STACK_KINDS:
        return item.kind

    for prefix, kind in ID_PREFIX_KINDS:
        if item.id.startswith(prefix):
            return kind

    if item.type in TYPE_KINDS:
        return TYPE_KINDS[item.type]

    return CATEGORY_KINDS.get(item.category, "other")


def promote(band: str) -> str:
    """One band toward DECIDE. DECIDE stays DECIDE."""
    index = BANDS.index(band)
    return BANDS[max(0, index - 1)]


def assign_band(kind: str, items: Sequence[ActionItem]) -> str:
    """Band for a whole group of same-kind items."""
    band = KIND_BANDS.get(kind, "AWARE")
    if kind in PROMOTABLE_KINDS and items and all(i.severity == HIGH_SEVERITY for i in items):
        return promote(band)
    return band
