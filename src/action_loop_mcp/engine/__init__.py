"""Attention prioritization engine. Pure functions, no I/O."""

from action_loop_mcp.engine.classifier import BANDS, assign_band, classify_kind
from action_loop_mcp.engine.config import (
    DEFAULT_THRESHOLDS,
    STALLED_DAYS_THRESHOLD,
    Thresholds,
)
from action_loop_mcp.engine.evaluator import ActionLoopEngine, evaluate, sort_items
from action_loop_mcp.engine.facts import (
    RatingChange,
    StalledProposal,
    UnexecutedApproval,
    UnsimulatedIdea,
    WorkflowFacts,
)
from action_loop_mcp.engine.models import ActionItem, ItemAction, ItemContext, MetaChip
from action_loop_mcp.engine.stacks import BandedView, Stack, StackCTA, build_stacks
from action_loop_mcp.engine.summary import (
    WorkflowCounts,
    WorkflowSummary,
    compute_workflow_summary,
)
from action_loop_mcp.engine.suppression import (
    Suppression,
    filter_suppressed,
    is_suppressed,
    suppression_expiry,
)

__all__ = [
    # Classification
    "BANDS",
    "assign_band",
    "classify_kind",
    # Config
    "DEFAULT_THRESHOLDS",
    "STALLED_DAYS_THRESHOLD",
    "Thresholds",
    # Evaluation
    "ActionLoopEngine",
    "evaluate",
    "sort_items",
    # Facts
    "RatingChange",
    "StalledProposal",
    "UnexecutedApproval",
    "UnsimulatedIdea",
    "WorkflowFacts",
    # Items
    "ActionItem",
    "ItemAction",
    "ItemContext",
    "MetaChip",
    # Stacks
    "BandedView",
    "Stack",
    "StackCTA",
    "build_stacks",
    # Summary
    "WorkflowCounts",
    "WorkflowSummary",
    "compute_workflow_summary",
    # Suppression
    "Suppression",
    "filter_suppressed",
    "is_suppressed",
    "suppression_expiry",
]
