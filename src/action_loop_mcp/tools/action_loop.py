"""Action loop evaluation tool."""

import logging
from time import perf_counter
from typing import Any

from action_loop_mcp.engine.config import Thresholds
from action_loop_mcp.engine.evaluator import ActionLoopEngine
from action_loop_mcp.engine.facts import WorkflowFacts
from action_loop_mcp.engine.summary import WorkflowCounts, compute_workflow_summary
from action_loop_mcp.engine.suppression import Suppression, filter_suppressed
from action_loop_mcp.utils.normalize import fingerprint
from action_loop_mcp.utils.provenance import build_error_response, build_meta, build_provenance
from action_loop_mcp.utils.validators import FactsValidationError

logger = logging.getLogger(__name__)

TOOL_NAME = "action_loop"


def action_loop(
    facts: dict[str, Any],
    suppressions: list[dict[str, Any]] | None = None,
    counts: dict[str, Any] | None = None,
    thresholds: Thresholds | None = None,
) -> dict[str, Any]:
    """
    Evaluate what needs attention for one asset.

    Args:
        facts: Workflow facts (see WorkflowFacts.from_dict)
        suppressions: Per-user dismissal records; requires facts.now
        counts: Optional aggregate counts for the five-stage workflow summary
        thresholds: Policy thresholds (default: from environment)

    Returns:
        Dict with ordered items, hidden item ids, fingerprint and optional summary
    """
    start_time = perf_counter()

    try:
        if thresholds is None:
            thresholds = Thresholds.from_env()
    except ValueError as e:
        logger.warning(f"Rejecting thresholds from environment: {e}")
        return build_error_response("invalid_configuration", str(e), tool=TOOL_NAME)

    try:
        parsed = WorkflowFacts.from_dict(facts)
        parsed_suppressions = [
            Suppression.from_dict(s, f"suppressions[{i}]") for i, s in enumerate(suppressions or [])
        ]
        if parsed_suppressions and parsed.now is None:
            raise FactsValidationError("now", "is required when suppressions are given")
        parsed_counts = WorkflowCounts.from_dict(counts) if counts is not None else None
    except FactsValidationError as e:
        logger.warning(f"Rejecting action loop input: {e}")
        return build_error_response("invalid_parameters", str(e), field=e.field, tool=TOOL_NAME)

    engine = ActionLoopEngine(thresholds)
    items = engine.evaluate(parsed)

    visible = items
    if parsed_suppressions:
        visible = filter_suppressed(items, parsed_suppressions, parsed.now)
    visible_ids = {i.id for i in visible}
    suppressed_ids = [i.id for i in items if i.id not in visible_ids]

    item_dicts = [i.to_dict() for i in visible]

    result: dict[str, Any] = {
        "data_provenance": {
            "facts": build_provenance("caller", as_of=parsed.now),
        },
        "asset": {"id": parsed.asset_id, "ticker": parsed.asset_ticker},
        "thresholds": thresholds.to_dict(),
        "items": item_dicts,
        "item_count": len(item_dicts),
        "red_count": sum(1 for i in visible if i.severity == "red"),
        "orange_count": sum(1 for i in visible if i.severity == "orange"),
        "suppressed_item_ids": suppressed_ids,
        "fingerprint": fingerprint(item_dicts),
    }

    if parsed_counts is not None:
        summary = compute_workflow_summary(parsed_counts, thresholds.thesis_orange_days)
        result["workflow_summary"] = summary.to_dict()

    duration_ms = (perf_counter() - start_time) * 1000
    result["meta"] = build_meta(TOOL_NAME, duration_ms)
    return result
