"""Workflow summary tool."""

import logging
from time import perf_counter
from typing import Any

from action_loop_mcp.engine.config import Thresholds
from action_loop_mcp.engine.summary import WorkflowCounts, compute_workflow_summary
from action_loop_mcp.utils.provenance import build_error_response, build_meta
from action_loop_mcp.utils.validators import FactsValidationError

logger = logging.getLogger(__name__)


def workflow_summary(
    counts: dict[str, Any],
    thresholds: Thresholds | None = None,
) -> dict[str, Any]:
    """
    Compute the research/idea/proposal/decision/execution strip.

    Args:
        counts: Aggregate counts (see WorkflowCounts.from_dict)
        thresholds: Policy thresholds; thesis_orange_days marks research pending

    Returns:
        Dict with one status per stage
    """
    start_time = perf_counter()

    try:
        if thresholds is None:
            thresholds = Thresholds.from_env()
        parsed = WorkflowCounts.from_dict(counts)
    except FactsValidationError as e:
        logger.warning(f"Rejecting workflow counts: {e}")
        return build_error_response(
            "invalid_parameters", str(e), field=e.field, tool="workflow_summary"
        )
    except ValueError as e:
        return build_error_response("invalid_configuration", str(e), tool="workflow_summary")

    summary = compute_workflow_summary(parsed, thresholds.thesis_orange_days)

    duration_ms = (perf_counter() - start_time) * 1000
    return {
        "meta": build_meta("workflow_summary", duration_ms),
        "workflow_summary": summary.to_dict(),
    }
