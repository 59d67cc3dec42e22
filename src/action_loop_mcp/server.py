"""Action Loop MCP Server using FastMCP."""

import json
import logging
import os
from typing import Any

from fastmcp import FastMCP

from action_loop_mcp import SCHEMA_VERSION, SERVER_VERSION
from action_loop_mcp.prompts.templates import get_prompt
from action_loop_mcp.tools import action_loop, cockpit_view, workflow_summary

# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(
    name="action-loop",
)


# ============================================================================
# TOOLS
# ============================================================================


@mcp.tool
async def evaluate_action_loop(
    facts: dict[str, Any],
    suppressions: list[dict[str, Any]] | None = None,
    counts: dict[str, Any] | None = None,
) -> str:
    """
    Evaluate what needs attention on one asset right now.

    Runs every trigger (stalled proposal, unconfirmed execution, unsimulated
    idea, stale thesis, rating change without follow-up, opportunity without
    idea), applies conflict prevention, and returns items in a deterministic
    priority order.

    Args:
        facts: Workflow facts - expected_return, has_ev_data, active_idea_count,
            unsimulated_ideas, stalled_proposals, unexecuted_approvals,
            thesis_days_stale (or thesis_updated_at), rating_changes,
            asset_id, asset_ticker, now (ISO timestamp)
        suppressions: Dismissal records {item_type, suppressed_until, asset_id}
        counts: Optional counts for the five-stage workflow summary

    Returns:
        JSON with ordered items, suppressed item ids and a fingerprint
    """
    result = action_loop(facts=facts, suppressions=suppressions, counts=counts)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
async def get_workflow_summary(counts: dict[str, Any]) -> str:
    """
    Get the research/idea/proposal/decision/execution status strip.

    Args:
        counts: thesis_days_stale, active_idea_count, simulated_idea_count,
            stalled_proposal_count, unexecuted_approval_count,
            completed_execution_count

    Returns:
        JSON with one status (done, pending, blocked, none) per stage
    """
    result = workflow_summary(counts=counts)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
async def build_cockpit(items: list[dict[str, Any]]) -> str:
    """
    Group action items into scored stacks across four urgency bands.

    Bands: DECIDE, ADVANCE, AWARE, INVESTIGATE. Stacks within a band are
    ordered by attention score.

    Args:
        items: Action items, e.g. the items from evaluate_action_loop across assets

    Returns:
        JSON with bands, stacks, CTA descriptors and summary counts
    """
    result = cockpit_view(items=items)
    return json.dumps(result, indent=2, default=str)


# ============================================================================
# PROMPTS
# ============================================================================


@mcp.prompt
def attention_triage(asset: str) -> str:
    """Walk through what needs attention on one asset."""
    result = get_prompt("attention_triage", {"asset": asset})
    if result:
        return result["messages"][0]["content"]
    return f"Triage {asset} using the evaluate_action_loop tool."


@mcp.prompt
def cockpit_review() -> str:
    """Review the decision cockpit band by band."""
    result = get_prompt("cockpit_review", {})
    if result:
        return result["messages"][0]["content"]
    return "Review my cockpit using the build_cockpit tool."


# ============================================================================
# ENTRY POINT
# ============================================================================


def main() -> None:
    """Run the MCP server."""
    logger.info(f"Starting Action Loop MCP Server v{SERVER_VERSION} (schema v{SCHEMA_VERSION})")
    mcp.run()


if __name__ == "__main__":
    main()
