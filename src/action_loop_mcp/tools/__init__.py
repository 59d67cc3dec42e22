"""Action loop tools."""

from action_loop_mcp.tools.action_loop import action_loop
from action_loop_mcp.tools.cockpit import cockpit_view
from action_loop_mcp.tools.workflow_summary import workflow_summary

__all__ = [
    "action_loop",
    "cockpit_view",
    "workflow_summary",
]
