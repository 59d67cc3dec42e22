"""Prompt templates for attention triage."""

from typing import Any

# Prompt definitions
PROMPTS = {
    "attention_triage": {
        "description": "Walk through what needs attention on one asset, in engine order",
        "arguments": [{"name": "asset", "required": True}],
    },
    "cockpit_review": {
        "description": "Review the decision cockpit band by band",
        "arguments": [],
    },
}


def list_prompts() -> list[dict[str, Any]]:
    """List available prompts."""
    return [
        {
            "name": name,
            "description": info["description"],
            "arguments": info["arguments"],
        }
        for name, info in PROMPTS.items()
    ]


def get_prompt(name: str, arguments: dict[str, str]) -> dict[str, Any] | None:
    """
    Get a prompt by name with arguments filled in.

    Returns dict with 'messages' key for MCP GetPromptResult.
    """
    if name not in PROMPTS:
        return None

    if name == "attention_triage":
        asset = arguments.get("asset", "")
        return {
            "messages": [
                {
                    "role": "user",
                    "content": f"""Triage {asset}.

1. Gather the workflow facts for {asset}: expected return and whether EV data exists,
   active idea count, unsimulated ideas, stalled proposals (with days pending),
   unexecuted approvals, thesis age in days, and recent rating changes.
2. Call evaluate_action_loop with those facts, the current time as "now",
   and my dismissal records as suppressions.
3. Present the returned items in the order given. Do not re-rank them.
   For each item show the title, the chips, and the single primary action.
4. Point out items marked dismissible=false; they cannot be snoozed.
5. If workflow_summary is present, show it as a one-line strip:
   research / idea / proposal / decision / execution.""",
                }
            ]
        }

    if name == "cockpit_review":
        return {
            "messages": [
                {
                    "role": "user",
                    "content": """Review my decision cockpit.

1. Call evaluate_action_loop for each asset I cover and collect the items.
2. Call build_cockpit with all collected items.
3. Go through the bands in order: DECIDE, ADVANCE, AWARE, INVESTIGATE.
   Within each band keep the stack order (highest attention_score first).
4. For each stack give the title, subtitle, count and the primary CTA label.
5. End with the summary counts and the oldest item age.""",
                }
            ]
        }

    return None
