"""Decision cockpit tool: banded, scored stacks."""

import logging
from time import perf_counter
from typing import Any

from action_loop_mcp.engine.models import ActionItem
from action_loop_mcp.engine.stacks import build_stacks
from action_loop_mcp.utils.normalize import fingerprint
from action_loop_mcp.utils.provenance import build_error_response, build_meta
from action_loop_mcp.utils.validators import FactsValidationError

logger = logging.getLogger(__name__)


def cockpit_view(items: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Group already-filtered action items into the four cockpit bands.

    CTAs come back as descriptors only; over MCP there is no navigate
    callback, so the client dispatches on destination.type itself.

    Args:
        items: Action item dicts (evaluator output or attention-system items)

    Returns:
        Dict with bands, summary and fingerprint
    """
    start_time = perf_counter()

    if not isinstance(items, list):
        return build_error_response(
            "invalid_parameters", "items must be a list", field="items", tool="cockpit"
        )

    try:
        parsed = [ActionItem.from_dict(item, f"items[{i}]") for i, item in enumerate(items)]
    except FactsValidationError as e:
        logger.warning(f"Rejecting cockpit items: {e}")
        return build_error_response("invalid_parameters", str(e), field=e.field, tool="cockpit")

    view = build_stacks(parsed).to_dict()

    duration_ms = (perf_counter() - start_time) * 1000
    return {
        "meta": build_meta("cockpit", duration_ms),
        "item_count": len(parsed),
        "cockpit": view,
        "fingerprint": fingerprint(view),
    }
