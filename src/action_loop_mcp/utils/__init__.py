"""Utility modules."""

from action_loop_mcp.utils.dates import days_between, parse_timestamp
from action_loop_mcp.utils.normalize import canonical_dumps, fingerprint
from action_loop_mcp.utils.provenance import (
    build_error_response,
    build_meta,
    build_provenance,
)
from action_loop_mcp.utils.sanitize import capitalize_first, clean_label
from action_loop_mcp.utils.validators import (
    FactsValidationError,
    check_rule,
    check_rule_expr,
    known_days,
)

__all__ = [
    "days_between",
    "parse_timestamp",
    "canonical_dumps",
    "fingerprint",
    "build_error_response",
    "build_meta",
    "build_provenance",
    "capitalize_first",
    "clean_label",
    "FactsValidationError",
    "check_rule",
    "check_rule_expr",
    "known_days",
]
