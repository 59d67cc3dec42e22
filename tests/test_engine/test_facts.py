"""Tests for parsing workflow facts at the boundary."""

import pytest

from action_loop_mcp.engine.facts import StalledProposal, WorkflowFacts
from action_loop_mcp.utils.validators import FactsValidationError


class TestWorkflowFactsFromDict:
    """Tests for WorkflowFacts.from_dict."""

    def test_empty(self) -> None:
        """Empty input is valid and fires nothing."""
        facts = WorkflowFacts.from_dict({})
        assert facts.expected_return is None
        assert facts.has_ev_data is False
        assert facts.active_idea_count == 0
        assert facts.stalled_proposals == ()
        assert facts.thesis_days_stale is None

    def test_full_record(self) -> None:
        """All record lists are parsed."""
        facts = WorkflowFacts.from_dict(
            {
                "expected_return": 0.2,
                "has_ev_data": True,
                "active_idea_count": 1,
                "unsimulated_ideas": [{"id": "i-1", "action": "buy", "rationale": "cheap"}],
                "stalled_proposals": [{"id": "p-1", "action": "sell", "portfolio": "Core", "days_pending": 4}],
                "unexecuted_approvals": [{"id": "a-1", "action": "buy", "portfolio": "Core", "portfolio_id": "c"}],
                "thesis_days_stale": 100,
                "rating_changes": [{"rating_id": "r-1", "old_value": "BUY", "new_value": "HOLD", "days_since": 2}],
                "asset_id": "asset-1",
                "asset_ticker": "NVDA",
            }
        )
        assert facts.unsimulated_ideas[0].rationale == "cheap"
        assert facts.stalled_proposals[0].days_pending == 4
        assert facts.unexecuted_approvals[0].portfolio_id == "c"
        assert facts.rating_changes[0].days_since == 2
        assert facts.asset_ticker == "NVDA"

    def test_ages_from_timestamps(self) -> None:
        """Ages are floored whole days against now."""
        facts = WorkflowFacts.from_dict(
            {
                "now": "2026-02-10T12:00:00Z",
                "thesis_updated_at": "2025-11-01T00:00:00Z",
                "stalled_proposals": [{"id": "p-1", "submitted_at": "2026-02-06T13:00:00Z"}],
                "rating_changes": [{"rating_id": "r-1", "changed_at": "2026-02-10T11:00:00Z"}],
            }
        )
        assert facts.thesis_days_stale == 101
        assert facts.stalled_proposals[0].days_pending == 3
        assert facts.rating_changes[0].days_since == 0

    def test_timestamps_without_now(self) -> None:
        """Without now, timestamp-only ages are unknown."""
        facts = WorkflowFacts.from_dict({"thesis_updated_at": "2025-11-01T00:00:00Z"})
        assert facts.thesis_days_stale is None

    def test_explicit_days_win(self) -> None:
        """An explicit day count beats the timestamp."""
        facts = WorkflowFacts.from_dict(
            {"now": "2026-02-10T12:00:00Z", "thesis_days_stale": 5, "thesis_updated_at": "2020-01-01T00:00:00Z"}
        )
        assert facts.thesis_days_stale == 5

    def test_negative_ages_are_unknown(self) -> None:
        """Negative ages become None."""
        facts = WorkflowFacts.from_dict(
            {"thesis_days_stale": -3, "stalled_proposals": [{"id": "p-1", "days_pending": -1}]}
        )
        assert facts.thesis_days_stale is None
        assert facts.stalled_proposals[0].days_pending is None

    def test_nan_expected_return_is_unknown(self) -> None:
        """Non-finite expected returns are treated as missing."""
        assert WorkflowFacts.from_dict({"expected_return": float("nan")}).expected_return is None

    @pytest.mark.parametrize(
        "data,field",
        [
            ([], "facts"),
            ({"has_ev_data": "yes"}, "has_ev_data"),
            ({"active_idea_count": 1.5}, "active_idea_count"),
            ({"stalled_proposals": "p-1"}, "stalled_proposals"),
            ({"stalled_proposals": [{"days_pending": 4}]}, "stalled_proposals[0].id"),
            ({"rating_changes": [{"rating_id": "r", "days_since": True}]}, "rating_changes[0].days_since"),
            ({"now": "yesterday"}, "now"),
            ({"ev_threshold": -0.1}, "ev_threshold"),
        ],
    )
    def test_invalid_input(self, data, field) -> None:
        """Structural problems fail fast and name the field."""
        with pytest.raises(FactsValidationError) as exc_info:
            WorkflowFacts.from_dict(data)
        assert exc_info.value.field == field


class TestWorkflowFactsConstruction:
    """Direct construction."""

    def test_lists_become_tuples(self, idea) -> None:
        facts = WorkflowFacts(unsimulated_ideas=[idea()])
        assert isinstance(facts.unsimulated_ideas, tuple)

    def test_bool_idea_count_rejected(self) -> None:
        with pytest.raises(FactsValidationError, match="active_idea_count"):
            WorkflowFacts(active_idea_count=True)

    @pytest.mark.parametrize(
        "kwargs,field",
        [
            ({"expected_return": "0.3", "has_ev_data": True}, "expected_return"),
            ({"thesis_days_stale": "200"}, "thesis_days_stale"),
            ({"thesis_days_stale": 12.5}, "thesis_days_stale"),
            ({"active_idea_count": "0"}, "active_idea_count"),
            ({"active_idea_count": -1}, "active_idea_count"),
            ({"active_idea_count": None}, "active_idea_count"),
            ({"has_ev_data": "yes"}, "has_ev_data"),
            ({"ev_threshold": "0.1"}, "ev_threshold"),
            ({"ev_threshold": -0.1}, "ev_threshold"),
            ({"asset_ticker": 7}, "asset_ticker"),
            ({"stalled_proposals": [{"id": "p-1", "days_pending": 9}]}, "stalled_proposals[0]"),
            ({"rating_changes": "r-1"}, "rating_changes"),
            ({"now": 1707566400}, "now"),
        ],
    )
    def test_wrong_types_rejected(self, kwargs, field) -> None:
        """Constructor arguments are checked the same way dict input is."""
        with pytest.raises(FactsValidationError) as exc_info:
            WorkflowFacts(**kwargs)
        assert exc_info.value.field == field

    def test_non_finite_numbers_are_unknown(self) -> None:
        facts = WorkflowFacts(expected_return=float("inf"), ev_threshold=float("nan"), has_ev_data=True)
        assert facts.expected_return is None
        assert facts.ev_threshold is None

    def test_integral_float_age_accepted(self) -> None:
        assert WorkflowFacts(thesis_days_stale=120.0).thesis_days_stale == 120

    def test_now_string_parsed(self, now) -> None:
        assert WorkflowFacts(now="2026-02-10T12:00:00Z").now == now

    def test_record_days_checked(self) -> None:
        with pytest.raises(FactsValidationError) as exc_info:
            StalledProposal(id="p-1", action="buy", portfolio="Fund A", days_pending="5")
        assert exc_info.value.field == "days_pending"

    def test_record_id_required(self) -> None:
        with pytest.raises(FactsValidationError, match="non-empty"):
            StalledProposal(id="", action="buy", portfolio="Fund A", days_pending=5)
