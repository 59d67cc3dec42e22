"""Tests for the cockpit tool."""

from action_loop_mcp.tools.action_loop import action_loop
from action_loop_mcp.tools.cockpit import cockpit_view


def _deliverable(id: str, severity: str) -> dict:
    return {
        "id": id,
        "type": "deliverable_overdue",
        "severity": severity,
        "category": "process",
        "title": "Deliverable overdue",
        "description": "A project deliverable is past due.",
        "primary_action": {"label": "Open", "action_key": "OPEN_DELIVERABLE"},
        "dismissible": severity != "red",
        "age_days": 3,
    }


class TestCockpitView:
    """Tests for cockpit_view."""

    def test_engine_items_round_into_bands(self) -> None:
        """Items from evaluate feed straight into the cockpit."""
        facts = {
            "asset_ticker": "AAPL",
            "stalled_proposals": [{"id": "p-1", "portfolio": "Core", "portfolio_id": "core", "days_pending": 9}],
            "thesis_days_stale": 120,
        }
        items = action_loop(facts)["items"]
        result = cockpit_view(items)

        assert result["item_count"] == 2
        bands = {b["band"]: b for b in result["cockpit"]["bands"]}
        (proposals,) = bands["DECIDE"]["stacks"]
        assert proposals["kind"] == "proposal"
        assert proposals["attention_score"] == 50 + 18 + 10 + 3 + 20
        assert proposals["ticker_breakdown"] == [{"ticker": "AAPL", "count": 1}]
        assert [s["kind"] for s in bands["ADVANCE"]["stacks"]] == ["thesis"]
        assert result["cockpit"]["summary"]["oldest_days"] == 120
        assert result["meta"]["tool"] == "cockpit"
        assert result["fingerprint"].startswith("v1:")

    def test_red_deliverables_promoted(self) -> None:
        result = cockpit_view([_deliverable("d-1", "red"), _deliverable("d-2", "red")])
        decide = result["cockpit"]["bands"][0]
        assert decide["band"] == "DECIDE"
        assert decide["stacks"][0]["kind"] == "deliverable"
        assert decide["stacks"][0]["primary_cta"]["destination"]["type"] == "projects-list"

    def test_mixed_deliverables_not_promoted(self) -> None:
        result = cockpit_view([_deliverable("d-1", "red"), _deliverable("d-2", "orange")])
        advance = result["cockpit"]["bands"][1]
        assert advance["band"] == "ADVANCE"
        assert advance["total_items"] == 2

    def test_negative_age_treated_as_zero(self) -> None:
        item = _deliverable("d-1", "orange")
        item["age_days"] = -4
        result = cockpit_view([item])
        assert result["cockpit"]["summary"]["oldest_days"] == 0

    def test_empty(self) -> None:
        result = cockpit_view([])
        assert result["item_count"] == 0
        assert all(b["stacks"] == [] for b in result["cockpit"]["bands"])

    def test_not_a_list(self) -> None:
        result = cockpit_view({"id": "x"})
        assert result["error"] is True
        assert result["field"] == "items"

    def test_invalid_item(self) -> None:
        item = _deliverable("d-1", "purple")
        result = cockpit_view([item])
        assert result["error_type"] == "invalid_parameters"
        assert result["field"] == "items[0].severity"
