"""Tests for action item invariant validation."""

import logging

from action_loop_mcp.engine.config import DEFAULT_THRESHOLDS
from action_loop_mcp.engine.evaluator import _validate_item_invariants, evaluate
from action_loop_mcp.engine.facts import WorkflowFacts
from action_loop_mcp.engine.models import ActionItem, ItemAction, MetaChip


def _item(**overrides) -> ActionItem:
    fields = {
        "id": "r1-thesis-stale",
        "type": "thesis_stale",
        "severity": "orange",
        "category": "risk",
        "title": "Thesis May Be Stale",
        "description": "Research thesis has not been updated recently.",
        "primary_action": ItemAction("Update Thesis", "OPEN_UPDATE_THESIS"),
        "dismissible": True,
        "meta": (MetaChip("Age", "120d", "warning"),),
        "age_days": 120,
    }
    fields.update(overrides)
    return ActionItem(**fields)


class TestItemInvariants:
    """Tests for _validate_item_invariants function."""

    def test_engine_output_has_no_warnings(self, caplog, proposal, approval, rating_change) -> None:
        """Items built by the engine satisfy every invariant."""
        facts = WorkflowFacts(
            stalled_proposals=[proposal()],
            unexecuted_approvals=[approval()],
            thesis_days_stale=200,
            rating_changes=[rating_change()],
        )
        with caplog.at_level(logging.WARNING):
            evaluate(facts)

        assert "invariant violation" not in caplog.text.lower()

    def test_red_dismissible(self, caplog) -> None:
        """Should warn if a red item is dismissible."""
        item = _item(id="p3-x", type="execution_not_confirmed", severity="red", category="process", age_days=0)

        with caplog.at_level(logging.WARNING):
            _validate_item_invariants([item], DEFAULT_THRESHOLDS)

        assert "p3-x: severity=red but dismissible=True" in caplog.text

    def test_critical_thesis_dismissible(self, caplog) -> None:
        """Should warn if a thesis past the red threshold is dismissible."""
        item = _item(age_days=200)

        with caplog.at_level(logging.WARNING):
            _validate_item_invariants([item], DEFAULT_THRESHOLDS)

        assert "thesis age_days=200 but dismissible=True" in caplog.text

    def test_chip_value_in_description(self, caplog) -> None:
        """Should warn if a chip value leaks into the description."""
        item = _item(
            meta=(MetaChip("Portfolio", "Growth Fund"),),
            description="Thesis for Growth Fund has not been updated.",
        )

        with caplog.at_level(logging.WARNING):
            _validate_item_invariants([item], DEFAULT_THRESHOLDS)

        assert "description contains chip value 'Growth Fund'" in caplog.text

    def test_short_chip_value_ignored(self, caplog) -> None:
        """Non-portfolio chips like a one-letter rating never count as leaks."""
        item = _item(
            id="a1-rating-r",
            type="rating_no_followup",
            severity="gray",
            category="alpha",
            description="Rating changed without a corresponding trade idea.",
            meta=(MetaChip("From", "R"), MetaChip("To", "HOLD")),
            age_days=1,
        )

        with caplog.at_level(logging.WARNING):
            _validate_item_invariants([item], DEFAULT_THRESHOLDS)

        assert "description contains chip value" not in caplog.text

    def test_portfolio_name_inside_word(self, caplog) -> None:
        """A portfolio name embedded in a longer word is not a mention."""
        item = _item(
            meta=(MetaChip("Portfolio", "Core"),),
            description="Thesis score has not been updated.",
        )
        item_upper = _item(
            id="r1-thesis-stale-2",
            meta=(MetaChip("Portfolio", "Core"),),
            description="Thesis Scores need Corey's review.",
        )

        with caplog.at_level(logging.WARNING):
            _validate_item_invariants([item, item_upper], DEFAULT_THRESHOLDS)

        assert "description contains chip value" not in caplog.text

    def test_portfolio_named_like_template_word(self, caplog, approval) -> None:
        """A portfolio called 'trade' does not flag the fixed approval text."""
        facts = WorkflowFacts(unexecuted_approvals=[approval(portfolio="trade")])

        with caplog.at_level(logging.WARNING):
            items = evaluate(facts)

        assert items[0].description == "Approved trade has not been logged as executed."
        assert "invariant violation" not in caplog.text.lower()

    def test_duplicate_ids(self, caplog) -> None:
        """Should warn on duplicate ids (and on the resulting tie)."""
        item = _item()

        with caplog.at_level(logging.WARNING):
            _validate_item_invariants([item, item], DEFAULT_THRESHOLDS)

        assert "duplicate id r1-thesis-stale" in caplog.text
        assert "compare equal" in caplog.text

    def test_does_not_raise(self) -> None:
        """Violations are logged, never raised."""
        bad = _item(id="p3-x", type="execution_not_confirmed", severity="red", category="process")
        _validate_item_invariants([bad, bad], DEFAULT_THRESHOLDS)
