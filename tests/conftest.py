"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest
import pytz

from action_loop_mcp.engine.facts import (
    RatingChange,
    StalledProposal,
    UnexecutedApproval,
    UnsimulatedIdea,
    WorkflowFacts,
)
from action_loop_mcp.engine.models import ActionItem, ItemAction, ItemContext


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time."""
    return datetime(2026, 2, 10, 12, 0, tzinfo=pytz.utc)


@pytest.fixture
def empty_facts() -> WorkflowFacts:
    """Facts where no trigger fires."""
    return WorkflowFacts()


@pytest.fixture
def proposal():
    """Factory for stalled proposal records."""

    def _make(id: str = "prop-1", days_pending: int | None = 5, portfolio: str = "Fund A"):
        return StalledProposal(id=id, action="buy", portfolio=portfolio, days_pending=days_pending)

    return _make


@pytest.fixture
def approval():
    """Factory for unexecuted approval records."""

    def _make(id: str = "app-1", portfolio: str = "Fund A", action: str = "buy"):
        return UnexecutedApproval(id=id, action=action, portfolio=portfolio)

    return _make


@pytest.fixture
def idea():
    """Factory for unsimulated idea records."""

    def _make(id: str = "idea-1"):
        return UnsimulatedIdea(id=id, action="buy", rationale="test")

    return _make


@pytest.fixture
def rating_change():
    """Factory for rating change records."""

    def _make(
        rating_id: str = "r-1",
        days_since: int | None = 3,
        old_value: str = "SELL",
        new_value: str = "HOLD",
    ):
        return RatingChange(
            rating_id=rating_id,
            old_value=old_value,
            new_value=new_value,
            days_since=days_since,
            changed_by="user-1",
        )

    return _make


@pytest.fixture
def make_item():
    """Factory for cockpit action items."""

    def _make(
        id: str = "p1-proposal-test",
        type: str = "proposal_stalled",
        severity: str = "red",
        category: str = "process",
        age_days: int = 5,
        kind: str | None = None,
        portfolio: tuple[str, str] | None = ("port-1", "Growth"),
        ticker: str | None = "AAPL",
        action: ItemAction | None = None,
    ) -> ActionItem:
        return ActionItem(
            id=id,
            type=type,
            severity=severity,
            category=category,
            title="Review proposal",
            description="Proposal pending longer than expected.",
            primary_action=action or ItemAction("Review", "OPEN_PROPOSAL_REVIEW"),
            dismissible=severity != "red",
            age_days=age_days,
            kind=kind,
            context=ItemContext(
                asset_ticker=ticker,
                portfolio_id=portfolio[0] if portfolio else None,
                portfolio_name=portfolio[1] if portfolio else None,
            ),
        )

    return _make
