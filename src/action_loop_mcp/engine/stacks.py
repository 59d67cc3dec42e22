"""Stack aggregator: groups action items into scored stacks within urgency bands.

Pure: takes a flat item list (already filtered by the caller's suppression
state) and returns a BandedView. Navigation is never performed here; each
stack carries a CTA descriptor whose select() calls the caller's navigate
callback.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from action_loop_mcp.engine.classifier import BANDS, TOP_BAND, assign_band, classify_kind
from action_loop_mcp.engine.models import HIGH_SEVERITY, MEDIUM_SEVERITY, ActionItem

NavigateFn = Callable[[dict[str, Any]], None]

# Attention score weights. The score is a plain sum of these contributions.
TOP_BAND_BONUS = 50
POINTS_PER_OLDEST_DAY = 2
POINTS_PER_PORTFOLIO = 10
POINTS_PER_ITEM = 3
POINTS_PER_HIGH_ITEM = 20
POINTS_PER_MEDIUM_ITEM = 5

PREVIEW_SIZE = 3


@dataclass(frozen=True)
class StackConfig:
    title: str
    accent_color: str
    cta_label: str


STACK_CONFIG = {
    "proposal": StackConfig("Proposals Awaiting Decision", "red", "Review All"),
    "execution": StackConfig("Execution Confirmations", "red", "Confirm"),
    "simulation": StackConfig("Ideas Being Worked On", "amber", "Open Trade Lab"),
    "thesis": StackConfig("Stale Thesis", "amber", "Review Assets"),
    "deliverable": StackConfig("Overdue Deliverables", "amber", "Open Projects"),
    "rating": StackConfig("Rating Changes", "blue", "Create Ideas"),
    "signal": StackConfig("Intelligence Signals", "blue", "View"),
    "project": StackConfig("Projects Needing Attention", "amber", "Open Projects"),
    "prompt": StackConfig("Team Prompts", "violet", "Respond"),
    "flag": StackConfig("System Flags", "cyan", "Review"),
    "other": StackConfig("Other Items", "gray", "Open"),
}

BAND_CONFIG = {
    "DECIDE": ("Requires Decision", "Capital allocation and execution decisions"),
    "ADVANCE": ("Needs Progress", "Research, modeling, and follow-up work"),
    "AWARE": ("Monitoring", "Intelligence and coverage signals"),
    "INVESTIGATE": ("Worth Looking Into", "System flags and team prompts to address"),
}

_TRADE_QUEUE = {"type": "trade-queue", "id": "trade-queue", "title": "Trade Queue"}
_TRADE_LAB = {"type": "trade-lab", "id": "trade-lab", "title": "Trade Lab"}
_PROJECTS = {"type": "projects-list", "id": "projects-list", "title": "Projects"}
_LISTS = {"type": "lists", "id": "lists", "title": "Lists"}

# Multi-item stacks navigate here; kinds not listed delegate to their first item
KIND_DESTINATIONS = {
    "proposal": _TRADE_QUEUE,
    "execution": _TRADE_QUEUE,
    "simulation": _TRADE_LAB,
    "deliverable": _PROJECTS,
    "project": _PROJECTS,
    "thesis": _LISTS,
}


@dataclass(frozen=True)
class StackCTA:
    """Descriptor of a stack's primary action: a label and where it leads."""

    label: str
    destination: dict[str, Any]
    navigate: NavigateFn | None = field(default=None, repr=False, compare=False)

    def select(self) -> None:
        """Invoke the caller-supplied navigate callback, if any."""
        if self.navigate is not None:
            self.navigate(dict(self.destination))

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "destination": dict(self.destination)}


@dataclass(frozen=True)
class PortfolioCount:
    id: str
    name: str
    count: int


@dataclass(frozen=True)
class TickerCount:
    ticker: str
    count: int


@dataclass(frozen=True)
class Stack:
    """Same-kind items plus derived aggregates. Rebuilt on every call."""

    kind: str
    band: str
    title: str
    subtitle: str
    accent_color: str
    attention_score: int
    items: tuple[ActionItem, ...]
    portfolio_breakdown: tuple[PortfolioCount, ...]
    ticker_breakdown: tuple[TickerCount, ...]
    oldest_age_days: int
    median_age_days: int
    primary_cta: StackCTA

    @property
    def stack_key(self) -> str:
        return self.kind

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def items_preview(self) -> tuple[ActionItem, ...]:
        return self.items[:PREVIEW_SIZE]

    def to_dict(self) -> dict[str, Any]:
        return {
            "stack_key": self.stack_key,
            "kind": self.kind,
            "band": self.band,
            "title": self.title,
            "subtitle": self.subtitle,
            "accent_color": self.accent_color,
            "attention_score": self.attention_score,
            "count": self.count,
            "items_preview": [i.to_dict() for i in self.items_preview],
            "items_all": [i.to_dict() for i in self.items],
            "portfolio_breakdown": [
                {"id": p.id, "name": p.name, "count": p.count} for p in self.portfolio_breakdown
            ],
            "ticker_breakdown": [
                {"ticker": t.ticker, "count": t.count} for t in self.ticker_breakdown
            ],
            "oldest_age_days": self.oldest_age_days,
            "median_age_days": self.median_age_days,
            "primary_cta": self.primary_cta.to_dict(),
        }


@dataclass(frozen=True)
class BandData:
    band: str
    title: str
    subtitle: str
    stacks: tuple[Stack, ...]

    @property
    def total_items(self) -> int:
        return sum(s.count for s in self.stacks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "band": self.band,
            "title": self.title,
            "subtitle": self.subtitle,
            "total_items": self.total_items,
            "stacks": [s.to_dict() for s in self.stacks],
        }


@dataclass(frozen=True)
class CockpitSummary:
    decisions: int
    work: int
    signals: int
    investigate: int
    oldest_days: int

    def to_dict(self) -> dict[str, int]:
        return {
            "decisions": self.decisions,
            "work": self.work,
            "signals": self.signals,
            "investigate": self.investigate,
            "oldest_days": self.oldest_days,
        }


@dataclass(frozen=True)
class BandedView:
    """All four bands in urgency order, plus a headline summary."""

    bands: tuple[BandData, ...]
    summary: CockpitSummary

    def band(self, name: str) -> BandData:
        for band in self.bands:
            if band.band == name:
                return band
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bands": [b.to_dict() for b in self.bands],
            "summary": self.summary.to_dict(),
        }


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def median_age(ages: Sequence[int]) -> int:
    """Median of ages; even-length lists average the middle pair, rounded down."""
    if not ages:
        return 0
    ordered = sorted(ages)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) // 2


def compute_attention_score(items: Sequence[ActionItem], band: str) -> int:
    """
    Additive urgency heuristic for ranking stacks within a band.

    +50 if the band is DECIDE, +2 per day of the oldest item, +10 per
    distinct portfolio, +3 per item, +20 per red item, +5 per orange item.
    """
    score = 0

    if band == TOP_BAND:
        score += TOP_BAND_BONUS

    score += max((i.age_days for i in items), default=0) * POINTS_PER_OLDEST_DAY

    portfolios = {i.context.portfolio_key for i in items if i.context.portfolio_key}
    score += len(portfolios) * POINTS_PER_PORTFOLIO

    score += len(items) * POINTS_PER_ITEM

    for item in items:
        if item.severity == HIGH_SEVERITY:
            score += POINTS_PER_HIGH_ITEM
        elif item.severity == MEDIUM_SEVERITY:
            score += POINTS_PER_MEDIUM_ITEM

    return score


def build_portfolio_breakdown(items: Sequence[ActionItem]) -> tuple[PortfolioCount, ...]:
    """Count per portfolio, descending; ties keep first-seen order."""
    counts: dict[str, list[Any]] = {}
    for item in items:
        key = item.context.portfolio_key
        if not key:
            continue
        if key in counts:
            counts[key][1] += 1
        else:
            counts[key] = [item.context.portfolio_name or key, 1]
    ordered = sorted(counts.items(), key=lambda kv: -kv[1][1])
    return tuple(PortfolioCount(id=key, name=name, count=n) for key, (name, n) in ordered)


def build_ticker_breakdown(items: Sequence[ActionItem]) -> tuple[TickerCount, ...]:
    """Count per ticker, descending; ties keep first-seen order."""
    counts: dict[str, int] = {}
    for item in items:
        ticker = item.context.asset_ticker
        if ticker:
            counts[ticker] = counts.get(ticker, 0) + 1
    ordered = sorted(counts.items(), key=lambda kv: -kv[1])
    return tuple(TickerCount(ticker=t, count=n) for t, n in ordered)


def format_stack_subtitle(oldest_days: int, portfolio_count: int, band: str, count: int) -> str:
    parts: list[str] = []

    if band == "DECIDE" and oldest_days >= 7:
        parts.append(f"{oldest_days}d stalling")
    elif band == "ADVANCE" and oldest_days >= 14:
        parts.append(f"{oldest_days}d since last review")

    if portfolio_count > 0:
        parts.append(f"{portfolio_count} portfolio{'s' if portfolio_count != 1 else ''}")

    if band == "ADVANCE":
        parts.append(f"{count} item{'s' if count != 1 else ''} pending")
    elif band == "INVESTIGATE":
        parts.append(f"{count} to review")
    else:
        parts.append(f"{count} signal{'s' if count != 1 else ''}")

    return " · ".join(parts)


def item_destination(item: ActionItem) -> dict[str, Any]:
    """Destination that runs an item's own primary action."""
    destination: dict[str, Any] = {
        "type": "item-action",
        "item_id": item.id,
        "action_key": item.primary_action.action_key,
    }
    if item.primary_action.payload:
        destination["payload"] = dict(item.primary_action.payload)
    return destination


def get_stack_cta(
    kind: str,
    items: Sequence[ActionItem],
    navigate: NavigateFn | None = None,
) -> StackCTA:
    """Single item: the item's own action. Several: a kind-specific destination."""
    if len(items) == 1:
        item = items[0]
        return StackCTA(item.primary_action.label, item_destination(item), navigate)

    label = STACK_CONFIG[kind].cta_label
    destination = KIND_DESTINATIONS.get(kind)
    if destination is None:
        destination = item_destination(items[0])
    return StackCTA(label, dict(destination), navigate)


def sort_stack_items(items: Sequence[ActionItem]) -> tuple[ActionItem, ...]:
    """Severity ordinal descending, then age descending. Stable otherwise."""
    return tuple(sorted(items, key=lambda i: (-i.severity_ordinal, -i.age_days)))


def build_stack(kind: str, items: Sequence[ActionItem], navigate: NavigateFn | None = None) -> Stack:
    config = STACK_CONFIG[kind]
    band = assign_band(kind, items)
    ages = [i.age_days for i in items]
    oldest = max(ages, default=0)
    portfolio_breakdown = build_portfolio_breakdown(items)

    return Stack(
        kind=kind,
        band=band,
        title=config.title,
        subtitle=format_stack_subtitle(oldest, len(portfolio_breakdown), band, len(items)),
        accent_color=config.accent_color,
        attention_score=compute_attention_score(items, band),
        items=sort_stack_items(items),
        portfolio_breakdown=portfolio_breakdown,
        ticker_breakdown=build_ticker_breakdown(items),
        oldest_age_days=oldest,
        median_age_days=median_age(ages),
        primary_cta=get_stack_cta(kind, items, navigate),
    )


def build_stacks(items: Sequence[ActionItem], navigate: NavigateFn | None = None) -> BandedView:
    """
    Group items into stacks and stacks into bands.

    Args:
        items: Action items, already filtered by the caller's suppression state
        navigate: Callback invoked by StackCTA.select()

    Returns:
        BandedView with all four bands (possibly empty), stacks sorted by
        attention score descending within each band
    """
    groups: dict[str, list[ActionItem]] = {}
    for item in items:
        groups.setdefault(classify_kind(item), []).append(item)

    stacks = [build_stack(kind, kind_items, navigate) for kind, kind_items in groups.items()]

    bands = []
    for band in BANDS:
        title, subtitle = BAND_CONFIG[band]
        in_band = sorted(
            (s for s in stacks if s.band == band),
            key=lambda s: -s.attention_score,
        )
        bands.append(BandData(band=band, title=title, subtitle=subtitle, stacks=tuple(in_band)))

    by_band = {b.band: b for b in bands}
    summary = CockpitSummary(
        decisions=by_band["DECIDE"].total_items,
        work=by_band["ADVANCE"].total_items,
        signals=by_band["AWARE"].total_items,
        investigate=by_band["INVESTIGATE"].total_items,
        oldest_days=max((s.oldest_age_days for s in stacks), default=0),
    )

    return BandedView(bands=tuple(bands), summary=summary)
