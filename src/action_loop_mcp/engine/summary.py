"""Five-stage workflow summary derived from aggregate counts only."""

from dataclasses import dataclass
from typing import Any

from action_loop_mcp.engine.config import THESIS_STALE_ORANGE_DAYS
from action_loop_mcp.utils.validators import (
    FactsValidationError,
    ensure_int,
    known_days,
    read_int,
    require_mapping,
)

STEP_DONE = "done"
STEP_PENDING = "pending"
STEP_BLOCKED = "blocked"
STEP_NONE = "none"

STEP_STATUSES = (STEP_DONE, STEP_PENDING, STEP_BLOCKED, STEP_NONE)
STAGES = ("research", "idea", "proposal", "decision", "execution")

COUNT_FIELDS = (
    "active_idea_count",
    "simulated_idea_count",
    "stalled_proposal_count",
    "unexecuted_approval_count",
    "completed_execution_count",
)


@dataclass(frozen=True)
class WorkflowCounts:
    """Aggregate counts for one asset. thesis_days_stale None means no thesis."""

    thesis_days_stale: int | None = None
    active_idea_count: int = 0
    simulated_idea_count: int = 0
    stalled_proposal_count: int = 0
    unexecuted_approval_count: int = 0
    completed_execution_count: int = 0

    def __post_init__(self) -> None:
        for name in COUNT_FIELDS:
            value = ensure_int(getattr(self, name), name, min_value=0)
            if value is None:
                raise FactsValidationError(name, "is required")
            object.__setattr__(self, name, value)
        thesis = ensure_int(self.thesis_days_stale, "thesis_days_stale")
        object.__setattr__(self, "thesis_days_stale", known_days(thesis))

    @classmethod
    def from_dict(cls, data: Any) -> "WorkflowCounts":
        data = require_mapping(data, "counts")
        counts = {name: read_int(data, name, default=0) for name in COUNT_FIELDS}
        return cls(thesis_days_stale=read_int(data, "thesis_days_stale"), **counts)


@dataclass(frozen=True)
class WorkflowSummary:
    research: str
    idea: str
    proposal: str
    decision: str
    execution: str

    def to_dict(self) -> dict[str, str]:
        return {stage: getattr(self, stage) for stage in STAGES}


def compute_workflow_summary(
    counts: WorkflowCounts,
    thesis_stale_days: int = THESIS_STALE_ORANGE_DAYS,
) -> WorkflowSummary:
    """
    Map counts to a status per stage.

    Rules are independent and evaluated in a fixed order:
    - idea is none whenever there are no active ideas
    - decision: blocked by a stall is checked before done
    - execution: blocked is checked before done
    """
    if counts.thesis_days_stale is None:
        research = STEP_NONE
    elif counts.thesis_days_stale >= thesis_stale_days:
        research = STEP_PENDING
    else:
        research = STEP_DONE

    idea = STEP_NONE if counts.active_idea_count == 0 else STEP_DONE

    if counts.active_idea_count == 0:
        proposal = STEP_NONE
    elif counts.simulated_idea_count > 0:
        proposal = STEP_DONE
    else:
        proposal = STEP_PENDING

    if counts.stalled_proposal_count > 0:
        decision = STEP_BLOCKED
    elif counts.unexecuted_approval_count > 0 or counts.completed_execution_count > 0:
        decision = STEP_DONE
    else:
        decision = STEP_NONE

    if counts.unexecuted_approval_count > 0:
        execution = STEP_BLOCKED
    elif counts.completed_execution_count > 0:
        execution = STEP_DONE
    else:
        execution = STEP_NONE

    return WorkflowSummary(
        research=research,
        idea=idea,
        proposal=proposal,
        decision=decision,
        execution=execution,
    )
