"""Trigger thresholds, injected into the engine at construction."""

import math
import operator
import os
from collections.abc import Mapping
from dataclasses import dataclass

from action_loop_mcp.utils.validators import check_rule_expr

# Minimum days pending for a proposal to count as stalled
STALLED_DAYS_THRESHOLD = 3

# Thesis staleness: orange at 90d, red at 180d
THESIS_STALE_ORANGE_DAYS = 90
THESIS_STALE_RED_DAYS = 180

# Rating changes older than this are moot
RATING_FOLLOWUP_WINDOW_DAYS = 14

# Minimum absolute expected return for the opportunity trigger
DEFAULT_EV_THRESHOLD = 0.15

# Env var -> field name
ENV_OVERRIDES = {
    "ACTION_LOOP_THESIS_ORANGE_DAYS": "thesis_orange_days",
    "ACTION_LOOP_THESIS_RED_DAYS": "thesis_red_days",
    "ACTION_LOOP_RATING_WINDOW_DAYS": "rating_followup_window_days",
    "ACTION_LOOP_EV_THRESHOLD": "ev_threshold",
    "ACTION_LOOP_STALLED_DAYS": "stalled_days_threshold",
}


@dataclass(frozen=True)
class Thresholds:
    """Immutable policy thresholds. All comparisons against them are inclusive."""

    thesis_orange_days: int = THESIS_STALE_ORANGE_DAYS
    thesis_red_days: int = THESIS_STALE_RED_DAYS
    rating_followup_window_days: int = RATING_FOLLOWUP_WINDOW_DAYS
    ev_threshold: float = DEFAULT_EV_THRESHOLD
    stalled_days_threshold: int = STALLED_DAYS_THRESHOLD

    def __post_init__(self) -> None:
        for name in (
            "thesis_orange_days",
            "thesis_red_days",
            "rating_followup_window_days",
            "stalled_days_threshold",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"Invalid {name}={value!r}. Must be a non-negative integer")

        if isinstance(self.ev_threshold, bool) or not isinstance(self.ev_threshold, (int, float)):
            raise ValueError(f"Invalid ev_threshold={self.ev_threshold!r}. Must be a number")
        if not math.isfinite(self.ev_threshold) or self.ev_threshold < 0:
            raise ValueError(f"Invalid ev_threshold={self.ev_threshold!r}. Must be a finite number >= 0")
        object.__setattr__(self, "ev_threshold", float(self.ev_threshold))

        if not check_rule_expr(self.thesis_orange_days, self.thesis_red_days, operator.le):
            raise ValueError(
                f"thesis_orange_days={self.thesis_orange_days} must not exceed "
                f"thesis_red_days={self.thesis_red_days}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Thresholds":
        """Build thresholds from ACTION_LOOP_* environment variables, defaults elsewhere."""
        if environ is None:
            environ = os.environ

        overrides: dict[str, int | float] = {}
        for env_name, field_name in ENV_OVERRIDES.items():
            raw = environ.get(env_name)
            if raw is None or raw.strip() == "":
                continue
            try:
                if field_name == "ev_threshold":
                    overrides[field_name] = float(raw)
                else:
                    overrides[field_name] = int(raw)
            except ValueError as e:
                raise ValueError(f"Invalid {env_name}='{raw}'") from e

        return cls(**overrides)

    def to_dict(self) -> dict[str, int | float]:
        return {
            "thesis_orange_days": self.thesis_orange_days,
            "thesis_red_days": self.thesis_red_days,
            "rating_followup_window_days": self.rating_followup_window_days,
            "ev_threshold": self.ev_threshold,
            "stalled_days_threshold": self.stalled_days_threshold,
        }


DEFAULT_THRESHOLDS = Thresholds()
