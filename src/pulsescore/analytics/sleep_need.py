"""Recommended sleep duration from today's strain and recent sleep debt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from pulsescore.analytics.config import DEFAULT_CONFIG, ScoringConfig
from pulsescore.analytics.stats import clamp


# (exclusive strain upper bound, extra minutes)
STRAIN_STEPS = (
    (7.0, 0.0),
    (14.0, 15.0),
    (18.0, 30.0),
)
MAX_STRAIN_ADJUST_MIN = 45.0


@dataclass(frozen=True)
class SleepNeed:
    recommended_min: float
    base_min: float
    strain_adjust_min: float
    debt_adjust_min: float

    def __repr__(self) -> str:
        return (
            f"SleepNeed({self.recommended_min:.0f}min = {self.base_min:.0f} "
            f"+ {self.strain_adjust_min:.0f} strain + {self.debt_adjust_min:.0f} debt)"
        )


def strain_adjustment(strain: float) -> float:
    for upper, minutes in STRAIN_STEPS:
        if strain < upper:
            return minutes
    return MAX_STRAIN_ADJUST_MIN


def sleep_debt(recent_asleep_min: Iterable[float], recommended_min: float = 480.0) -> float:
    """Sum of nightly shortfalls against *recommended_min*.

    Oversleeping earns no credit, so the result is never negative.
    """
    return sum(max(0.0, recommended_min - actual) for actual in recent_asleep_min)


def compute_sleep_need(
    strain: float,
    debt_min: float,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> SleepNeed:
    """Base need plus a strain step plus a capped share of the sleep debt."""
    base = config.sleep_need_base_min
    strain_adj = strain_adjustment(strain)
    debt_adj = clamp(debt_min * config.debt_payback_rate, 0.0, config.debt_payback_cap_min)
    return SleepNeed(
        recommended_min=base + strain_adj + debt_adj,
        base_min=base,
        strain_adjust_min=strain_adj,
        debt_adjust_min=debt_adj,
    )
