"""Sleep score with four weighted sub-components.

| Component      | Weight |
|----------------|--------|
| Sufficiency    | 0.30   |
| Efficiency     | 0.25   |
| Stage quality  | 0.25   |
| Consistency    | 0.20   |

Consistency compares tonight's bedtime against the median bedtime of the
preceding nights (up to 14, oldest first).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from pulsescore.analytics.config import DEFAULT_CONFIG, ScoringConfig
from pulsescore.analytics.stats import median, round_half_up
from pulsescore.records import SleepNight


# Sum of the three stage deviations is scaled so that a total deviation of
# 3.0 (every stage 100% off target) costs the full 100 points.
STAGE_PENALTY = 33.33


@dataclass(frozen=True)
class SleepScore:
    """Sleep score and its sub-scores (each 0-100)."""

    date: str
    score: float
    sufficiency: float
    efficiency: float
    stage_quality: float
    consistency: float
    level: str  # green / yellow / red

    def __repr__(self) -> str:
        return (
            f"SleepScore({self.date}: {self.score:.0f} {self.level}, "
            f"suff={self.sufficiency:.0f}, eff={self.efficiency:.0f}, "
            f"stage={self.stage_quality:.0f}, cons={self.consistency:.0f})"
        )


def sleep_level(score: float) -> str:
    if score >= 70:
        return "green"
    if score >= 40:
        return "yellow"
    return "red"


def bedtime_hour(start: datetime) -> float:
    """Bedtime as fractional hours, with after-midnight times shifted by 24.

    23:30 -> 23.5, 00:15 -> 24.25.  Anything at or before noon counts as
    after midnight.
    """
    h = start.hour + start.minute / 60.0
    return h + 24.0 if h <= 12.0 else h


# ---------------------------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------------------------


def score_sufficiency(night: SleepNight, config: ScoringConfig = DEFAULT_CONFIG) -> float:
    return min(night.asleep_min / config.sleep_target_min * 100.0, 100.0)


def score_efficiency(night: SleepNight) -> float:
    in_bed = night.in_bed_min
    if in_bed <= 0:
        return 0.0
    return (in_bed - night.wake_min) / in_bed * 100.0


def score_stage_quality(night: SleepNight, config: ScoringConfig = DEFAULT_CONFIG) -> float:
    """Penalise deviation from the ideal deep / REM / light proportions."""
    asleep = night.asleep_min
    if asleep <= 0:
        return 0.0

    ideal_deep, ideal_rem, ideal_light = config.ideal_stage_mix
    deviation = (
        abs(night.deep_min / asleep - ideal_deep) / ideal_deep
        + abs(night.rem_min / asleep - ideal_rem) / ideal_rem
        + abs(night.light_min / asleep - ideal_light) / ideal_light
    )
    return max(0.0, 100.0 - deviation * STAGE_PENALTY)


def score_consistency(
    night: SleepNight,
    prev_nights: Sequence[SleepNight],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> float:
    if len(prev_nights) < config.consistency_min_nights:
        return config.neutral_consistency

    typical = median(bedtime_hour(n.start) for n in prev_nights)
    deviation = abs(bedtime_hour(night.start) - typical)
    return max(0.0, 100.0 - deviation * config.consistency_penalty_per_hour)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score_sleep(
    night: SleepNight,
    prev_nights: Sequence[SleepNight] = (),
    config: ScoringConfig = DEFAULT_CONFIG,
) -> SleepScore:
    """Score one night of sleep.

    Args:
        night: The night being scored.
        prev_nights: Preceding nights, oldest first, used for consistency.
        config: Weights, targets and the ideal stage mix.

    Returns:
        SleepScore with the rounded composite and unrounded sub-scores.
    """
    sufficiency = score_sufficiency(night, config)
    efficiency = score_efficiency(night)
    stage_quality = score_stage_quality(night, config)
    consistency = score_consistency(night, prev_nights, config)

    w_suff, w_eff, w_stage, w_cons = config.sleep_weights
    score = round_half_up(
        sufficiency * w_suff
        + efficiency * w_eff
        + stage_quality * w_stage
        + consistency * w_cons
    )

    return SleepScore(
        date=night.date,
        score=score,
        sufficiency=sufficiency,
        efficiency=efficiency,
        stage_quality=stage_quality,
        consistency=consistency,
        level=sleep_level(score),
    )
