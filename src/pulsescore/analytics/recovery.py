"""Recovery score computation (resting-HR driven).

Recovery blends three components:

    rhr     40%  nightly resting HR vs. a 14-night rolling median baseline
    sleep   40%  last night's sleep against the 8 h target
    strain  20%  inverse of the previous day's strain

Each component degrades to a neutral value when its input is missing, so a
sparse history yields a conservative mid-range score instead of an error.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Sequence

from pulsescore.analytics.config import DEFAULT_CONFIG, ScoringConfig
from pulsescore.analytics.indexer import in_night_window
from pulsescore.analytics.stats import clamp, median, round_half_up
from pulsescore.analytics.strain import DailyStrain
from pulsescore.records import HeartRateSample, SleepNight

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecoveryScore:
    """Recovery score and its components."""

    date: str
    score: float  # 0-100
    resting_hr: float  # 0 when no nocturnal samples
    resting_hr_baseline: float
    rhr_component: float
    sleep_component: float
    strain_component: float
    level: str  # green / yellow / red

    def __repr__(self) -> str:
        return (
            f"RecoveryScore({self.date}: {self.score:.0f} {self.level}, "
            f"rhr={self.resting_hr:.0f}/{self.resting_hr_baseline:.0f}bpm)"
        )


def recovery_level(score: float) -> str:
    if score >= 67:
        return "green"
    if score >= 34:
        return "yellow"
    return "red"


# ---------------------------------------------------------------------------
# Resting HR
# ---------------------------------------------------------------------------


def nightly_resting_hr(
    samples: Iterable[HeartRateSample],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> float | None:
    """Median HR of the samples inside the nocturnal window, or None."""
    return median(s.heart_rate for s in samples if in_night_window(s.time, config))


def resting_hr_baseline(
    nightly_rhrs: Sequence[float],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> float:
    """Median of the given prior nights' resting HR; a fixed default if none."""
    value = median(nightly_rhrs)
    return config.default_baseline_rhr if value is None else value


# ---------------------------------------------------------------------------
# Composite scoring
# ---------------------------------------------------------------------------


def score_recovery(
    date: str,
    resting_hr: float | None,
    baseline: float,
    night: SleepNight | None,
    prior_strain: DailyStrain | None,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> RecoveryScore:
    """Compute one day's recovery score.

    Args:
        date: The day being scored.
        resting_hr: Tonight's nocturnal resting HR, or None.
        baseline: Rolling resting-HR baseline from prior nights.
        night: That date's sleep record, or None.
        prior_strain: The previous day's strain, or None.
        config: Weights, penalties and neutral defaults.
    """
    if resting_hr is None:
        rhr_component = config.neutral_rhr_component
    else:
        deviation = resting_hr - baseline
        rhr_component = clamp(100.0 - deviation * config.rhr_penalty_per_bpm)

    if night is None:
        sleep_component = config.neutral_sleep_component
    else:
        sleep_component = clamp(night.asleep_min / config.sleep_target_min * 100.0)

    if prior_strain is None:
        strain_component = config.rest_day_strain_component
    else:
        strain_component = clamp(100.0 - prior_strain.strain / config.strain_max * 100.0)

    w_rhr, w_sleep, w_strain = config.recovery_weights
    raw = rhr_component * w_rhr + sleep_component * w_sleep + strain_component * w_strain
    score = clamp(round_half_up(raw))

    return RecoveryScore(
        date=date,
        score=score,
        resting_hr=resting_hr if resting_hr is not None else 0.0,
        resting_hr_baseline=baseline,
        rhr_component=rhr_component,
        sleep_component=sleep_component,
        strain_component=strain_component,
        level=recovery_level(score),
    )


def recovery_fold(
    dates: Sequence[str],
    nightly_rhr: Mapping[str, float],
    strain_by_date: Mapping[str, DailyStrain],
    sleep_by_date: Mapping[str, SleepNight],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> Iterator[RecoveryScore]:
    """Score recovery day by day over ascending *dates*.

    This is a left fold: the state carried from day to day is the resting
    HR of the previous ``baseline_window`` dates (None where a date had no
    nocturnal samples) and the previous date's strain.  The baseline for a
    date therefore only ever sees earlier dates.

    Raises:
        ValueError: if *dates* are not strictly ascending.
    """
    window: deque[float | None] = deque(maxlen=config.baseline_window)
    prior_strain: DailyStrain | None = None
    previous: str | None = None

    for day in dates:
        if previous is not None and day <= previous:
            raise ValueError(f"recovery dates must be strictly ascending: {previous} -> {day}")

        baseline = resting_hr_baseline([v for v in window if v is not None], config)
        rhr = nightly_rhr.get(day)

        yield score_recovery(
            day,
            rhr,
            baseline,
            sleep_by_date.get(day),
            prior_strain,
            config,
        )

        window.append(rhr)
        prior_strain = strain_by_date.get(day)
        previous = day
