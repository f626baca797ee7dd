"""Analytics pipeline: drive every scoring engine over a full data load.

Order matters only for recovery.  Strain and sleep scores are independent
per date; recovery on day *i* needs the resting HR of days *i-14 .. i-1*
and the strain of day *i-1*, so it runs as a sequential fold after strain
is complete.  VO2 max is computed last from the populated HR summaries.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from pulsescore.analytics.config import DEFAULT_CONFIG, ScoringConfig
from pulsescore.analytics.indexer import DailyIndex, build_index
from pulsescore.analytics.recovery import (
    RecoveryScore,
    nightly_resting_hr,
    recovery_fold,
)
from pulsescore.analytics.sleep_score import SleepScore, score_sleep
from pulsescore.analytics.strain import DailyStrain, score_strain
from pulsescore.analytics.vo2max import VO2MaxEstimate, vo2max_from_summaries
from pulsescore.records import (
    ActivityMinute,
    HeartRateSample,
    SleepMinute,
    SleepNight,
)

logger = logging.getLogger(__name__)


def _empty() -> Mapping:
    return MappingProxyType({})


@dataclass(frozen=True)
class ScoreReport:
    """Everything the pipeline derives from one data load."""

    strain: Mapping[str, DailyStrain] = field(default_factory=_empty)
    recovery: Mapping[str, RecoveryScore] = field(default_factory=_empty)
    sleep_score: Mapping[str, SleepScore] = field(default_factory=_empty)
    vo2max: VO2MaxEstimate | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form with every map in ascending date order."""
        return {
            "strain": {d: asdict(self.strain[d]) for d in sorted(self.strain)},
            "recovery": {d: asdict(self.recovery[d]) for d in sorted(self.recovery)},
            "sleep_score": {d: asdict(self.sleep_score[d]) for d in sorted(self.sleep_score)},
            "vo2max": asdict(self.vo2max) if self.vo2max is not None else None,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        vo2 = f"{self.vo2max.value:.1f}" if self.vo2max else "n/a"
        return (
            f"ScoreReport(strain={len(self.strain)}d, "
            f"recovery={len(self.recovery)}d, "
            f"sleep={len(self.sleep_score)}n, vo2max={vo2})"
        )


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def compute_strain_map(
    index: DailyIndex,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> dict[str, DailyStrain]:
    return {
        day: score_strain(samples, config, date=day)
        for day, samples in index.hr_by_day.items()
    }


def compute_sleep_score_map(
    nights: list[SleepNight],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> dict[str, SleepScore]:
    """Score each night against the raw nights before it (oldest first)."""
    ordered = sorted(nights, key=lambda n: n.date)
    window = config.consistency_window
    scores: dict[str, SleepScore] = {}
    for i, night in enumerate(ordered):
        prev = ordered[max(0, i - window):i]
        scores[night.date] = score_sleep(night, prev, config)
    return scores


def compute_nightly_rhr(
    index: DailyIndex,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> dict[str, float]:
    """Nocturnal median HR per date; dates without night samples are absent."""
    nightly: dict[str, float] = {}
    for day in index.hr_dates:
        rhr = nightly_resting_hr(index.hr_by_day[day], config)
        if rhr is not None:
            nightly[day] = rhr
    return nightly


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def run_pipeline(
    index: DailyIndex,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> ScoreReport:
    """Run every engine over an indexed data load.

    Args:
        index: Date-keyed record views from :func:`build_index`.
        config: Scoring thresholds and weights.

    Returns:
        A ScoreReport of read-only date-keyed maps plus the VO2 max value.
    """
    strain = compute_strain_map(index, config)
    sleep_scores = compute_sleep_score_map(index.nights, config)

    nightly = compute_nightly_rhr(index, config)
    recovery = {
        r.date: r
        for r in recovery_fold(index.hr_dates, nightly, strain, index.sleep_by_date, config)
    }

    vo2 = vo2max_from_summaries(index.hr_summary.values())

    logger.debug(
        "Scored %d strain days, %d sleep nights, %d recovery days (%d with nocturnal HR)",
        len(strain), len(sleep_scores), len(recovery), len(nightly),
    )
    if vo2 is None:
        logger.debug("No heart-rate data; VO2 max not estimated")

    return ScoreReport(
        strain=MappingProxyType(strain),
        recovery=MappingProxyType(recovery),
        sleep_score=MappingProxyType(sleep_scores),
        vo2max=vo2,
    )


def score_records(
    heart_rate: Iterable[HeartRateSample] = (),
    sleep: Iterable[SleepNight] = (),
    sleep_minutes: Iterable[SleepMinute] = (),
    activity_minutes: Iterable[ActivityMinute] = (),
    config: ScoringConfig = DEFAULT_CONFIG,
) -> tuple[DailyIndex, ScoreReport]:
    """Index raw records and run the pipeline in one call."""
    index = build_index(heart_rate, sleep, sleep_minutes, activity_minutes, config)
    return index, run_pipeline(index, config)
