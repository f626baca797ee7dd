"""VO2 max estimation from heart-rate data (Uth-Sorensen-Overgaard-Pedersen).

    VO2max = 15.3 * (HRmax / HRrest)

Classification buckets follow standard fitness tables for males aged 20-29.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from pulsescore.analytics.indexer import DailyHRSummary
from pulsescore.analytics.stats import median, round_half_up


UTH_FACTOR = 15.3

# (exclusive upper bound, classification, percentile)
VO2_CLASSES = (
    (36.0, "Poor", 15),
    (42.0, "Fair", 30),
    (46.0, "Average", 50),
    (50.0, "Good", 70),
    (56.0, "Excellent", 85),
)
TOP_CLASS = ("Superior", 95)


@dataclass(frozen=True)
class VO2MaxEstimate:
    value: float  # ml/kg/min, one decimal
    classification: str
    percentile: int

    def __repr__(self) -> str:
        return f"VO2MaxEstimate({self.value:.1f} {self.classification}, p{self.percentile})"


def classify_vo2max(value: float) -> tuple[str, int]:
    for upper, label, percentile in VO2_CLASSES:
        if value < upper:
            return label, percentile
    return TOP_CLASS


def estimate_vo2max(max_hr: float, resting_hr: float) -> VO2MaxEstimate:
    """Estimate VO2 max from max and resting heart rate."""
    value = round_half_up(UTH_FACTOR * (max_hr / resting_hr), 1)
    label, percentile = classify_vo2max(value)
    return VO2MaxEstimate(value=value, classification=label, percentile=percentile)


def vo2max_from_summaries(summaries: Iterable[DailyHRSummary]) -> VO2MaxEstimate | None:
    """Estimate from the whole dataset: overall max HR over median resting HR.

    Returns None when there are no summaries or the inputs are unusable.
    """
    overall_max = 0.0
    resting: list[float] = []
    for s in summaries:
        overall_max = max(overall_max, s.max)
        resting.append(s.resting)

    median_rhr = median(resting)
    if median_rhr is None or median_rhr <= 0 or overall_max <= 0:
        return None
    return estimate_vo2max(overall_max, median_rhr)
