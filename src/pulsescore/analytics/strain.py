"""Strain / training load scoring (HR-zone TRIMP variant).

Classifies each heart-rate sample (one sample = one minute) into a zone by
its fraction of max HR, accumulates a weighted training impulse, and maps
it onto the 0-21 strain scale with an exponential saturation curve:

    strain = 21 * (1 - e^(-TRIMP / 100))

so each extra minute in a high zone adds less strain than the one before.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from pulsescore.analytics.config import DEFAULT_CONFIG, ScoringConfig
from pulsescore.analytics.stats import round_half_up
from pulsescore.records import HeartRateSample


ZONE_LABELS = ("rest", "fat_burn", "cardio", "peak")

# Upper bounds (exclusive) of each strain level, in ascending order
STRAIN_LEVELS = (
    (2.0, "rest"),
    (7.0, "light"),
    (14.0, "moderate"),
    (18.0, "high"),
)


@dataclass(frozen=True)
class HRZone:
    minutes: int
    percent: float


@dataclass(frozen=True)
class ZoneMinutes:
    """Minutes spent in each HR zone over one day."""

    rest: int = 0
    fat_burn: int = 0
    cardio: int = 0
    peak: int = 0

    @property
    def total(self) -> int:
        return self.rest + self.fat_burn + self.cardio + self.peak


@dataclass(frozen=True)
class DailyStrain:
    """Strain score and zone breakdown for one day."""

    date: str
    raw_trimp: float
    strain: float  # 0-21
    zone_minutes: ZoneMinutes
    level: str

    def __repr__(self) -> str:
        return (
            f"DailyStrain({self.date}: {self.strain:.1f}/21 {self.level}, "
            f"trimp={self.raw_trimp:.0f})"
        )


def classify_zone(hr_pct: float, config: ScoringConfig = DEFAULT_CONFIG) -> str:
    """Return the zone label for a heart rate expressed as a fraction of max."""
    if hr_pct >= config.zone_peak:
        return "peak"
    if hr_pct >= config.zone_cardio:
        return "cardio"
    if hr_pct >= config.zone_fat_burn:
        return "fat_burn"
    return "rest"


def strain_level(strain: float) -> str:
    for upper, label in STRAIN_LEVELS:
        if strain < upper:
            return label
    return "all-out"


def compute_hr_zones(
    samples: Sequence[HeartRateSample],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> dict[str, HRZone]:
    """Minutes and share of the day spent in each HR zone.

    Percentages are of the sample count; an empty day divides by 1 so every
    zone reads 0%.
    """
    minutes = {label: 0 for label in ZONE_LABELS}
    max_hr = config.max_hr
    for s in samples:
        pct = s.heart_rate / max_hr if max_hr > 0 else 0.0
        minutes[classify_zone(pct, config)] += 1

    total = len(samples) or 1
    return {
        label: HRZone(minutes=m, percent=m / total * 100.0)
        for label, m in minutes.items()
    }


def saturate(raw_trimp: float, config: ScoringConfig = DEFAULT_CONFIG) -> float:
    """Map raw TRIMP onto [0, strain_max), one decimal place.

    Rounding would otherwise reach strain_max itself once TRIMP passes
    ~600, so the result is held one step below the ceiling.
    """
    if raw_trimp <= 0:
        return 0.0
    value = config.strain_max * (1.0 - math.exp(-raw_trimp / config.strain_scale))
    return min(round_half_up(value, 1), round_half_up(config.strain_max - 0.1, 1))


def score_strain(
    samples: Sequence[HeartRateSample],
    config: ScoringConfig = DEFAULT_CONFIG,
    date: str | None = None,
) -> DailyStrain:
    """Compute a day's strain from its heart-rate samples.

    Args:
        samples: One day's HR samples.
        config: Max HR, zone thresholds and TRIMP weights.
        date: Date label; defaults to the first sample's date.

    Returns:
        DailyStrain with the 0-21 score and per-zone minutes.
    """
    zones = compute_hr_zones(samples, config)
    w_fat, w_cardio, w_peak = config.trimp_weights
    raw = (
        zones["fat_burn"].minutes * w_fat
        + zones["cardio"].minutes * w_cardio
        + zones["peak"].minutes * w_peak
    )
    strain = saturate(raw, config)

    if date is None:
        date = samples[0].date if samples else ""

    return DailyStrain(
        date=date,
        raw_trimp=raw,
        strain=strain,
        zone_minutes=ZoneMinutes(**{label: z.minutes for label, z in zones.items()}),
        level=strain_level(strain),
    )
