"""Scoring configuration.

Every threshold, weight and window used by the engines lives on a single
frozen :class:`ScoringConfig`.  The module-level constants are the defaults;
tests and the CLI build alternate configs with :meth:`ScoringConfig.from_mapping`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from pulsescore.records import RecordValidationError, parse_time


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

MAX_HR = 190.0

# Zone lower bounds as a fraction of max HR
ZONE_PEAK = 0.85
ZONE_CARDIO = 0.70
ZONE_FAT_BURN = 0.50

# TRIMP weight per minute in zone (rest contributes 0)
TRIMP_WEIGHTS = (1.0, 2.0, 3.0)  # fat burn, cardio, peak

STRAIN_MAX = 21.0
STRAIN_SCALE = 100.0  # raw TRIMP at which strain reaches ~63% of STRAIN_MAX

# Nocturnal resting-HR window, [start, end)
NIGHT_START = "02:00"
NIGHT_END = "05:00"

BASELINE_WINDOW = 14
DEFAULT_BASELINE_RHR = 65.0

SLEEP_TARGET_MIN = 480.0

# Validation groups; any field not listed is a non-negative number
_POSITIVE = ("max_hr", "strain_max", "strain_scale")
_WINDOWS = ("baseline_window", "consistency_window", "consistency_min_nights", "sleep_debt_window")
_TIMES = ("night_start", "night_end")
_TUPLE_LENGTHS = {
    "trimp_weights": 3,
    "recovery_weights": 3,
    "sleep_weights": 4,
    "ideal_stage_mix": 3,
}


def _number(name: str, value: Any) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class ScoringConfig:
    """All tunables for the scoring pipeline."""

    max_hr: float = MAX_HR

    # Strain
    zone_peak: float = ZONE_PEAK
    zone_cardio: float = ZONE_CARDIO
    zone_fat_burn: float = ZONE_FAT_BURN
    trimp_weights: tuple[float, float, float] = TRIMP_WEIGHTS
    strain_max: float = STRAIN_MAX
    strain_scale: float = STRAIN_SCALE

    # Resting HR
    night_start: str = NIGHT_START
    night_end: str = NIGHT_END

    # Recovery
    baseline_window: int = BASELINE_WINDOW
    default_baseline_rhr: float = DEFAULT_BASELINE_RHR
    rhr_penalty_per_bpm: float = 5.0
    recovery_weights: tuple[float, float, float] = (0.4, 0.4, 0.2)  # rhr, sleep, strain
    neutral_rhr_component: float = 50.0
    neutral_sleep_component: float = 50.0
    rest_day_strain_component: float = 75.0

    # Sleep score
    sleep_target_min: float = SLEEP_TARGET_MIN
    sleep_weights: tuple[float, float, float, float] = (0.30, 0.25, 0.25, 0.20)
    ideal_stage_mix: tuple[float, float, float] = (0.20, 0.25, 0.55)  # deep, rem, light
    consistency_window: int = 14
    consistency_min_nights: int = 3
    consistency_penalty_per_hour: float = 25.0
    neutral_consistency: float = 75.0

    # Sleep need
    sleep_need_base_min: float = SLEEP_TARGET_MIN
    sleep_debt_window: int = 14
    debt_payback_rate: float = 0.25
    debt_payback_cap_min: float = 30.0

    def __post_init__(self) -> None:
        """Check types and shapes, normalising numbers, tuples and times.

        Raises:
            ValueError: naming the first offending field.
        """
        for f in fields(self):
            name, value = f.name, getattr(self, f.name)
            if name in _TIMES:
                try:
                    value = parse_time(value)
                except RecordValidationError as e:
                    raise ValueError(f"{name}: {e}") from None
            elif name in _WINDOWS:
                if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                    raise ValueError(f"{name} must be a positive integer, got {value!r}")
            elif name in _TUPLE_LENGTHS:
                expected = _TUPLE_LENGTHS[name]
                if not isinstance(value, (list, tuple)) or len(value) != expected:
                    raise ValueError(f"{name} must have {expected} values, got {value!r}")
                value = tuple(_number(name, v) for v in value)
            else:
                value = _number(name, value)
                if name in _POSITIVE and value == 0:
                    raise ValueError(f"{name} must be positive")
            object.__setattr__(self, name, value)

        if not self.zone_fat_burn <= self.zone_cardio <= self.zone_peak:
            raise ValueError("zone thresholds must ascend: fat burn <= cardio <= peak")
        if self.night_start >= self.night_end:
            raise ValueError("night_start must be earlier than night_end")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ScoringConfig":
        """Build a config from plain data, e.g. a parsed JSON file.

        Unknown keys and badly typed or shaped values raise ValueError.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return replace(cls(), **data)


DEFAULT_CONFIG = ScoringConfig()
