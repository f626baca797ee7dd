"""Daily indexing of large flat record arrays.

Heart-rate exports run to ~150K rows, so every index here is built in a
single linear pass.  Grouping keeps insertion order inside each day; the
order of days themselves is irrelevant (callers sort keys when they need
chronology).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Protocol, Sequence, TypeVar

from pulsescore.analytics.config import DEFAULT_CONFIG, ScoringConfig
from pulsescore.records import (
    ActivityMinute,
    HeartRateSample,
    SleepMinute,
    SleepNight,
)

logger = logging.getLogger(__name__)


class _Dated(Protocol):
    date: str


R = TypeVar("R", bound=_Dated)


@dataclass(frozen=True)
class DailyHRSummary:
    """Single-pass heart-rate statistics for one day."""

    date: str
    min: float
    max: float
    avg: float
    resting: float  # nocturnal minimum, or the day's min if no night samples
    count: int

    def __repr__(self) -> str:
        return (
            f"DailyHRSummary({self.date}: {self.min:.0f}-{self.max:.0f}bpm, "
            f"avg={self.avg:.1f}, rest={self.resting:.0f}, n={self.count})"
        )


def in_night_window(time: str, config: ScoringConfig = DEFAULT_CONFIG) -> bool:
    """True if an ``HH:MM`` time falls inside the nocturnal resting window."""
    return config.night_start <= time < config.night_end


def group_by_day(records: Iterable[R]) -> dict[str, list[R]]:
    """Bucket records by their ``date`` field."""
    by_day: dict[str, list[R]] = {}
    for rec in records:
        bucket = by_day.get(rec.date)
        if bucket is None:
            by_day[rec.date] = [rec]
        else:
            bucket.append(rec)
    return by_day


def build_daily_hr_summary(
    samples: Iterable[HeartRateSample],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> dict[str, DailyHRSummary]:
    """Compute min/max/avg/resting/count per day in one pass.

    The average is updated incrementally as
    ``avg' = (avg * count + hr) / (count + 1)`` rather than re-summed.
    """
    # date -> [min, max, avg, night_min or None, count]
    acc: dict[str, list] = {}
    for s in samples:
        hr = s.heart_rate
        night = in_night_window(s.time, config)
        cur = acc.get(s.date)
        if cur is None:
            acc[s.date] = [hr, hr, hr, hr if night else None, 1]
            continue
        count = cur[4]
        cur[0] = min(cur[0], hr)
        cur[1] = max(cur[1], hr)
        cur[2] = (cur[2] * count + hr) / (count + 1)
        if night and (cur[3] is None or hr < cur[3]):
            cur[3] = hr
        cur[4] = count + 1

    summaries: dict[str, DailyHRSummary] = {}
    fallback_days = 0
    for day, (lo, hi, avg, night_min, count) in acc.items():
        if night_min is None:
            fallback_days += 1
        summaries[day] = DailyHRSummary(
            date=day,
            min=lo,
            max=hi,
            avg=avg,
            resting=night_min if night_min is not None else lo,
            count=count,
        )

    if fallback_days:
        logger.debug(
            "%d of %d days had no nocturnal HR; resting HR fell back to daily min",
            fallback_days, len(summaries),
        )
    return summaries


# ---------------------------------------------------------------------------
# Bundled index
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DailyIndex:
    """All date-keyed views the scoring engines read from.

    ``sleep_minute_by_day`` and ``activity_minute_by_day`` are not read by any
    engine; they are indexed for downstream consumers of the index.
    """

    hr_by_day: Mapping[str, Sequence[HeartRateSample]] = field(default_factory=dict)
    hr_summary: Mapping[str, DailyHRSummary] = field(default_factory=dict)
    sleep_by_date: Mapping[str, SleepNight] = field(default_factory=dict)
    sleep_minute_by_day: Mapping[str, Sequence[SleepMinute]] = field(default_factory=dict)
    activity_minute_by_day: Mapping[str, Sequence[ActivityMinute]] = field(default_factory=dict)

    @property
    def hr_dates(self) -> list[str]:
        """Heart-rate dates in ascending order."""
        return sorted(self.hr_by_day)

    @property
    def nights(self) -> list[SleepNight]:
        """Sleep nights in ascending date order."""
        return [self.sleep_by_date[d] for d in sorted(self.sleep_by_date)]


def _freeze(by_day: dict[str, list[R]]) -> Mapping[str, tuple[R, ...]]:
    return MappingProxyType({day: tuple(recs) for day, recs in by_day.items()})


def build_index(
    heart_rate: Iterable[HeartRateSample] = (),
    sleep: Iterable[SleepNight] = (),
    sleep_minutes: Iterable[SleepMinute] = (),
    activity_minutes: Iterable[ActivityMinute] = (),
    config: ScoringConfig = DEFAULT_CONFIG,
) -> DailyIndex:
    """Index every record stream by day.

    Sleep nights are keyed one per date; if a source repeats a date the
    last row wins.
    """
    hr = list(heart_rate)
    sleep_by_date: dict[str, SleepNight] = {}
    for night in sleep:
        sleep_by_date[night.date] = night

    index = DailyIndex(
        hr_by_day=_freeze(group_by_day(hr)),
        hr_summary=MappingProxyType(build_daily_hr_summary(hr, config)),
        sleep_by_date=MappingProxyType(sleep_by_date),
        sleep_minute_by_day=_freeze(group_by_day(sleep_minutes)),
        activity_minute_by_day=_freeze(group_by_day(activity_minutes)),
    )
    logger.debug(
        "Indexed %d HR samples over %d days, %d sleep nights",
        len(hr), len(index.hr_by_day), len(sleep_by_date),
    )
    return index
