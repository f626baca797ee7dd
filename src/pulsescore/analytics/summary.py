"""Today snapshot aggregator.

Pulls the latest day's scores, the on-demand sleep need, the strain coach
target and 7-day rolling averages into a single TodaySnapshot that is
JSON-serializable.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import date, timedelta
from typing import Any, Mapping

from pulsescore.analytics.coach import StrainTarget, strain_target
from pulsescore.analytics.config import DEFAULT_CONFIG, ScoringConfig
from pulsescore.analytics.indexer import DailyIndex
from pulsescore.analytics.pipeline import ScoreReport
from pulsescore.analytics.recovery import RecoveryScore
from pulsescore.analytics.sleep_need import SleepNeed, compute_sleep_need, sleep_debt
from pulsescore.analytics.sleep_score import SleepScore
from pulsescore.analytics.stats import round_half_up
from pulsescore.analytics.strain import DailyStrain
from pulsescore.analytics.vo2max import VO2MaxEstimate
from pulsescore.records import SleepNight


@dataclass(frozen=True)
class TodaySnapshot:
    """A single day's dashboard view of the derived scores."""

    date: str  # ISO date string, e.g. "2026-02-13"

    strain: DailyStrain | None = None
    recovery: RecoveryScore | None = None
    sleep_score: SleepScore | None = None
    last_night: str | None = None  # date of the night the sleep score is for
    vo2max: VO2MaxEstimate | None = None
    sleep_need: SleepNeed | None = None
    strain_coach: StrainTarget = field(default_factory=lambda: strain_target(None))

    # 7-day rolling averages
    avg_recovery_7d: float | None = None
    avg_strain_7d: float | None = None
    avg_sleep_score_7d: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        def fmt(value: float | None, pattern: str) -> str:
            return "n/a" if value is None else format(value, pattern)

        return (
            f"TodaySnapshot({self.date}: "
            f"strain={fmt(self.strain.strain if self.strain else None, '.1f')}/21, "
            f"recovery={fmt(self.recovery.score if self.recovery else None, '.0f')}, "
            f"sleep={fmt(self.sleep_score.score if self.sleep_score else None, '.0f')}, "
            f"coach={self.strain_coach.label})"
        )


def rolling_average(
    values_by_date: Mapping[str, float],
    end_date: str,
    days: int = 7,
    ndigits: int = 0,
) -> float | None:
    """Mean over the calendar days ``end_date - days + 1 .. end_date``.

    Days missing from the map are skipped; returns None if none are present.
    """
    end = date.fromisoformat(end_date)
    found = []
    for offset in range(days):
        key = (end - timedelta(days=offset)).isoformat()
        if key in values_by_date:
            found.append(values_by_date[key])
    if not found:
        return None
    return round_half_up(sum(found) / len(found), ndigits)


def _last_night_with_sleep(nights: list[SleepNight], today: str) -> SleepNight | None:
    for night in reversed(nights):
        if night.date <= today and night.asleep_min > 0:
            return night
    return None


def build_today(
    report: ScoreReport,
    index: DailyIndex,
    today: date | str | None = None,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> TodaySnapshot:
    """Build the today snapshot from a pipeline report.

    Args:
        report: Output of :func:`run_pipeline`.
        index: The index the report was built from.
        today: Day to summarise; defaults to the latest heart-rate date, or
            the calendar date when there is no heart-rate data.
        config: Sleep-need and debt settings.

    Returns:
        A populated TodaySnapshot.
    """
    if today is None:
        hr_dates = index.hr_dates
        today = hr_dates[-1] if hr_dates else date.today().isoformat()
    date_str = today if isinstance(today, str) else today.isoformat()

    strain = report.strain.get(date_str)
    recovery = report.recovery.get(date_str)

    nights = index.nights
    last_night = _last_night_with_sleep(nights, date_str)
    sleep_key = last_night.date if last_night is not None else date_str
    sleep_score = report.sleep_score.get(sleep_key)

    need = None
    if strain is not None:
        recent = [n.asleep_min for n in nights if n.date <= date_str][-config.sleep_debt_window:]
        debt = sleep_debt(recent, config.sleep_target_min)
        need = compute_sleep_need(strain.strain, debt, config)

    return TodaySnapshot(
        date=date_str,
        strain=strain,
        recovery=recovery,
        sleep_score=sleep_score,
        last_night=last_night.date if last_night is not None else None,
        vo2max=report.vo2max,
        sleep_need=need,
        strain_coach=strain_target(recovery),
        avg_recovery_7d=rolling_average(
            {d: r.score for d, r in report.recovery.items()}, date_str),
        avg_strain_7d=rolling_average(
            {d: s.strain for d, s in report.strain.items()}, date_str, ndigits=1),
        avg_sleep_score_7d=rolling_average(
            {d: s.score for d, s in report.sleep_score.items()}, date_str),
    )
