"""Analytics engine for deriving daily scores from wearable time series.

Modules:
    config      -- ScoringConfig (thresholds, weights, windows)
    indexer     -- Per-day grouping and single-pass HR summaries
    strain      -- HR-zone TRIMP strain scoring (0-21)
    recovery    -- Resting-HR / sleep / prior-strain recovery scoring
    sleep_score -- Four-component sleep score
    vo2max      -- Uth-ratio VO2 max estimate
    sleep_need  -- Recommended sleep from strain and sleep debt
    coach       -- Strain target from recovery
    pipeline    -- Orchestrator producing a ScoreReport
    summary     -- Today snapshot and rolling averages
"""

from pulsescore.analytics.config import ScoringConfig, DEFAULT_CONFIG
from pulsescore.analytics.indexer import (
    DailyHRSummary,
    DailyIndex,
    build_daily_hr_summary,
    build_index,
    group_by_day,
)
from pulsescore.analytics.strain import (
    score_strain,
    compute_hr_zones,
    strain_level,
    DailyStrain,
    HRZone,
    ZoneMinutes,
)
from pulsescore.analytics.recovery import (
    score_recovery,
    nightly_resting_hr,
    resting_hr_baseline,
    recovery_fold,
    RecoveryScore,
)
from pulsescore.analytics.sleep_score import score_sleep, SleepScore
from pulsescore.analytics.vo2max import (
    estimate_vo2max,
    vo2max_from_summaries,
    VO2MaxEstimate,
)
from pulsescore.analytics.sleep_need import compute_sleep_need, sleep_debt, SleepNeed
from pulsescore.analytics.coach import strain_target, StrainTarget
from pulsescore.analytics.pipeline import run_pipeline, score_records, ScoreReport
from pulsescore.analytics.summary import build_today, rolling_average, TodaySnapshot

__all__ = [
    # config
    "ScoringConfig",
    "DEFAULT_CONFIG",
    # indexer
    "DailyHRSummary",
    "DailyIndex",
    "build_daily_hr_summary",
    "build_index",
    "group_by_day",
    # strain
    "score_strain",
    "compute_hr_zones",
    "strain_level",
    "DailyStrain",
    "HRZone",
    "ZoneMinutes",
    # recovery
    "score_recovery",
    "nightly_resting_hr",
    "resting_hr_baseline",
    "recovery_fold",
    "RecoveryScore",
    # sleep
    "score_sleep",
    "SleepScore",
    # vo2max
    "estimate_vo2max",
    "vo2max_from_summaries",
    "VO2MaxEstimate",
    # sleep need
    "compute_sleep_need",
    "sleep_debt",
    "SleepNeed",
    # coach
    "strain_target",
    "StrainTarget",
    # pipeline
    "run_pipeline",
    "score_records",
    "ScoreReport",
    # summary
    "build_today",
    "rolling_average",
    "TodaySnapshot",
]
