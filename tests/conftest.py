"""Shared fixtures and helpers for the pulsescore test suite."""

from __future__ import annotations

import csv
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from pulsescore.records import HeartRateSample, SleepNight


# ---------------------------------------------------------------------------
# Record-building helpers
# ---------------------------------------------------------------------------


def hr_samples(day: str, hrs: list[float], start: str = "10:00") -> list[HeartRateSample]:
    """One sample per minute starting at *start*."""
    t0 = datetime.strptime(start, "%H:%M")
    return [
        HeartRateSample(day, (t0 + timedelta(minutes=i)).strftime("%H:%M"), float(hr))
        for i, hr in enumerate(hrs)
    ]


def sleep_night(
    day: str = "2024-03-01",
    deep: float = 96.0,
    light: float = 264.0,
    rem: float = 120.0,
    wake: float = 0.0,
    bedtime: str = "23:00",
) -> SleepNight:
    """A night whose *bedtime* falls on the evening before *day*.

    Bedtimes at or before noon are placed on *day* itself (after midnight).
    """
    d = date.fromisoformat(day)
    hh, mm = (int(p) for p in bedtime.split(":"))
    bed_day = d if hh <= 12 else d - timedelta(days=1)
    start = datetime(bed_day.year, bed_day.month, bed_day.day, hh, mm)
    end = start + timedelta(minutes=deep + light + rem + wake)
    return SleepNight(day, deep, light, rem, wake, start, end)


def day_range(first: str, n: int) -> list[str]:
    d0 = date.fromisoformat(first)
    return [(d0 + timedelta(days=i)).isoformat() for i in range(n)]


def write_csv(path: Path, rows: list[dict]) -> Path:
    """Write dict rows as a CSV with a header taken from the first row."""
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0]))
        writer.writeheader()
        writer.writerows(rows)
    return path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_hr():
    return hr_samples


@pytest.fixture
def make_night():
    return sleep_night


@pytest.fixture
def days():
    return day_range


@pytest.fixture
def export_dir(tmp_path: Path) -> Path:
    """A small export directory: three days of HR and two nights of sleep."""
    hr_rows = []
    for day, night_hr, peak_hr in (
        ("2024-03-01", 55, 170),
        ("2024-03-02", 58, 150),
        ("2024-03-03", 60, 120),
    ):
        hr_rows += [
            {"date": day, "time": "02:30", "heartRate": night_hr},
            {"date": day, "time": "03:30", "heartRate": night_hr + 2},
            {"date": day, "time": "18:00", "heartRate": peak_hr},
            {"date": day, "time": "18:01", "heartRate": peak_hr},
        ]
    write_csv(tmp_path / "heart_rate.csv", hr_rows)

    write_csv(tmp_path / "sleep.csv", [
        {
            "date": "2024-03-02", "deepSleepTime": 96, "shallowSleepTime": 264,
            "REMTime": 120, "wakeTime": 0,
            "start": "2024-03-01T23:00:00", "stop": "2024-03-02T07:00:00",
        },
        {
            "date": "2024-03-03", "deepSleepTime": 60, "shallowSleepTime": 200,
            "REMTime": 80, "wakeTime": 30,
            "start": "2024-03-03T00:30:00", "stop": "2024-03-03T06:40:00",
        },
    ])
    return tmp_path
