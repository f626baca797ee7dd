"""Typed input records and the validation boundary.

Rows arrive from flat-file exports or device APIs as loosely typed
mappings.  Each record type parses and validates a row exactly once in
``from_row``; everything downstream works with the frozen dataclasses
and never re-checks shapes.

Dates are ``YYYY-MM-DD`` strings, times are zero-padded ``HH:MM`` strings
in local wall-clock time.  Zero-padding keeps lexicographic comparison of
times equal to chronological comparison.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date as _date, datetime
from enum import Enum
from typing import Any, Mapping


class RecordValidationError(ValueError):
    """A source row does not match the expected record shape."""


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------


def _pick(row: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present, non-empty value among *keys*."""
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    raise RecordValidationError(f"missing field {keys[0]!r}")


def parse_date(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, _date):
        return value.isoformat()
    try:
        return _date.fromisoformat(str(value).strip()).isoformat()
    except ValueError:
        raise RecordValidationError(f"invalid date {value!r}") from None


def parse_time(value: Any) -> str:
    """Normalise ``H:MM`` / ``HH:MM`` (optionally ``:SS``) to ``HH:MM``."""
    text = str(value).strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(text, fmt).strftime("%H:%M")
        except ValueError:
            continue
    raise RecordValidationError(f"invalid time {value!r}")


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO datetime, keeping the wall-clock fields as written."""
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise RecordValidationError(f"invalid timestamp {value!r}") from None


def parse_number(value: Any, name: str, allow_negative: bool = False) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise RecordValidationError(f"{name} is not numeric: {value!r}") from None
    if math.isnan(number) or math.isinf(number):
        raise RecordValidationError(f"{name} is not finite: {value!r}")
    if number < 0 and not allow_negative:
        raise RecordValidationError(f"{name} is negative: {value!r}")
    return number


def _optional_number(row: Mapping[str, Any], key: str) -> float | None:
    value = row.get(key)
    if value is None or value == "":
        return None
    return parse_number(value, key)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeartRateSample:
    """One automatic heart-rate reading; one sample counts as one minute."""

    date: str
    time: str
    heart_rate: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "HeartRateSample":
        return cls(
            date=parse_date(_pick(row, "date")),
            time=parse_time(_pick(row, "time")),
            heart_rate=parse_number(_pick(row, "heart_rate", "heartRate"), "heart_rate"),
        )


@dataclass(frozen=True)
class SleepNight:
    """Nightly sleep summary.  Bedtime may fall before or after midnight."""

    date: str
    deep_min: float
    light_min: float
    rem_min: float
    wake_min: float
    start: datetime
    end: datetime

    @property
    def asleep_min(self) -> float:
        return self.deep_min + self.light_min + self.rem_min

    @property
    def in_bed_min(self) -> float:
        return self.asleep_min + self.wake_min

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SleepNight":
        return cls(
            date=parse_date(_pick(row, "date")),
            deep_min=parse_number(_pick(row, "deep_min", "deepSleepTime"), "deep_min"),
            light_min=parse_number(_pick(row, "light_min", "shallowSleepTime"), "light_min"),
            rem_min=parse_number(_pick(row, "rem_min", "REMTime"), "rem_min"),
            wake_min=parse_number(_pick(row, "wake_min", "wakeTime"), "wake_min"),
            start=parse_timestamp(_pick(row, "start")),
            end=parse_timestamp(_pick(row, "end", "stop")),
        )

    def __repr__(self) -> str:
        return (
            f"SleepNight({self.date}: asleep={self.asleep_min:.0f}min, "
            f"wake={self.wake_min:.0f}min, bed={self.start:%H:%M})"
        )


class SleepStage(str, Enum):
    """Per-minute sleep stage label."""

    LIGHT = "LIGHT"
    DEEP = "DEEP"
    REM = "REM"


@dataclass(frozen=True)
class SleepMinute:
    """One minute of staged sleep with the concurrent heart rate."""

    date: str
    time: str
    stage: SleepStage
    heart_rate: float
    respiratory_rate: float | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SleepMinute":
        raw_stage = str(_pick(row, "stage")).strip().upper()
        try:
            stage = SleepStage(raw_stage)
        except ValueError:
            raise RecordValidationError(f"unknown sleep stage {raw_stage!r}") from None
        return cls(
            date=parse_date(_pick(row, "date")),
            time=parse_time(_pick(row, "time")),
            stage=stage,
            heart_rate=parse_number(_pick(row, "heart_rate", "hr"), "heart_rate"),
            respiratory_rate=_optional_number(row, "respiratory_rate"),
        )


@dataclass(frozen=True)
class ActivityMinute:
    """Per-minute step count."""

    date: str
    time: str
    steps: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ActivityMinute":
        return cls(
            date=parse_date(_pick(row, "date")),
            time=parse_time(_pick(row, "time")),
            steps=parse_number(_pick(row, "steps"), "steps"),
        )
