"""Flat-file record source: load CSV exports into typed records."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar

from pulsescore.records import (
    ActivityMinute,
    HeartRateSample,
    RecordValidationError,
    SleepMinute,
    SleepNight,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Expected file name for each record stream inside an export directory
EXPORT_FILES = {
    "heart_rate": ("heart_rate.csv", HeartRateSample),
    "sleep": ("sleep.csv", SleepNight),
    "sleep_minutes": ("sleep_minute.csv", SleepMinute),
    "activity_minutes": ("activity_minute.csv", ActivityMinute),
}


@dataclass
class ExportData:
    """Typed records loaded from one export directory."""

    heart_rate: list[HeartRateSample] = field(default_factory=list)
    sleep: list[SleepNight] = field(default_factory=list)
    sleep_minutes: list[SleepMinute] = field(default_factory=list)
    activity_minutes: list[ActivityMinute] = field(default_factory=list)

    def __repr__(self) -> str:
        return (
            f"ExportData(hr={len(self.heart_rate)}, sleep={len(self.sleep)}, "
            f"sleep_min={len(self.sleep_minutes)}, "
            f"activity_min={len(self.activity_minutes)})"
        )


def load_csv(
    path: str | Path,
    parse: Callable[[Mapping[str, Any]], T],
    skip_invalid: bool = False,
) -> list[T]:
    """Read a CSV file with a header row and parse each row.

    Args:
        path: CSV file path.
        parse: Row parser, typically a record type's ``from_row``.
        skip_invalid: Log and drop rows that fail validation instead of
            aborting the load.

    Returns:
        Parsed records in file order.  A missing file yields an empty list.

    Raises:
        RecordValidationError: on the first invalid row unless *skip_invalid*.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("File not found: %s", path)
        return []

    records: list[T] = []
    skipped = 0
    # utf-8-sig drops a leading BOM from spreadsheet exports
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        for row in reader:
            if not any(v.strip() for v in row.values() if isinstance(v, str)):
                continue
            try:
                records.append(parse(row))
            except RecordValidationError as e:
                message = f"{path.name} line {reader.line_num}: {e}"
                if not skip_invalid:
                    raise RecordValidationError(message) from e
                skipped += 1
                logger.warning("Skipping invalid row: %s", message)

    logger.debug("Loaded %d rows from %s (%d skipped)", len(records), path.name, skipped)
    return records


def load_directory(directory: str | Path, skip_invalid: bool = False) -> ExportData:
    """Load every known export file present in *directory*."""
    directory = Path(directory)
    data = ExportData()
    for attr, (filename, record_type) in EXPORT_FILES.items():
        path = directory / filename
        if not path.exists():
            logger.debug("No %s in %s", filename, directory)
            continue
        setattr(data, attr, load_csv(path, record_type.from_row, skip_invalid))
    return data
