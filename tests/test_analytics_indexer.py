"""Tests for pulsescore.analytics.indexer -- daily grouping and HR summaries."""

import pytest

from pulsescore.analytics.config import ScoringConfig
from pulsescore.analytics.indexer import (
    build_daily_hr_summary,
    build_index,
    group_by_day,
    in_night_window,
)
from pulsescore.records import ActivityMinute, HeartRateSample


def _s(day, time, hr):
    return HeartRateSample(day, time, float(hr))


class TestNightWindow:
    def test_start_inclusive(self):
        assert in_night_window("02:00")

    def test_end_exclusive(self):
        assert not in_night_window("05:00")

    def test_inside(self):
        assert in_night_window("04:59")

    def test_before(self):
        assert not in_night_window("01:59")

    def test_custom_window(self):
        cfg = ScoringConfig(night_start="00:00", night_end="06:00")
        assert in_night_window("05:30", cfg)

    def test_unpadded_config_times(self):
        cfg = ScoringConfig.from_mapping({"night_start": "2:00", "night_end": "5:00"})
        assert in_night_window("02:30", cfg)
        assert not in_night_window("10:00", cfg)


class TestGroupByDay:
    def test_empty(self):
        assert group_by_day([]) == {}

    def test_stable_order_within_day(self):
        recs = [
            _s("2024-03-02", "10:00", 70),
            _s("2024-03-01", "09:00", 60),
            _s("2024-03-02", "08:00", 80),
            _s("2024-03-01", "07:00", 65),
        ]
        by_day = group_by_day(recs)
        assert set(by_day) == {"2024-03-01", "2024-03-02"}
        assert [r.time for r in by_day["2024-03-02"]] == ["10:00", "08:00"]
        assert [r.time for r in by_day["2024-03-01"]] == ["09:00", "07:00"]

    def test_works_for_any_dated_record(self):
        recs = [ActivityMinute("2024-03-01", "12:00", 30.0)]
        assert group_by_day(recs)["2024-03-01"] == recs


class TestDailyHRSummary:
    def test_empty(self):
        assert build_daily_hr_summary([]) == {}

    def test_min_max_count(self):
        recs = [_s("2024-03-01", t, hr) for t, hr in
                (("10:00", 70), ("11:00", 120), ("12:00", 55))]
        s = build_daily_hr_summary(recs)["2024-03-01"]
        assert s.min == 55.0
        assert s.max == 120.0
        assert s.count == 3

    def test_running_average_matches_mean(self):
        hrs = [61, 77, 93, 58, 102, 66, 71]
        recs = [_s("2024-03-01", f"1{i}:00", hr) for i, hr in enumerate(hrs)]
        s = build_daily_hr_summary(recs)["2024-03-01"]
        assert s.avg == pytest.approx(sum(hrs) / len(hrs))

    def test_resting_is_nocturnal_minimum(self):
        recs = [
            _s("2024-03-01", "01:59", 40),  # outside window
            _s("2024-03-01", "02:00", 58),
            _s("2024-03-01", "03:15", 54),
            _s("2024-03-01", "04:59", 56),
            _s("2024-03-01", "05:00", 45),  # outside window
        ]
        s = build_daily_hr_summary(recs)["2024-03-01"]
        assert s.resting == 54.0
        assert s.min == 40.0

    def test_resting_falls_back_to_daily_min(self):
        recs = [_s("2024-03-01", "10:00", 72), _s("2024-03-01", "14:00", 64)]
        s = build_daily_hr_summary(recs)["2024-03-01"]
        assert s.resting == 64.0

    def test_days_are_independent(self):
        recs = [_s("2024-03-01", "03:00", 50), _s("2024-03-02", "12:00", 90)]
        summary = build_daily_hr_summary(recs)
        assert summary["2024-03-01"].resting == 50.0
        assert summary["2024-03-02"].resting == 90.0


class TestBuildIndex:
    def test_empty_sources(self):
        index = build_index()
        assert len(index.hr_by_day) == 0
        assert len(index.hr_summary) == 0
        assert index.nights == []
        assert index.hr_dates == []

    def test_hr_dates_sorted(self, make_hr):
        hr = make_hr("2024-03-03", [60]) + make_hr("2024-03-01", [60]) + make_hr("2024-03-02", [60])
        index = build_index(hr)
        assert index.hr_dates == ["2024-03-01", "2024-03-02", "2024-03-03"]

    def test_summary_keys_match_grouping(self, make_hr):
        hr = make_hr("2024-03-01", [60, 70]) + make_hr("2024-03-02", [80])
        index = build_index(hr)
        assert set(index.hr_summary) == set(index.hr_by_day)

    def test_nights_sorted_and_last_duplicate_wins(self, make_night):
        a = make_night("2024-03-02", deep=50)
        b = make_night("2024-03-01")
        c = make_night("2024-03-02", deep=80)
        index = build_index(sleep=[a, b, c])
        assert [n.date for n in index.nights] == ["2024-03-01", "2024-03-02"]
        assert index.sleep_by_date["2024-03-02"].deep_min == 80

    def test_index_is_read_only(self, make_hr):
        index = build_index(make_hr("2024-03-01", [60]))
        with pytest.raises(TypeError):
            index.hr_by_day["2024-03-05"] = ()

    def test_minute_streams_grouped(self):
        steps = [
            ActivityMinute("2024-03-01", "12:00", 30.0),
            ActivityMinute("2024-03-02", "12:00", 40.0),
            ActivityMinute("2024-03-01", "12:01", 35.0),
        ]
        index = build_index(activity_minutes=steps)
        assert index.activity_minute_by_day["2024-03-01"] == (steps[0], steps[2])
        assert len(index.sleep_minute_by_day) == 0
        with pytest.raises(TypeError):
            index.activity_minute_by_day["2024-03-03"] = ()
