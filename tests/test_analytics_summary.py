"""Tests for pulsescore.analytics.summary and coach -- today snapshot."""

import json
from datetime import date

import pytest

from pulsescore.analytics.coach import NO_DATA_TARGET, strain_target
from pulsescore.analytics.pipeline import score_records
from pulsescore.analytics.recovery import score_recovery
from pulsescore.analytics.summary import build_today, rolling_average


class TestStrainTarget:
    def test_no_recovery(self):
        target = strain_target(None)
        assert target is NO_DATA_TARGET
        assert (target.target_min, target.target_max) == (7.0, 14.0)
        assert target.label == "MODERATE"

    def test_green(self):
        rec = score_recovery("2024-03-01", 60.0, 60.0, None, None)  # 75 -> green
        target = strain_target(rec)
        assert rec.level == "green"
        assert target.label == "PUSH HARD"
        assert (target.target_min, target.target_max) == (14.0, 21.0)

    def test_yellow(self):
        rec = score_recovery("2024-03-01", None, 60.0, None, None)  # 55
        assert strain_target(rec).label == "MODERATE"

    def test_red(self, make_night):
        night = make_night(deep=0, light=0, rem=0, wake=10)
        rec = score_recovery("2024-03-01", 80.0, 60.0, night, None)  # 15
        assert rec.level == "red"
        target = strain_target(rec)
        assert target.label == "ACTIVE RECOVERY"
        assert (target.target_min, target.target_max) == (0.0, 7.0)


class TestRollingAverage:
    def test_empty(self):
        assert rolling_average({}, "2024-03-07") is None

    def test_calendar_window(self):
        values = {
            "2024-02-29": 10.0,  # outside the 7-day window
            "2024-03-01": 40.0,
            "2024-03-05": 60.0,
            "2024-03-07": 80.0,
            "2024-03-08": 99.0,  # after the end date
        }
        assert rolling_average(values, "2024-03-07") == 60.0

    def test_rounding(self):
        values = {"2024-03-06": 10.0, "2024-03-07": 10.25}
        assert rolling_average(values, "2024-03-07", ndigits=1) == 10.1
        assert rolling_average(values, "2024-03-07") == 10.0

    def test_half_rounds_up(self):
        assert rolling_average({"2024-03-06": 1.0, "2024-03-07": 2.0}, "2024-03-07") == 2.0


@pytest.fixture
def history(make_hr, make_night, days):
    dates = days("2024-03-01", 5)
    hr = []
    for day in dates:
        hr += make_hr(day, [55, 56, 57], start="03:00")
        hr += make_hr(day, [180] * 40, start="17:00")
    sleep = [make_night(day, light=204) for day in dates[:4]]  # 420 min asleep
    sleep.append(make_night(dates[4], deep=0, light=0, rem=0, wake=20))
    return dates, hr, sleep


class TestBuildToday:
    def test_defaults_to_latest_hr_date(self, history):
        dates, hr, sleep = history
        index, report = score_records(hr, sleep)
        snap = build_today(report, index)
        assert snap.date == dates[-1]
        assert snap.strain == report.strain[dates[-1]]
        assert snap.recovery == report.recovery[dates[-1]]
        assert snap.vo2max == report.vo2max

    def test_last_night_skips_empty_nights(self, history):
        dates, hr, sleep = history
        index, report = score_records(hr, sleep)
        snap = build_today(report, index)
        assert snap.last_night == dates[3]
        assert snap.sleep_score == report.sleep_score[dates[3]]

    def test_sleep_need_uses_recent_debt(self, history):
        dates, hr, sleep = history
        index, report = score_records(hr, sleep)
        snap = build_today(report, index)
        # 4 nights x 60 min short + 1 night x 480 min short = 720 -> capped 30
        assert snap.sleep_need.debt_adjust_min == 30.0
        # 40 min peak -> TRIMP 120 -> strain 14.7 -> +30
        assert report.strain[dates[-1]].strain == 14.7
        assert snap.sleep_need.strain_adjust_min == 30.0
        assert snap.sleep_need.recommended_min == 540.0

    def test_explicit_today_limits_history(self, history):
        dates, hr, sleep = history
        index, report = score_records(hr, sleep)
        snap = build_today(report, index, today=date.fromisoformat(dates[1]))
        assert snap.date == dates[1]
        assert snap.last_night == dates[1]
        # two nights 60 min short -> 120 * 0.25
        assert snap.sleep_need.debt_adjust_min == 30.0
        assert snap.avg_strain_7d == 14.7

    def test_coach_follows_recovery(self, history):
        dates, hr, sleep = history
        index, report = score_records(hr, sleep)
        snap = build_today(report, index)
        assert snap.strain_coach == strain_target(report.recovery[dates[-1]])

    def test_seven_day_averages(self, history):
        dates, hr, sleep = history
        index, report = score_records(hr, sleep)
        snap = build_today(report, index)
        recoveries = [report.recovery[d].score for d in dates]
        assert snap.avg_recovery_7d == pytest.approx(round(sum(recoveries) / len(recoveries)), abs=1)
        assert snap.avg_strain_7d == 14.7

    def test_day_without_data(self, history):
        _dates, hr, sleep = history
        index, report = score_records(hr, sleep)
        snap = build_today(report, index, today="2024-06-01")
        assert snap.strain is None
        assert snap.recovery is None
        assert snap.sleep_need is None
        assert snap.strain_coach is NO_DATA_TARGET
        assert snap.avg_recovery_7d is None

    def test_no_data_at_all(self):
        index, report = score_records()
        snap = build_today(report, index)
        assert snap.date == date.today().isoformat()
        assert snap.vo2max is None
        assert snap.last_night is None

    def test_json(self, history):
        _dates, hr, sleep = history
        index, report = score_records(hr, sleep)
        payload = json.loads(build_today(report, index).to_json())
        assert payload["strain"]["level"] == "high"
        assert payload["strain_coach"]["label"] in {"PUSH HARD", "MODERATE", "ACTIVE RECOVERY"}
        assert "TodaySnapshot(" in repr(build_today(report, index))
