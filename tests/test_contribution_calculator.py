from datetime import datetime, timezone

import pytest

from contribution_calculator import ContributionCalculator
from models import DailyContribution, RollingPoint


@pytest.fixture
def calc():
    return ContributionCalculator()


def series(*pairs):
    return [DailyContribution(date=d, count=c) for d, c in pairs]


SCENARIO = series(("2024-01-01", 0), ("2024-01-02", 3), ("2024-01-03", 5), ("2024-01-04", 0))


def test_normalize_sorts_and_later_duplicate_wins(calc):
    days = series(("2024-01-03", 1), ("2024-01-01", 2), ("2024-01-03", 7))
    assert calc.normalize_series(days) == series(("2024-01-01", 2), ("2024-01-03", 7))


def test_normalize_accepts_mappings(calc):
    assert calc.normalize_series([{"date": "2024-01-01", "count": 4}]) == series(("2024-01-01", 4))


def test_rolling_single_entry_window_one(calc):
    assert calc.calculate_rolling_sums(series(("2024-01-01", 5)), 1) == [RollingPoint("2024-01-01", 5)]


def test_rolling_all_zero_series(calc):
    days = series(("2024-01-01", 0), ("2024-01-02", 0), ("2024-01-03", 0))
    for window in (1, 7, 365):
        assert all(p.rolling_sum == 0 for p in calc.calculate_rolling_sums(days, window))


def test_rolling_window_larger_than_series_and_gaps(calc):
    days = series(("2024-01-01", 1), ("2024-01-02", 2), ("2024-01-05", 4))
    points = calc.calculate_rolling_sums(days, 3)
    assert [p.to_dict() for p in points] == [
        {"date": "2024-01-01", "rollingSum": 1},
        {"date": "2024-01-02", "rollingSum": 3},
        {"date": "2024-01-05", "rollingSum": 4},
    ]
    assert [p.rolling_sum for p in calc.calculate_rolling_sums(days, 30)] == [1, 3, 7]


def test_rolling_crosses_month_boundary(calc):
    days = series(("2024-02-28", 2), ("2024-02-29", 3), ("2024-03-01", 4))
    assert calc.calculate_rolling_sums(days, 2)[-1].rolling_sum == 7


def test_summarize_rolling(calc):
    points = [RollingPoint("2024-01-01", 1), RollingPoint("2024-01-02", 2)]
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    now = datetime(2024, 1, 11, 6, tzinfo=timezone.utc)
    assert calc.summarize_rolling(points, created, now) == {
        "maxRolling": 2,
        "minRolling": 1,
        "avgRolling": 2,
        "totalDays": 2,
        "accountAge": 10,
    }


def test_summarize_rolling_empty(calc):
    assert calc.summarize_rolling([]) == {
        "maxRolling": 0,
        "minRolling": 0,
        "avgRolling": 0,
        "totalDays": 0,
        "accountAge": 0,
    }


def test_streak_scenario(calc):
    result = calc.calculate_streaks(SCENARIO)
    assert result["streaks"] == [{"length": 2, "startDate": "2024-01-02", "endDate": "2024-01-03"}]
    assert result["streakFrequency"][2] == 1
    assert sum(result["streakFrequency"].values()) == 1
    assert result["longestStreak"] == 2
    assert result["totalStreaks"] == 1
    assert result["averageStreakLength"] == 2


def test_streak_open_at_end_and_overflow_bucket(calc):
    days = series(("2024-01-01", 1), ("2024-01-02", 0))
    days += [DailyContribution(date=f"2024-02-{d:02d}", count=1) for d in range(1, 30)]
    days += [DailyContribution(date=f"2024-03-{d:02d}", count=2) for d in range(1, 4)]
    result = calc.calculate_streaks(days)
    assert result["totalStreaks"] == 2
    assert result["streaks"][-1] == {"length": 32, "startDate": "2024-02-01", "endDate": "2024-03-03"}
    assert result["streakFrequency"]["31+"] == 1
    assert result["streakFrequency"][1] == 1
    assert result["longestStreak"] == 32
    assert result["averageStreakLength"] == 16.5


def test_missing_day_does_not_break_streak(calc):
    days = series(("2024-01-01", 1), ("2024-01-05", 1))
    assert calc.calculate_streaks(days)["longestStreak"] == 2


def test_streak_lengths_plus_zero_days_equal_series_length(calc):
    days = series(
        ("2024-01-01", 2), ("2024-01-02", 0), ("2024-01-03", 0), ("2024-01-04", 1),
        ("2024-01-05", 9), ("2024-01-06", 0), ("2024-01-07", 4),
    )
    result = calc.calculate_streaks(days)
    zero_days = sum(1 for d in days if d.count == 0)
    assert sum(s["length"] for s in result["streaks"]) + zero_days == len(days)


def test_streaks_empty(calc):
    result = calc.calculate_streaks([])
    assert result["streaks"] == []
    assert result["longestStreak"] == 0
    assert result["totalStreaks"] == 0
    assert result["averageStreakLength"] == 0
    assert set(result["streakFrequency"]) == set(range(1, 31)) | {"31+"}


def test_analytics(calc):
    days = series(("2023-12-31", 25), ("2024-01-01", 3), ("2024-01-02", 0), ("2024-01-06", 11), ("2024-01-07", 4))
    analytics = calc.calculate_analytics(days)

    weekly = {row["dayShort"]: row["count"] for row in analytics["weeklyPattern"]}
    # 2023-12-31 and 2024-01-07 are Sundays, 2024-01-06 a Saturday
    assert analytics["weeklyPattern"][0] == {"day": "Sunday", "dayShort": "Sun", "count": 29}
    assert weekly == {"Sun": 29, "Mon": 3, "Tue": 0, "Wed": 0, "Thu": 0, "Fri": 0, "Sat": 11}
    assert analytics["intensityDistribution"] == {"0": 1, "1-3": 1, "4-10": 1, "11-20": 1, "21+": 1}
    assert analytics["yearlyData"] == {2023: 25, 2024: 18}

    total = sum(d.count for d in days)
    assert sum(weekly.values()) == sum(analytics["yearlyData"].values()) == total
    assert sum(analytics["intensityDistribution"].values()) == len(days)


def test_analytics_empty(calc):
    analytics = calc.calculate_analytics([])
    assert [row["count"] for row in analytics["weeklyPattern"]] == [0] * 7
    assert analytics["yearlyData"] == {}


@pytest.mark.parametrize(
    "current,previous,expected",
    [(0, 0, 0), (5, 0, 100), (0, 5, -100), (10, 5, 100), (5, 10, -50)],
)
def test_calculate_change(current, previous, expected):
    assert ContributionCalculator.calculate_change(current, previous) == expected


def test_build_summary_and_changes(calc):
    totals = {"totalCommits": 4, "totalIssues": 0, "totalPRs": 2, "totalReviews": 1}
    summary = calc.build_summary(SCENARIO, totals)
    assert summary["totalDays"] == 4
    assert summary["activeDays"] == 2
    assert summary["totalContributions"] == 8

    previous = dict(summary, totalCommits=2, activeDays=4, totalContributions=8)
    streaks = calc.calculate_streaks(SCENARIO)
    changes = calc.calculate_changes(summary, previous, streaks, streaks)
    assert changes["totalCommits"] == 100
    assert changes["activeDays"] == -50
    assert changes["totalContributions"] == 0
    assert changes["totalIssues"] == 0
    assert changes["longestStreak"] == 0
    assert set(changes) == {
        "totalCommits", "totalIssues", "totalPRs", "totalReviews", "activeDays",
        "totalContributions", "longestStreak", "totalStreaks", "averageStreakLength",
    }
