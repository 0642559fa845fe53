import logging

from contribution_calculator import ContributionCalculator
from date_ranges import (
    DateRange,
    Period,
    format_date,
    get_comparison_date_ranges,
    get_date_range,
    get_rolling_period_days,
    utc_now,
)

calculator = ContributionCalculator()


def _period_report(days, totals):
    return {
        "summary": calculator.build_summary(days, totals),
        "contributions": [day.to_dict() for day in days],
        "analytics": calculator.calculate_analytics(days),
    }


def get_contributions(api, period, now=None):
    """
    Contributions for a single period ending now.

    Returns the period, its date range, a summary, the per-day series and analytics.
    """
    date_range = get_date_range(period, now)
    logging.info(f"Fetching contributions for period: {period} ({Period.resolve(period).token})")

    days, totals = api.fetch_contributions(date_range.from_, date_range.to)
    days = calculator.normalize_series(days)

    report = {"period": period, "dateRange": date_range.to_dict()}
    report.update(_period_report(days, totals))
    return report


def get_rolling_contributions(api, time_range, rolling_period, now=None):
    """Rolling sums over the whole account history, one point per fetched day."""
    rolling_days = get_rolling_period_days(rolling_period)
    now = now or utc_now()
    account_created = api.fetch_account_created()

    logging.info(
        f"Fetching rolling contributions for time range: {time_range}, "
        f"rolling period: {rolling_period} ({rolling_days} days)"
    )
    logging.info(f"Account created: {format_date(account_created)}, fetching until: {format_date(now)}")

    days = api.fetch_all_contributions(account_created, now)
    logging.info(f"Fetched {len(days)} days of contribution data")

    points = calculator.calculate_rolling_sums(days, rolling_days)
    return {
        "timeRange": time_range,
        "rollingPeriod": rolling_period,
        "rollingDays": rolling_days,
        "dateRange": DateRange(from_=min(account_created, now), to=now).to_dict(),
        "summary": calculator.summarize_rolling(points, account_created, now),
        "rollingSums": [point.to_dict() for point in points],
    }


def get_comparison(api, period, now=None):
    """
    Compare the current period with the previous one of equal length.

    Both periods are fetched before anything is computed; a failure in either
    call fails the whole comparison.
    """
    logging.info(f"Comparison request received for period: {period}")
    current_range, previous_range = get_comparison_date_ranges(period, now)

    current_days, current_totals = api.fetch_contributions(current_range.from_, current_range.to)
    previous_days, previous_totals = api.fetch_contributions(previous_range.from_, previous_range.to)

    current = _period_report(calculator.normalize_series(current_days), current_totals)
    previous = _period_report(calculator.normalize_series(previous_days), previous_totals)
    current["streakAnalysis"] = calculator.calculate_streaks(current_days)
    previous["streakAnalysis"] = calculator.calculate_streaks(previous_days)

    changes = calculator.calculate_changes(
        current["summary"], previous["summary"], current["streakAnalysis"], previous["streakAnalysis"]
    )

    return {
        "period": period,
        "dateRanges": {"current": current_range.to_dict(), "previous": previous_range.to_dict()},
        "current": current,
        "previous": previous,
        "changes": changes,
    }


def get_user_info(api):
    user = api.fetch_user()
    return {
        "username": user.get("login"),
        "name": user.get("name"),
        "avatar": user.get("avatar_url"),
        "profile": user.get("html_url"),
        "createdAt": user.get("created_at"),
    }


def health(now=None):
    now = now or utc_now()
    return {"status": "OK", "timestamp": now.isoformat()}
